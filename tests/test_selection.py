"""Tests for identity-based row selection."""

import pytest

from reflex_datatable.exceptions import GridConfigurationError
from reflex_datatable.models import SelectionMode
from reflex_datatable.selection import SelectionManager

ROWS = [{"id": i, "name": f"row{i}"} for i in range(1, 6)]


class TestMultipleMode:
    """Tests for MULTIPLE selection."""

    def test_starts_empty(self):
        manager = SelectionManager()
        assert manager.selected_ids == ()
        assert len(manager) == 0

    def test_initial_ids(self):
        manager = SelectionManager(selected_ids=[2, 4])
        assert manager.selected_ids == (2, 4)
        assert 2 in manager
        assert manager.is_selected(4)

    def test_toggle_adds_and_removes(self):
        manager = SelectionManager()
        assert manager.toggle(3)
        assert manager.selected_ids == (3,)
        assert manager.toggle(3)
        assert manager.selected_ids == ()

    def test_toggle_explicit_state(self):
        """toggle(id, True) on a selected id is a no-op."""
        manager = SelectionManager(selected_ids=[1])
        assert not manager.toggle(1, True)
        assert not manager.toggle(2, False)
        assert manager.toggle(1, False)

    def test_keeps_insertion_order(self):
        manager = SelectionManager()
        for row_id in (5, 1, 3):
            manager.select(row_id)
        assert manager.selected_ids == (5, 1, 3)

    def test_get_selected_items_follows_row_order(self):
        """Selected rows are returned in dataset order, not selection order."""
        manager = SelectionManager(selected_ids=[5, 1])
        assert [r["id"] for r in manager.get_selected_items(ROWS)] == [1, 5]

    def test_ids_not_in_rows_are_kept(self):
        """An id whose row is absent stays selected but yields no item."""
        manager = SelectionManager(selected_ids=[1, 99])
        assert [r["id"] for r in manager.get_selected_items(ROWS)] == [1]
        assert manager.selected_ids == (1, 99)

    def test_clear(self):
        manager = SelectionManager(selected_ids=[1, 2])
        assert manager.clear()
        assert not manager.clear()
        assert manager.selected_ids == ()

    def test_replace(self):
        manager = SelectionManager(selected_ids=[1])
        assert manager.replace([2, 3])
        assert not manager.replace([2, 3])
        assert manager.selected_ids == (2, 3)

    def test_custom_get_id(self):
        manager = SelectionManager(get_id=lambda row: row["name"], selected_ids=["row2"])
        assert [r["id"] for r in manager.get_selected_items(ROWS)] == [2]
        assert manager.row_id(ROWS[0]) == "row1"

    def test_get_id_errors_propagate(self):
        manager = SelectionManager(get_id=lambda row: row["missing"], selected_ids=[1])
        with pytest.raises(KeyError):
            manager.get_selected_items(ROWS)

    def test_state_snapshot(self):
        state = SelectionManager(selected_ids=[1]).state
        assert state.mode is SelectionMode.MULTIPLE
        assert state.selected_ids == (1,)


class TestSingleMode:
    """Tests for SINGLE selection."""

    def test_select_replaces(self):
        """Selecting a second row replaces the first."""
        manager = SelectionManager(mode=SelectionMode.SINGLE)
        manager.select(1)
        assert manager.select(2)
        assert manager.selected_ids == (2,)

    def test_reselect_is_noop(self):
        manager = SelectionManager(mode=SelectionMode.SINGLE, selected_ids=[1])
        assert not manager.select(1)

    def test_toggle_selected_deselects(self):
        manager = SelectionManager(mode=SelectionMode.SINGLE, selected_ids=[1])
        assert manager.toggle(1)
        assert manager.selected_ids == ()

    def test_never_more_than_one(self):
        manager = SelectionManager(mode=SelectionMode.SINGLE)
        for row_id in range(10):
            manager.toggle(row_id)
            assert len(manager) <= 1

    def test_replace_with_many_rejected(self):
        manager = SelectionManager(mode=SelectionMode.SINGLE)
        with pytest.raises(GridConfigurationError):
            manager.replace([1, 2])

    def test_mode_from_string(self):
        assert SelectionManager(mode="single").mode is SelectionMode.SINGLE
