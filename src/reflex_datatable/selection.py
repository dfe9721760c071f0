"""Row selection tracked by identity, independent of the visible page.

Selections are stored as row identities obtained from an injected
``get_id(row)``, so a row stays selected while the user pages away from it.
Identities are kept when a filter hides their rows: they are reported again
once the filter lets the rows back in, and only :meth:`SelectionManager.clear`
(or deselecting) forgets them.
"""

from collections.abc import Callable, Iterable
from typing import Any

from reflex_datatable.exceptions import GridConfigurationError
from reflex_datatable.models import Identity, SelectionMode, SelectionState, default_get_id


class SelectionManager:
    """Selected identities under SINGLE or MULTIPLE mode.

    Insertion order is preserved so change notifications list ids in the
    order the user picked them.
    """

    def __init__(
        self,
        mode: SelectionMode = SelectionMode.MULTIPLE,
        get_id: Callable[[Any], Identity] = default_get_id,
        selected_ids: Iterable[Identity] = (),
    ) -> None:
        self.mode = SelectionMode(mode)
        self.get_id = get_id
        self._selected: dict[Identity, None] = {}
        self.replace(selected_ids)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def selected_ids(self) -> tuple[Identity, ...]:
        return tuple(self._selected)

    @property
    def state(self) -> SelectionState:
        return SelectionState(mode=self.mode, selected_ids=self.selected_ids)

    def __len__(self) -> int:
        return len(self._selected)

    def __contains__(self, row_id: object) -> bool:
        return row_id in self._selected

    def is_selected(self, row_id: Identity) -> bool:
        return row_id in self._selected

    def row_id(self, row: Any) -> Identity:
        """Return the identity of *row*; exceptions from ``get_id`` propagate."""
        return self.get_id(row)

    def get_selected_items(self, rows: Iterable[Any]) -> list[Any]:
        """Return the rows of *rows* whose identity is selected, in *rows* order.

        Pass the full filtered and sorted dataset, not the current page, so
        selections on other pages are included.
        """
        if not self._selected:
            return []
        return [row for row in rows if self.get_id(row) in self._selected]

    # ------------------------------------------------------------------
    # Mutations (each returns whether the selection changed)
    # ------------------------------------------------------------------

    def toggle(self, row_id: Identity, selected: bool | None = None) -> bool:
        """Select or deselect *row_id*.

        Args:
            row_id: The row identity.
            selected: ``True`` to select, ``False`` to deselect, ``None`` to
                flip the current state.
        """
        if selected is None:
            selected = row_id not in self._selected
        return self.select(row_id) if selected else self.deselect(row_id)

    def select(self, row_id: Identity) -> bool:
        if self.mode is SelectionMode.SINGLE:
            if list(self._selected) == [row_id]:
                return False
            self._selected = {row_id: None}
            return True
        if row_id in self._selected:
            return False
        self._selected[row_id] = None
        return True

    def deselect(self, row_id: Identity) -> bool:
        if row_id not in self._selected:
            return False
        del self._selected[row_id]
        return True

    def replace(self, row_ids: Iterable[Identity]) -> bool:
        """Replace the whole selection, e.g. to follow a controlled value.

        Raises:
            GridConfigurationError: If more than one distinct id is given in
                SINGLE mode.
        """
        new = dict.fromkeys(row_ids)
        if self.mode is SelectionMode.SINGLE and len(new) > 1:
            raise GridConfigurationError(
                "SINGLE selection mode accepts at most one selected id",
                selected_ids=list(new),
            )
        if list(new) == list(self._selected):
            return False
        self._selected = new
        return True

    def clear(self) -> bool:
        if not self._selected:
            return False
        self._selected = {}
        return True
