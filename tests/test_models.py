"""Tests for column descriptors, state and option models."""

import pytest
from pydantic import ValidationError

from reflex_datatable.models import (
    ColumnDescriptor,
    PaginationOptions,
    PaginationState,
    SelectionMode,
    SelectionOptions,
    SortDirection,
    SortingOptions,
    SortState,
    default_get_id,
    find_column,
)


class TestColumnDescriptor:
    """Tests for ColumnDescriptor."""

    def test_defaults(self):
        column = ColumnDescriptor(field="pickup.city_name")
        assert column.header == "City Name"
        assert column.sortable
        assert column.filterable
        assert column.comparator is None

    def test_explicit_header_kept(self):
        assert ColumnDescriptor(field="rate", header="Rate ($)").header == "Rate ($)"

    def test_malformed_field_rejected(self):
        with pytest.raises(ValidationError):
            ColumnDescriptor(field="a..b")

    def test_camel_case_dump_excludes_comparator(self):
        column = ColumnDescriptor(field="rate", comparator=lambda a, b: 0)
        data = column.model_dump(by_alias=True)
        assert data == {"field": "rate", "header": "Rate", "sortable": True, "filterable": True}

    def test_frozen(self):
        column = ColumnDescriptor(field="rate")
        with pytest.raises(ValidationError):
            column.sortable = False

    def test_find_column(self):
        columns = [ColumnDescriptor(field="a"), ColumnDescriptor(field="b")]
        assert find_column(columns, "b") is columns[1]
        assert find_column(columns, "c") is None


class TestStateModels:
    """Tests for the state snapshots."""

    def test_sort_direction_flipped(self):
        assert SortDirection.ASC.flipped() is SortDirection.DESC
        assert SortDirection.DESC.flipped() is SortDirection.ASC

    def test_sort_state_defaults(self):
        state = SortState()
        assert state.field is None
        assert state.direction is SortDirection.ASC

    def test_pagination_state_total_pages(self):
        assert PaginationState(current_page=1, page_size=10, total_items=0).total_pages == 1
        assert PaginationState(current_page=1, page_size=10, total_items=23).total_pages == 3

    def test_pagination_state_alias_dump(self):
        data = PaginationState(current_page=2).model_dump(by_alias=True)
        assert data["currentPage"] == 2
        assert data["pageSize"] == 10


class TestPaginationOptions:
    """Tests for PaginationOptions validation."""

    def test_page_size_below_one_rejected(self):
        with pytest.raises(ValidationError):
            PaginationOptions(page_size=0)

    def test_custom_size_merged_into_default_options(self):
        options = PaginationOptions(page_size=15)
        assert options.page_size_options == [10, 15, 25, 50, 100]

    def test_size_must_be_in_explicit_options(self):
        with pytest.raises(ValidationError):
            PaginationOptions(page_size=15, page_size_options=[10, 20])

    def test_negative_total_items_rejected(self):
        with pytest.raises(ValidationError):
            PaginationOptions(total_items=-1)

    def test_accepts_camel_case(self):
        options = PaginationOptions.model_validate({"pageSize": 25, "currentPage": 2})
        assert (options.page_size, options.current_page) == (25, 2)


class TestSortingAndSelectionOptions:
    """Tests for SortingOptions and SelectionOptions."""

    def test_direction_from_string(self):
        assert SortingOptions(default_sort_direction="desc").default_sort_direction is SortDirection.DESC

    def test_malformed_default_sort_field(self):
        with pytest.raises(ValidationError):
            SortingOptions(default_sort_field=".rate")

    def test_single_mode_with_two_ids_rejected(self):
        with pytest.raises(ValidationError):
            SelectionOptions(mode=SelectionMode.SINGLE, selected_ids=[1, 2])

    def test_unhashable_id_rejected(self):
        with pytest.raises(ValidationError):
            SelectionOptions(selected_ids=[[1]])

    def test_default_get_id(self):
        assert SelectionOptions().get_id is default_get_id
        assert default_get_id({"id": 7}) == 7
        assert default_get_id({"key": 7}) is None
