"""Tests for the pagination stage."""

import pytest

from reflex_datatable.exceptions import GridConfigurationError
from reflex_datatable.pagination import clamp_page, compute_total_pages, paginate

ROWS = list(range(1, 24))  # 23 items


class TestComputeTotalPages:
    """Tests for page counting."""

    @pytest.mark.parametrize(
        ("total_items", "page_size", "expected"),
        [(0, 10, 1), (1, 10, 1), (10, 10, 1), (11, 10, 2), (23, 10, 3), (23, 1, 23)],
    )
    def test_counts(self, total_items, page_size, expected):
        assert compute_total_pages(total_items, page_size) == expected

    def test_page_size_must_be_positive(self):
        with pytest.raises(GridConfigurationError):
            compute_total_pages(10, 0)

    def test_total_items_must_not_be_negative(self):
        with pytest.raises(GridConfigurationError):
            compute_total_pages(-1, 10)


class TestClampPage:
    """Tests for clamp_page()."""

    def test_in_range(self):
        assert clamp_page(2, 3) == 2

    def test_below_range(self):
        assert clamp_page(0, 3) == 1
        assert clamp_page(-4, 3) == 1

    def test_above_range(self):
        assert clamp_page(9, 3) == 3


class TestPaginate:
    """Tests for paginate()."""

    def test_first_page(self):
        page = paginate(ROWS, 1, 10)
        assert page.page_items == list(range(1, 11))
        assert page.total_pages == 3
        assert (page.start_index, page.end_index) == (1, 10)
        assert not page.has_previous
        assert page.has_next

    def test_last_partial_page(self):
        page = paginate(ROWS, 3, 10)
        assert page.page_items == [21, 22, 23]
        assert (page.start_index, page.end_index) == (21, 23)
        assert page.has_previous
        assert not page.has_next

    def test_out_of_range_is_clamped(self):
        assert paginate(ROWS, 99, 10).current_page == 3
        assert paginate(ROWS, 0, 10).current_page == 1

    def test_empty_dataset_has_one_empty_page(self):
        page = paginate([], 1, 10)
        assert page.page_items == []
        assert page.total_pages == 1
        assert page.total_items == 0
        assert (page.start_index, page.end_index) == (0, 0)
        assert page.is_empty

    def test_pages_partition_the_rows(self):
        """Concatenating every page reproduces the input exactly once."""
        for size in (1, 4, 7, 10, 23, 50):
            total = compute_total_pages(len(ROWS), size)
            joined = []
            for number in range(1, total + 1):
                joined.extend(paginate(ROWS, number, size).page_items)
            assert joined == ROWS

    def test_server_side_rows_not_sliced(self):
        """With total_items the given rows are the page and are not sliced."""
        page = paginate([41, 42, 43], 5, 10, total_items=95)
        assert page.page_items == [41, 42, 43]
        assert page.total_pages == 10
        assert page.total_items == 95
        assert page.current_page == 5
        assert page.start_index == 41

    def test_input_not_modified(self):
        rows = list(ROWS)
        paginate(rows, 2, 5)
        assert rows == ROWS
