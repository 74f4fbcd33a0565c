"""Unit tests for page normalization."""

import pytest

from catalog_api.services.paging import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    SORT_BY_NAME,
    PageRequest,
    normalize,
    total_pages,
)


class TestNormalize:
    @pytest.mark.parametrize("page_number", [1, 2, 7, 500])
    def test_one_based_page_becomes_zero_based_index(self, page_number):
        assert normalize(page_number, 10).page_index == page_number - 1

    @pytest.mark.parametrize("page_number", [None, 0, -1, -25])
    def test_missing_or_non_positive_page_is_first_page(self, page_number):
        assert normalize(page_number, 10).page_index == 0

    def test_missing_size_uses_default(self):
        assert normalize(3, None).page_size == DEFAULT_PAGE_SIZE == 25

    @pytest.mark.parametrize("page_size", [1001, 5000, 10**9])
    def test_large_size_is_clamped(self, page_size):
        assert normalize(1, page_size).page_size == MAX_PAGE_SIZE == 1000

    def test_exact_max_is_kept(self):
        assert normalize(1, 1000).page_size == 1000

    @pytest.mark.parametrize("page_size", [0, -5])
    def test_small_sizes_pass_through(self, page_size):
        assert normalize(1, page_size).page_size == page_size

    def test_sort_is_always_ascending_by_name(self):
        request = normalize(4, 50)
        assert request.sort_key == SORT_BY_NAME
        assert request.sort_key.field == "name"
        assert request.sort_key.ascending is True

    def test_defaults(self):
        assert normalize() == PageRequest(page_index=0, page_size=25, sort_key=SORT_BY_NAME)


class TestOffsetsAndTotals:
    def test_offset(self):
        assert normalize(3, 20).offset == 40

    def test_offset_with_non_positive_size(self):
        assert normalize(3, 0).offset == 0

    def test_total_pages_rounds_up(self):
        assert total_pages(51, 25) == 3
        assert total_pages(50, 25) == 2
        assert total_pages(0, 25) == 0

    def test_total_pages_without_size(self):
        assert total_pages(10, 0) == 0
