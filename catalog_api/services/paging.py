"""
Turns a client's one-based page request into a bounded, zero-based window.
"""
from typing import NamedTuple, Optional

DEFAULT_PAGE = 0
DEFAULT_PAGE_SIZE = 25
MAX_PAGE_SIZE = 1000


class SortKey(NamedTuple):
    field: str
    ascending: bool = True


SORT_BY_NAME = SortKey("name")


class PageRequest(NamedTuple):
    page_index: int  # zero-based
    page_size: int
    sort_key: SortKey = SORT_BY_NAME

    @property
    def offset(self) -> int:
        return self.page_index * max(self.page_size, 0)


def normalize(
    page_number: Optional[int] = None, page_size: Optional[int] = None
) -> PageRequest:
    """
    Normalize a requested page.

    Args:
        page_number: One-based page number; missing or < 1 means the first page
        page_size: Requested size; missing means DEFAULT_PAGE_SIZE and anything
            above MAX_PAGE_SIZE is clamped. Zero or negative sizes pass through.

    Returns:
        PageRequest sorted ascending by name
    """
    if page_number is not None and page_number > 0:
        page_index = page_number - 1
    else:
        page_index = DEFAULT_PAGE

    if page_size is None:
        size = DEFAULT_PAGE_SIZE
    elif page_size > MAX_PAGE_SIZE:
        size = MAX_PAGE_SIZE
    else:
        size = page_size

    return PageRequest(page_index=page_index, page_size=size, sort_key=SORT_BY_NAME)


def total_pages(total_count: int, page_size: int) -> int:
    if page_size <= 0:
        return 0
    return -(-total_count // page_size)
