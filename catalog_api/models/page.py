from typing import Generic, List, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """
    One window of a listing.

    page_number is one-based, as exposed to clients.
    """

    items: List[T]
    total_count: int
    page_number: int
    page_size: int
    total_pages: int

    model_config = ConfigDict(extra="forbid")
