from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from catalog_api.services.filters import Predicate
from catalog_api.services.paging import PageRequest

Record = Dict[str, Any]


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class RecordStore(ABC):
    """
    Holds the records of one resource type, keyed by id.

    The store owns the system fields: insert assigns id, version 0 and both
    timestamps; replace bumps version by one and refreshes updated_at.
    """

    @abstractmethod
    async def find_by_id(self, record_id: str) -> Optional[Record]:
        ...

    @abstractmethod
    async def scan(
        self, predicate: Predicate, page_request: PageRequest
    ) -> Tuple[List[Record], int]:
        """Return one sorted page of matching records and the total match count."""

    @abstractmethod
    async def insert(self, record: Record) -> Record:
        ...

    @abstractmethod
    async def replace(self, record: Record, expected_version: int) -> Optional[Record]:
        """
        Write record over the stored one with the same id.

        Returns None if the record no longer exists.

        Raises:
            VersionConflictError: If the stored version is not expected_version
        """

    @abstractmethod
    async def delete_by_id(self, record_id: str) -> bool:
        ...

    async def exists_by_id(self, record_id: str) -> bool:
        return await self.find_by_id(record_id) is not None
