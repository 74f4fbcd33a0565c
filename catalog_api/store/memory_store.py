import asyncio
import copy
import uuid
from typing import Dict, List, Optional, Tuple

from catalog_api.exceptions import VersionConflictError
from catalog_api.logging_config import get_child_logger
from catalog_api.services.filters import Predicate
from catalog_api.services.paging import PageRequest
from catalog_api.store.base import Record, RecordStore, utc_now

logger = get_child_logger("store.memory")


class InMemoryRecordStore(RecordStore):
    """Process-local store. Writes are serialized with an asyncio lock."""

    def __init__(self, name: str = "records"):
        self.name = name
        self._records: Dict[str, Record] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._records)

    async def find_by_id(self, record_id: str) -> Optional[Record]:
        record = self._records.get(record_id)
        return copy.deepcopy(record) if record is not None else None

    async def scan(
        self, predicate: Predicate, page_request: PageRequest
    ) -> Tuple[List[Record], int]:
        sort_field = page_request.sort_key.field
        matches = sorted(
            (record for record in self._records.values() if predicate(record)),
            key=lambda record: (str(record.get(sort_field) or ""), record["id"]),
            reverse=not page_request.sort_key.ascending,
        )
        if page_request.page_size <= 0:
            return [], len(matches)
        start = page_request.offset
        window = matches[start:start + page_request.page_size]
        return [copy.deepcopy(record) for record in window], len(matches)

    async def insert(self, record: Record) -> Record:
        async with self._lock:
            record_id = str(uuid.uuid4())
            while record_id in self._records:
                record_id = str(uuid.uuid4())
            now = utc_now()
            stored = {
                **record,
                "id": record_id,
                "version": 0,
                "created_at": now,
                "updated_at": now,
            }
            self._records[record_id] = stored
            logger.debug("Inserted record", extra={"store": self.name, "record_id": record_id})
            return copy.deepcopy(stored)

    async def replace(self, record: Record, expected_version: int) -> Optional[Record]:
        record_id = record["id"]
        async with self._lock:
            current = self._records.get(record_id)
            if current is None:
                return None
            if current["version"] != expected_version:
                raise VersionConflictError(
                    f"Record '{record_id}' is at version {current['version']}, "
                    f"expected {expected_version}",
                    current_version=current["version"],
                )
            stored = {
                **record,
                "id": record_id,
                "version": current["version"] + 1,
                "created_at": current["created_at"],
                "updated_at": utc_now(),
            }
            self._records[record_id] = stored
            return copy.deepcopy(stored)

    async def delete_by_id(self, record_id: str) -> bool:
        async with self._lock:
            return self._records.pop(record_id, None) is not None
