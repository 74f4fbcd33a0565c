import uuid
from typing import Any, Dict, List, Optional, Tuple

from azure.core import MatchConditions
from azure.cosmos.aio import ContainerProxy
from azure.cosmos.exceptions import CosmosHttpResponseError

from catalog_api.exceptions import DatabaseError, VersionConflictError
from catalog_api.logging_config import get_child_logger
from catalog_api.services.filters import Predicate
from catalog_api.services.paging import PageRequest
from catalog_api.store.base import Record, RecordStore, utc_now

logger = get_child_logger("store.cosmos")


def _strip_system_properties(item: Dict[str, Any]) -> Record:
    """Drop Cosmos DB bookkeeping (_rid, _self, _etag, _attachments, _ts)."""
    return {key: value for key, value in item.items() if not key.startswith("_")}


class CosmosRecordStore(RecordStore):
    """
    Record store over one Cosmos DB container partitioned on /id.

    Version checks on replace are backed by the item's ETag, so a write that
    races another writer between read and replace fails with 412.
    """

    def __init__(self, container: ContainerProxy, name: str):
        self.container = container
        self.name = name

    def _database_error(self, action: str, e: Exception, **extra) -> DatabaseError:
        if isinstance(e, CosmosHttpResponseError):
            logger.error(
                f"Cosmos DB error during {action}",
                extra={
                    "store": self.name,
                    "status_code": e.status_code,
                    "error_message": e.message,
                    **extra,
                },
                exc_info=True,
            )
            return DatabaseError(
                f"Cosmos DB error during {action}: Status Code {e.status_code}, Message: {e.message}",
                original_exception=e,
            )
        logger.error(
            f"Unexpected error during {action}",
            extra={"store": self.name, "error_type": type(e).__name__, **extra},
            exc_info=True,
        )
        return DatabaseError(
            "An unexpected error occurred during database operation.",
            original_exception=e,
        )

    async def _read(self, record_id: str) -> Optional[Dict[str, Any]]:
        try:
            return await self.container.read_item(item=record_id, partition_key=record_id)
        except CosmosHttpResponseError as e:
            if e.status_code == 404:
                return None
            raise self._database_error("read", e, record_id=record_id) from e
        except Exception as e:
            raise self._database_error("read", e, record_id=record_id) from e

    async def find_by_id(self, record_id: str) -> Optional[Record]:
        item = await self._read(record_id)
        return _strip_system_properties(item) if item is not None else None

    async def scan(
        self, predicate: Predicate, page_request: PageRequest
    ) -> Tuple[List[Record], int]:
        where, params = predicate.to_sql("c")
        sort_key = page_request.sort_key
        direction = "ASC" if sort_key.ascending else "DESC"

        try:
            count_query = f"SELECT VALUE COUNT(1) FROM c WHERE {where}"
            counts = [
                count
                async for count in self.container.query_items(
                    query=count_query, parameters=params
                )
            ]
            total_count = counts[0] if counts else 0

            if page_request.page_size <= 0:
                return [], total_count

            query = (
                f"SELECT * FROM c WHERE {where} "
                f"ORDER BY c.{sort_key.field} {direction} "
                "OFFSET @offset LIMIT @limit"
            )
            page_params = params + [
                {"name": "@offset", "value": page_request.offset},
                {"name": "@limit", "value": page_request.page_size},
            ]
            items = [
                _strip_system_properties(item)
                async for item in self.container.query_items(
                    query=query, parameters=page_params
                )
            ]
        except Exception as e:
            raise self._database_error("scan", e, predicate=repr(predicate)) from e

        logger.debug(
            f"Scanned {len(items)} of {total_count} records",
            extra={"store": self.name, "count": len(items), "total_count": total_count},
        )
        return items, total_count

    async def insert(self, record: Record) -> Record:
        now = utc_now()
        data = {
            **record,
            "id": str(uuid.uuid4()),
            "version": 0,
            "created_at": now,
            "updated_at": now,
        }
        try:
            result = await self.container.create_item(body=data)
        except Exception as e:
            raise self._database_error("insert", e, record_id=data["id"]) from e
        return _strip_system_properties(result)

    async def replace(self, record: Record, expected_version: int) -> Optional[Record]:
        record_id = record["id"]
        current = await self._read(record_id)
        if current is None:
            return None
        if current["version"] != expected_version:
            raise VersionConflictError(
                f"Record '{record_id}' is at version {current['version']}, "
                f"expected {expected_version}",
                current_version=current["version"],
            )

        body = {
            **_strip_system_properties(record),
            "id": record_id,
            "version": current["version"] + 1,
            "created_at": current["created_at"],
            "updated_at": utc_now(),
        }
        try:
            result = await self.container.replace_item(
                item=record_id,
                body=body,
                etag=current["_etag"],
                match_condition=MatchConditions.IfNotModified,
            )
        except CosmosHttpResponseError as e:
            if e.status_code == 404:
                return None
            if e.status_code == 412:  # Precondition Failed (ETag mismatch)
                raise VersionConflictError(
                    f"Record '{record_id}' has been modified since last retrieved (ETag mismatch)."
                ) from e
            raise self._database_error("replace", e, record_id=record_id) from e
        except Exception as e:
            raise self._database_error("replace", e, record_id=record_id) from e
        return _strip_system_properties(result)

    async def delete_by_id(self, record_id: str) -> bool:
        try:
            await self.container.delete_item(item=record_id, partition_key=record_id)
            return True
        except CosmosHttpResponseError as e:
            if e.status_code == 404:
                return False
            raise self._database_error("delete", e, record_id=record_id) from e
        except Exception as e:
            raise self._database_error("delete", e, record_id=record_id) from e
