from enum import Enum
from typing import Any, Dict, Mapping, Optional, Type, Union

from pydantic import BaseModel, ValidationError

from catalog_api.exceptions import VersionConflictError
from catalog_api.logging_config import get_child_logger, tracer
from catalog_api.models.page import Page
from catalog_api.outcomes import (
    Conflict,
    Created,
    Invalid,
    Lookup,
    NotFound,
    Present,
    Written,
)
from catalog_api.resources import ResourceType
from catalog_api.services.concurrency import guard
from catalog_api.services.filters import build_predicate
from catalog_api.services.merge import patch_fields, replace_fields
from catalog_api.services.paging import normalize, total_pages
from catalog_api.services.projection import project
from catalog_api.store.base import Record, RecordStore

logger = get_child_logger("services.resource")

Candidate = Union[BaseModel, Mapping[str, Any]]


def _validate(model: Type[BaseModel], candidate: Candidate) -> Union[BaseModel, Invalid]:
    if isinstance(candidate, model):
        return candidate
    if isinstance(candidate, BaseModel):
        candidate = candidate.model_dump(exclude_unset=True)
    try:
        return model.model_validate(candidate)
    except ValidationError as e:
        return Invalid(
            errors=[
                {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
                for error in e.errors()
            ]
        )


class ResourceService:
    """
    List, get, create, update, patch and delete for one resource type.

    Expected outcomes (missing record, invalid candidate, stale version) are
    returned as values from catalog_api.outcomes. Store faults propagate.
    """

    def __init__(self, resource: ResourceType, store: RecordStore):
        self.resource = resource
        self.store = store

    def _to_response(self, record: Record) -> BaseModel:
        return self.resource.response_model.model_validate(record)

    async def list_records(
        self,
        name: Optional[str] = None,
        category: Optional[Union[str, Enum]] = None,
        page_number: Optional[int] = None,
        page_size: Optional[int] = None,
        show_inventory: Optional[bool] = None,
    ) -> Union[Page, Invalid]:
        """
        Retrieve one page of records sorted by name.

        Args:
            name: Case-insensitive substring filter on name
            category: Exact category filter (only for resources that have one)
            page_number: One-based page number
            page_size: Items per page, clamped to 1000
            show_inventory: False hides the inventory field on the returned page

        Returns:
            The page, or Invalid when a category is given for a resource
            that has none
        """
        resource = self.resource
        with tracer.start_as_current_span(f"list_{resource.name}") as span:
            if category is not None and resource.category_field is None:
                span.set_attribute("error", True)
                return Invalid(
                    errors=[
                        {
                            "loc": ["category"],
                            "msg": f"{resource.name} records cannot be filtered by category",
                            "type": "unsupported_filter",
                        }
                    ]
                )

            predicate = build_predicate(name=name, category=category)
            page_request = normalize(page_number, page_size)
            span.set_attribute("page.index", page_request.page_index)
            span.set_attribute("page.size", page_request.page_size)

            logger.info(
                f"Listing {resource.name} records",
                extra={
                    "resource": resource.name,
                    "predicate": repr(predicate),
                    "page_index": page_request.page_index,
                    "page_size": page_request.page_size,
                },
            )

            records, total_count = await self.store.scan(predicate, page_request)
            records = project(records, show_inventory, resource.hidden_field)
            span.set_attribute("records.count", len(records))
            span.set_attribute("records.total_count", total_count)

            return Page[resource.response_model](
                items=[self._to_response(record) for record in records],
                total_count=total_count,
                page_number=page_request.page_index + 1,
                page_size=page_request.page_size,
                total_pages=total_pages(total_count, page_request.page_size),
            )

    async def get_by_id(self, record_id: str) -> Lookup:
        with tracer.start_as_current_span(f"get_{self.resource.name}") as span:
            span.set_attribute("record.id", record_id)
            record = await self.store.find_by_id(record_id)
            if record is None:
                logger.warning(
                    f"{self.resource.name} not found",
                    extra={"resource": self.resource.name, "record_id": record_id},
                )
                return NotFound(self.resource.name, record_id)
            return Present(self._to_response(record))

    async def create(self, candidate: Candidate) -> Created:
        """
        Validate and insert a new record.

        The store assigns id, version 0 and timestamps. Nothing is inserted
        when validation fails.
        """
        with tracer.start_as_current_span(f"create_{self.resource.name}") as span:
            validated = _validate(self.resource.create_model, candidate)
            if isinstance(validated, Invalid):
                span.set_attribute("error", True)
                logger.info(
                    f"Rejected {self.resource.name} candidate",
                    extra={"resource": self.resource.name, "errors": validated.errors},
                )
                return validated

            stored = await self.store.insert(validated.model_dump(mode="json"))
            span.set_attribute("record.id", stored["id"])
            logger.info(
                f"{self.resource.name} created",
                extra={"resource": self.resource.name, "record_id": stored["id"]},
            )
            return Present(self._to_response(stored))

    async def update(
        self,
        record_id: str,
        candidate: Candidate,
        expected_version: Optional[int] = None,
    ) -> Written:
        """
        Full update: every mutable field takes the candidate's value.
        """
        validated = _validate(self.resource.replace_model, candidate)
        if isinstance(validated, Invalid):
            return validated
        values = validated.model_dump(mode="json", exclude={"version"})
        return await self._write(
            "update",
            record_id,
            lambda existing: replace_fields(existing, values, self.resource.fields),
            expected_version if expected_version is not None else validated.version,
        )

    async def patch(
        self,
        record_id: str,
        candidate: Candidate,
        expected_version: Optional[int] = None,
    ) -> Written:
        """
        Partial update: only supplied, non-blank fields are changed.
        """
        validated = _validate(self.resource.patch_model, candidate)
        if isinstance(validated, Invalid):
            return validated
        values = validated.model_dump(mode="json", exclude_unset=True, exclude={"version"})
        return await self._write(
            "patch",
            record_id,
            lambda existing: patch_fields(
                existing, values, self.resource.fields, self.resource.text_fields
            ),
            expected_version if expected_version is not None else validated.version,
        )

    async def _write(
        self, action: str, record_id: str, merge, expected_version: Optional[int]
    ) -> Written:
        resource = self.resource
        with tracer.start_as_current_span(f"{action}_{resource.name}") as span:
            span.set_attribute("record.id", record_id)
            extra: Dict[str, Any] = {"resource": resource.name, "record_id": record_id}

            existing = await self.store.find_by_id(record_id)
            if existing is None:
                logger.warning(f"{resource.name} not found for {action}", extra=extra)
                return NotFound(resource.name, record_id)

            conflict = guard(resource.name, record_id, existing["version"], expected_version)
            if conflict is not None:
                span.set_attribute("error", True)
                logger.warning(
                    f"Stale {action} rejected",
                    extra={**extra, "expected_version": expected_version,
                           "current_version": existing["version"]},
                )
                return conflict

            try:
                stored = await self.store.replace(merge(existing), expected_version=existing["version"])
            except VersionConflictError as e:
                span.set_attribute("error", True)
                logger.warning(f"Concurrent {action} rejected", extra=extra)
                return Conflict(
                    resource=resource.name,
                    id=record_id,
                    expected_version=existing["version"],
                    current_version=e.current_version,
                )
            if stored is None:
                logger.warning(f"{resource.name} removed during {action}", extra=extra)
                return NotFound(resource.name, record_id)

            span.set_attribute("record.version", stored["version"])
            logger.info(
                f"{resource.name} {action} applied",
                extra={**extra, "version": stored["version"]},
            )
            return Present(self._to_response(stored))

    async def delete(self, record_id: str) -> bool:
        with tracer.start_as_current_span(f"delete_{self.resource.name}") as span:
            span.set_attribute("record.id", record_id)
            extra = {"resource": self.resource.name, "record_id": record_id}
            if not await self.store.exists_by_id(record_id):
                logger.warning(f"{self.resource.name} not found for delete", extra=extra)
                return False
            deleted = await self.store.delete_by_id(record_id)
            logger.info(f"{self.resource.name} deleted", extra=extra)
            return deleted
