"""
Per-resource traits consumed by the generic resource service.
"""
from dataclasses import dataclass
from typing import Optional, Tuple, Type

from pydantic import BaseModel

from catalog_api.models.party import (
    PartyCreate,
    PartyPatch,
    PartyReplace,
    PartyResponse,
)
from catalog_api.models.product import (
    ProductCreate,
    ProductPatch,
    ProductReplace,
    ProductResponse,
)


@dataclass(frozen=True)
class ResourceType:
    name: str
    create_model: Type[BaseModel]
    replace_model: Type[BaseModel]
    patch_model: Type[BaseModel]
    response_model: Type[BaseModel]
    fields: Tuple[str, ...]  # Mutable fields, in merge order
    text_fields: Tuple[str, ...] = ()  # Patched only when non-blank
    category_field: Optional[str] = None  # Exact-match filter, if any
    hidden_field: Optional[str] = None  # Cleared when inventory is hidden


PRODUCTS = ResourceType(
    name="product",
    create_model=ProductCreate,
    replace_model=ProductReplace,
    patch_model=ProductPatch,
    response_model=ProductResponse,
    fields=("name", "category", "code", "price", "quantity_on_hand"),
    text_fields=("name", "code"),
    category_field="category",
    hidden_field="quantity_on_hand",
)

PARTIES = ResourceType(
    name="party",
    create_model=PartyCreate,
    replace_model=PartyReplace,
    patch_model=PartyPatch,
    response_model=PartyResponse,
    fields=("name",),
    text_fields=("name",),
)
