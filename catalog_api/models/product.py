from decimal import Decimal
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

NAME_MAX_LENGTH = 50


class ProductCategory(str, Enum):
    """
    Categories a product can be listed under.
    Used as an exact-match filter when listing products.
    """

    ALE = "ALE"
    PALE_ALE = "PALE_ALE"
    IPA = "IPA"
    WHEAT = "WHEAT"
    LAGER = "LAGER"
    PILSNER = "PILSNER"
    STOUT = "STOUT"
    GOSE = "GOSE"
    PORTER = "PORTER"
    SAISON = "SAISON"


def _not_blank(value: Optional[str]) -> Optional[str]:
    if value is not None and not value.strip():
        raise ValueError("must not be blank")
    return value


class ProductCreate(BaseModel):
    """
    Fields a client needs to provide to create a product.
    """

    name: str = Field(..., max_length=NAME_MAX_LENGTH)
    category: ProductCategory
    code: str  # External product code (UPC)
    price: Decimal = Field(..., ge=0)
    quantity_on_hand: Optional[int] = Field(default=None, ge=0)

    model_config = ConfigDict(extra="forbid")

    @field_validator("name", "code")
    @classmethod
    def check_not_blank(cls, value):
        return _not_blank(value)


class ProductReplace(ProductCreate):
    """
    Full update. Every mutable field is overwritten, so an omitted
    quantity clears the stored one.
    """

    version: Optional[int] = Field(default=None, ge=0)  # Last version the caller saw


class ProductPatch(BaseModel):
    """
    Partial update. Missing, null or blank fields leave the stored value alone.
    """

    name: Optional[str] = Field(default=None, max_length=NAME_MAX_LENGTH)
    category: Optional[ProductCategory] = None
    code: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0)
    quantity_on_hand: Optional[int] = Field(default=None, ge=0)
    version: Optional[int] = Field(default=None, ge=0)

    model_config = ConfigDict(extra="forbid")

    @field_validator("name", "code", mode="before")
    @classmethod
    def blank_means_not_supplied(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ProductResponse(BaseModel):
    """
    All product fields plus system-generated fields.
    """

    id: str
    version: int
    name: str
    category: ProductCategory
    code: str
    price: Decimal
    quantity_on_hand: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    # Cosmos DB system fields (_rid, _etag, _ts...) are dropped
    model_config = ConfigDict(extra="ignore")
