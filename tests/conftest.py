"""Shared fixtures for the catalog API tests."""

from decimal import Decimal

import pytest

from catalog_api.models.product import ProductCategory
from catalog_api.resources import PARTIES, PRODUCTS
from catalog_api.services.resource_service import ResourceService
from catalog_api.store.memory_store import InMemoryRecordStore

SEED_PRODUCTS = [
    {"name": "Galaxy Cat", "category": ProductCategory.PALE_ALE, "code": "12356", "price": Decimal("12.99"), "quantity_on_hand": 122},
    {"name": "Crank", "category": ProductCategory.PALE_ALE, "code": "12356222", "price": Decimal("11.99"), "quantity_on_hand": 392},
    {"name": "Sunshine City", "category": ProductCategory.IPA, "code": "12356", "price": Decimal("13.99"), "quantity_on_hand": 144},
    {"name": "Mango Bobs IPA", "category": ProductCategory.IPA, "code": "4411", "price": Decimal("9.50"), "quantity_on_hand": 20},
    {"name": "Hazy Little Thing ipa", "category": ProductCategory.ALE, "code": "7788", "price": Decimal("10.00"), "quantity_on_hand": 55},
]


@pytest.fixture
def product_store() -> InMemoryRecordStore:
    return InMemoryRecordStore("products")


@pytest.fixture
def party_store() -> InMemoryRecordStore:
    return InMemoryRecordStore("parties")


@pytest.fixture
def product_service(product_store) -> ResourceService:
    return ResourceService(PRODUCTS, product_store)


@pytest.fixture
def party_service(party_store) -> ResourceService:
    return ResourceService(PARTIES, party_store)


@pytest.fixture
def new_product():
    def _new_product(**overrides):
        candidate = {
            "name": "IPA Test",
            "category": ProductCategory.ALE,
            "code": "123",
            "price": Decimal("1.99"),
            "quantity_on_hand": 10,
        }
        candidate.update(overrides)
        return candidate

    return _new_product


@pytest.fixture
def seed_products():
    return [dict(candidate) for candidate in SEED_PRODUCTS]
