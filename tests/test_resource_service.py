"""Tests for the generic resource service over the in-memory store."""

from decimal import Decimal

import pytest

from catalog_api.models.product import ProductCategory, ProductPatch, ProductResponse
from catalog_api.outcomes import Conflict, Invalid, NotFound, Present
from catalog_api.services.paging import PageRequest
from catalog_api.services.resource_service import ResourceService
from catalog_api.resources import PARTIES, PRODUCTS
from catalog_api.store.memory_store import InMemoryRecordStore


async def _seed(service, candidates):
    return [(await service.create(candidate)).value for candidate in candidates]


class TestCreate:
    @pytest.mark.asyncio
    async def test_create_assigns_id_and_version(self, product_service, new_product):
        outcome = await product_service.create(new_product())

        assert isinstance(outcome, Present)
        product = outcome.value
        assert isinstance(product, ProductResponse)
        assert product.id
        assert product.version == 0
        assert product.created_at == product.updated_at
        assert product.price == Decimal("1.99")
        assert product.category == ProductCategory.ALE

    @pytest.mark.asyncio
    async def test_blank_name_is_rejected_without_insert(
        self, product_service, product_store, new_product
    ):
        outcome = await product_service.create(new_product(name="   "))

        assert isinstance(outcome, Invalid)
        assert outcome.errors[0]["loc"] == ["name"]
        assert len(product_store) == 0

    @pytest.mark.asyncio
    async def test_name_over_fifty_characters_is_rejected(self, product_service, product_store, new_product):
        outcome = await product_service.create(
            new_product(name="testBeerWithAVeryLongNameExceedingFiftyCharactersWhichIsNotAllowed")
        )

        assert isinstance(outcome, Invalid)
        assert len(product_store) == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field, value", [("price", Decimal("-0.01")), ("quantity_on_hand", -1)])
    async def test_negative_numbers_are_rejected(self, product_service, product_store, new_product, field, value):
        outcome = await product_service.create(new_product(**{field: value}))

        assert isinstance(outcome, Invalid)
        assert len(product_store) == 0

    @pytest.mark.asyncio
    async def test_quantity_is_optional(self, product_service, new_product):
        candidate = new_product()
        del candidate["quantity_on_hand"]

        outcome = await product_service.create(candidate)

        assert outcome.value.quantity_on_hand is None


class TestGetAndDelete:
    @pytest.mark.asyncio
    async def test_get_existing(self, product_service, new_product):
        created = (await product_service.create(new_product())).value

        outcome = await product_service.get_by_id(created.id)

        assert outcome == Present(created)

    @pytest.mark.asyncio
    async def test_get_missing_is_not_found(self, product_service):
        assert await product_service.get_by_id("missing") == NotFound("product", "missing")

    @pytest.mark.asyncio
    async def test_delete_missing_returns_false_and_keeps_store(self, product_service, product_store, seed_products):
        await _seed(product_service, seed_products)

        assert await product_service.delete("missing") is False
        assert len(product_store) == len(seed_products)

    @pytest.mark.asyncio
    async def test_delete_existing(self, product_service, new_product):
        created = (await product_service.create(new_product())).value

        assert await product_service.delete(created.id) is True
        assert isinstance(await product_service.get_by_id(created.id), NotFound)


class TestList:
    @pytest.mark.asyncio
    async def test_list_all_sorted_by_name(self, product_service, seed_products):
        await _seed(product_service, seed_products)

        page = await product_service.list_records()

        assert page.total_count == 5
        assert page.page_number == 1
        assert page.page_size == 25
        assert page.total_pages == 1
        assert [p.name for p in page.items] == sorted(p["name"] for p in seed_products)

    @pytest.mark.asyncio
    async def test_name_filter_is_case_insensitive(self, product_service, seed_products):
        await _seed(product_service, seed_products)

        page = await product_service.list_records(name="IPA")

        assert page.total_count == 2
        assert all("ipa" in p.name.lower() for p in page.items)

    @pytest.mark.asyncio
    async def test_category_filter_narrows_name_filter(self, product_service, seed_products):
        await _seed(product_service, seed_products)

        page = await product_service.list_records(name="IPA", category=ProductCategory.IPA)

        assert [p.name for p in page.items] == ["Mango Bobs IPA"]

    @pytest.mark.asyncio
    async def test_paging_window(self, product_service, seed_products):
        await _seed(product_service, seed_products)

        page = await product_service.list_records(page_number=2, page_size=2)

        assert page.page_number == 2
        assert page.total_count == 5
        assert page.total_pages == 3
        assert [p.name for p in page.items] == ["Hazy Little Thing ipa", "Mango Bobs IPA"]

    @pytest.mark.asyncio
    async def test_zero_page_size_returns_no_items(self, product_service, seed_products):
        await _seed(product_service, seed_products)

        page = await product_service.list_records(page_size=0)

        assert page.items == []
        assert page.total_count == 5
        assert page.total_pages == 0

    @pytest.mark.asyncio
    async def test_hidden_inventory(self, product_service, seed_products):
        await _seed(product_service, seed_products[:3])

        hidden = await product_service.list_records(show_inventory=False)
        shown = await product_service.list_records()

        assert len(hidden.items) == 3
        assert all(p.quantity_on_hand is None for p in hidden.items)
        assert sorted(p.quantity_on_hand for p in shown.items) == [122, 144, 392]

    @pytest.mark.asyncio
    async def test_hidden_inventory_does_not_touch_store(self, product_service, product_store, seed_products):
        await _seed(product_service, seed_products)

        await product_service.list_records(show_inventory=False)
        items, _ = await product_store.scan(lambda record: True, PageRequest(0, 25))

        assert all(record["quantity_on_hand"] is not None for record in items)

    @pytest.mark.asyncio
    async def test_category_filter_on_party_is_invalid(self, party_service, party_store):
        await party_service.create({"name": "New Customer"})

        outcome = await party_service.list_records(category="IPA")

        assert isinstance(outcome, Invalid)
        assert outcome.errors[0]["loc"] == ["category"]


class TestUpdate:
    @pytest.mark.asyncio
    async def test_update_replaces_all_fields(self, product_service, new_product):
        created = (await product_service.create(new_product())).value

        outcome = await product_service.update(
            created.id,
            {"name": "Crank", "category": "IPA", "code": "999", "price": "3.50"},
        )

        updated = outcome.value
        assert updated.id == created.id
        assert updated.version == 1
        assert updated.name == "Crank"
        assert updated.category == ProductCategory.IPA
        assert updated.price == Decimal("3.50")
        assert updated.quantity_on_hand is None
        assert updated.created_at == created.created_at
        assert updated.updated_at >= created.updated_at

    @pytest.mark.asyncio
    async def test_update_missing_is_not_found(self, product_service, new_product):
        outcome = await product_service.update("missing", new_product())

        assert outcome == NotFound("product", "missing")

    @pytest.mark.asyncio
    async def test_invalid_update_leaves_record_alone(self, product_service, new_product):
        created = (await product_service.create(new_product())).value

        outcome = await product_service.update(created.id, new_product(name=""))

        assert isinstance(outcome, Invalid)
        assert (await product_service.get_by_id(created.id)).value == created

    @pytest.mark.asyncio
    async def test_stale_expected_version_is_a_conflict(self, product_service, new_product):
        created = (await product_service.create(new_product())).value
        await product_service.patch(created.id, {"name": "First"})

        outcome = await product_service.update(created.id, new_product(name="Second"), expected_version=0)

        assert outcome == Conflict("product", created.id, expected_version=0, current_version=1)
        assert (await product_service.get_by_id(created.id)).value.name == "First"

    @pytest.mark.asyncio
    async def test_version_in_candidate_is_checked(self, product_service, new_product):
        created = (await product_service.create(new_product())).value

        ok = await product_service.update(created.id, new_product(name="Second", version=0))
        stale = await product_service.update(created.id, new_product(name="Third", version=0))

        assert ok.value.version == 1
        assert isinstance(stale, Conflict)

    @pytest.mark.asyncio
    async def test_without_expected_version_last_write_wins(self, product_service, new_product):
        created = (await product_service.create(new_product())).value

        await product_service.update(created.id, new_product(name="One"))
        outcome = await product_service.update(created.id, new_product(name="Two"))

        assert outcome.value.name == "Two"
        assert outcome.value.version == 2


class TestPatch:
    @pytest.mark.asyncio
    async def test_end_to_end_create_then_patch(self, product_service, new_product):
        created = (await product_service.create(new_product())).value
        assert created.id is not None
        assert created.version == 0

        outcome = await product_service.patch(created.id, {"name": "IPA Test v2"})

        patched = outcome.value
        assert patched.id == created.id
        assert patched.version == created.version + 1
        assert patched.name == "IPA Test v2"
        assert patched.category == created.category
        assert patched.code == created.code
        assert patched.price == created.price
        assert patched.quantity_on_hand == created.quantity_on_hand

    @pytest.mark.asyncio
    async def test_patch_model_candidate(self, product_service, new_product):
        created = (await product_service.create(new_product())).value

        outcome = await product_service.patch(created.id, ProductPatch(quantity_on_hand=0))

        assert outcome.value.quantity_on_hand == 0
        assert outcome.value.name == "IPA Test"

    @pytest.mark.asyncio
    async def test_blank_name_is_ignored(self, product_service, new_product):
        created = (await product_service.create(new_product())).value

        outcome = await product_service.patch(created.id, {"name": "  ", "price": "5"})

        assert outcome.value.name == "IPA Test"
        assert outcome.value.price == Decimal("5")

    @pytest.mark.asyncio
    async def test_long_blank_name_is_ignored_not_rejected(self, product_service, new_product):
        created = (await product_service.create(new_product())).value

        outcome = await product_service.patch(
            created.id, {"name": " " * 60, "code": "\t" * 60, "price": "5"}
        )

        assert isinstance(outcome, Present)
        assert outcome.value.name == "IPA Test"
        assert outcome.value.code == "123"
        assert outcome.value.price == Decimal("5")
        assert outcome.value.version == 1

    @pytest.mark.asyncio
    async def test_patch_missing_is_not_found(self, product_service):
        assert isinstance(await product_service.patch("missing", {"name": "x"}), NotFound)

    @pytest.mark.asyncio
    async def test_invalid_patch(self, product_service, new_product):
        created = (await product_service.create(new_product())).value

        outcome = await product_service.patch(created.id, {"price": "-1"})

        assert isinstance(outcome, Invalid)
        assert (await product_service.get_by_id(created.id)).value.version == 0

    @pytest.mark.asyncio
    async def test_unknown_field_is_invalid(self, product_service, new_product):
        created = (await product_service.create(new_product())).value

        outcome = await product_service.patch(created.id, {"id": "other"})

        assert isinstance(outcome, Invalid)


class TestParty:
    @pytest.mark.asyncio
    async def test_party_lifecycle(self, party_service, party_store):
        created = (await party_service.create({"name": "New Customer"})).value
        assert created.version == 0

        patched = (await party_service.patch(created.id, {"name": "Renamed"})).value
        replaced = (await party_service.update(created.id, {"name": "Replaced"})).value

        assert patched.version == 1
        assert replaced.version == 2
        assert replaced.name == "Replaced"
        assert await party_service.delete(created.id) is True
        assert len(party_store) == 0

    @pytest.mark.asyncio
    async def test_blank_party_name_is_invalid(self, party_service, party_store):
        assert isinstance(await party_service.create({"name": ""}), Invalid)
        assert len(party_store) == 0

    @pytest.mark.asyncio
    async def test_party_listing(self, party_store):
        service = ResourceService(PARTIES, party_store)
        for name in ["Zed", "amy", "Bob"]:
            await service.create({"name": name})

        page = await service.list_records(name="B")

        assert [p.name for p in page.items] == ["Bob"]


class RacingStore(InMemoryRecordStore):
    """Applies a competing write just before each replace reaches the store."""

    def __init__(self, interfere):
        super().__init__("products")
        self.interfere = interfere

    async def replace(self, record, expected_version):
        await self.interfere(self, record["id"])
        return await super().replace(record, expected_version)


async def _bump_version(store, record_id):
    current = await store.find_by_id(record_id)
    await InMemoryRecordStore.replace(store, {**current, "name": "Someone Else"}, current["version"])


async def _delete(store, record_id):
    await store.delete_by_id(record_id)


class TestConcurrentWrites:
    @pytest.mark.asyncio
    async def test_write_racing_another_writer_is_a_conflict(self, new_product):
        store = RacingStore(_bump_version)
        service = ResourceService(PRODUCTS, store)
        created = (await service.create(new_product())).value

        outcome = await service.update(created.id, new_product(name="Mine"))

        assert outcome == Conflict("product", created.id, expected_version=0, current_version=1)
        stored = await store.find_by_id(created.id)
        assert stored["name"] == "Someone Else"
        assert stored["version"] == 1

    @pytest.mark.asyncio
    async def test_patch_racing_another_writer_is_a_conflict(self, new_product):
        service = ResourceService(PRODUCTS, RacingStore(_bump_version))
        created = (await service.create(new_product())).value

        outcome = await service.patch(created.id, {"price": "2.00"})

        assert isinstance(outcome, Conflict)
        assert outcome.expected_version == 0
        assert outcome.current_version == 1

    @pytest.mark.asyncio
    async def test_record_deleted_during_write_is_not_found(self, new_product):
        store = RacingStore(_delete)
        service = ResourceService(PRODUCTS, store)
        created = (await service.create(new_product())).value

        outcome = await service.patch(created.id, {"name": "Mine"})

        assert outcome == NotFound("product", created.id)
        assert len(store) == 0
