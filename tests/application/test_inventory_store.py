"""Integration tests for the InventoryStore.

Uses in-memory fake repositories, no file I/O.
"""

import dataclasses

import pytest

from stockroom.application.inventory_store import InventoryStore
from stockroom.domain.exceptions import EntityNotFoundError, PersistenceError
from stockroom.domain.model.product import ProductInput
from stockroom.domain.model.value_objects import Money
from tests.fakes import FakeProductRepository, make_product


async def _loaded_store(products=None) -> tuple[InventoryStore, FakeProductRepository]:
    if products is None:
        products = [
            make_product(id="2", name="Sunflower Oil", price="20.00", stock=2, min_stock=3),
            make_product(id="1", name="Basmati Rice", price="10.00", stock=5, min_stock=2),
        ]
    repo = FakeProductRepository(products)
    store = InventoryStore(repo)
    await store.load()
    return store, repo


def _new_product_input(**overrides) -> ProductInput:
    raw = dict(
        name="Penne", category="Pasta", price="3.50",
        stock="12", min_stock="4", sku="PST-1",
    )
    raw.update(overrides)
    return ProductInput.parse(**raw)


class TestLoad:

    @pytest.mark.asyncio
    async def test_load_keeps_backend_order(self):
        store, _ = await _loaded_store()
        assert [p.id for p in store.list()] == ["2", "1"]
        assert store.is_loaded

    @pytest.mark.asyncio
    async def test_failed_load_keeps_previous_snapshot(self):
        store, repo = await _loaded_store()
        repo.fail_with = PersistenceError("offline")
        with pytest.raises(PersistenceError):
            await store.refresh()
        assert len(store) == 2


class TestAdd:

    @pytest.mark.asyncio
    async def test_add_prepends_new_product(self):
        store, _ = await _loaded_store()
        product = await store.add(_new_product_input())
        assert store.list()[0] == product
        assert product.price == Money.of("3.50")
        assert len(store) == 3

    @pytest.mark.asyncio
    async def test_failed_add_leaves_list_unchanged(self):
        store, repo = await _loaded_store()
        before = store.list()
        repo.fail_with = PersistenceError("constraint violation")
        with pytest.raises(PersistenceError, match="constraint"):
            await store.add(_new_product_input())
        assert store.list() == before

    @pytest.mark.asyncio
    async def test_add_then_remove_restores_list(self):
        store, _ = await _loaded_store()
        before = store.list()
        product = await store.add(_new_product_input())
        await store.remove(product.id)
        assert store.list() == before


class TestUpdate:

    @pytest.mark.asyncio
    async def test_update_sends_only_provided_fields_plus_timestamp(self):
        store, repo = await _loaded_store()
        await store.update("1", ProductInput.parse(stock="50"))
        _, (product_id, fields) = repo.calls[-1]
        assert product_id == "1"
        assert set(fields) == {"stock", "updated_at"}

    @pytest.mark.asyncio
    async def test_update_replaces_entry_in_place(self):
        store, _ = await _loaded_store()
        updated = await store.update("1", ProductInput.parse(price="11.00"))
        assert store.get("1") == updated
        assert store.get("1").price == Money.of("11.00")
        assert [p.id for p in store.list()] == ["2", "1"]

    @pytest.mark.asyncio
    async def test_failed_update_leaves_product_untouched(self):
        store, repo = await _loaded_store()
        before = dataclasses.replace(store.get("1"))
        repo.fail_with = PersistenceError("timeout")
        with pytest.raises(PersistenceError):
            await store.update("1", ProductInput.parse(stock="99", name="Changed"))
        assert store.get("1") == before

    @pytest.mark.asyncio
    async def test_update_unknown_product_fails(self):
        store, _ = await _loaded_store()
        with pytest.raises(EntityNotFoundError):
            await store.update("404", ProductInput.parse(stock="1"))


class TestRemove:

    @pytest.mark.asyncio
    async def test_remove_drops_entry(self):
        store, _ = await _loaded_store()
        await store.remove("2")
        assert [p.id for p in store.list()] == ["1"]

    @pytest.mark.asyncio
    async def test_remove_absent_id_still_calls_backend(self):
        store, repo = await _loaded_store()
        await store.remove("ghost")
        assert repo.calls[-1] == ("delete", "ghost")
        assert len(store) == 2

    @pytest.mark.asyncio
    async def test_failed_remove_keeps_entry(self):
        store, repo = await _loaded_store()
        repo.fail_with = PersistenceError("offline")
        with pytest.raises(PersistenceError):
            await store.remove("2")
        assert store.get("2") is not None


class TestStats:

    @pytest.mark.asyncio
    async def test_stats_follow_the_snapshot(self):
        store, _ = await _loaded_store()
        stats = store.stats()
        assert stats.total_products == 2
        assert stats.total_value == Money.of("90.00")
        assert stats.low_stock_items == 1

        await store.update("1", ProductInput.parse(stock="2"))
        assert store.stats().low_stock_items == 2
        assert store.stats().total_value == Money.of("60.00")

    @pytest.mark.asyncio
    async def test_low_stock_listing(self):
        store, _ = await _loaded_store()
        assert [p.id for p in store.low_stock()] == ["2"]


class TestSubscribe:

    @pytest.mark.asyncio
    async def test_listeners_fire_after_confirmed_changes_only(self):
        store, repo = await _loaded_store()
        events = []
        unsubscribe = store.subscribe(lambda: events.append(len(store)))

        await store.add(_new_product_input())
        repo.fail_with = PersistenceError("offline")
        with pytest.raises(PersistenceError):
            await store.remove("1")
        assert events == [3]

        unsubscribe()
        repo.fail_with = None
        await store.remove("1")
        assert events == [3]
