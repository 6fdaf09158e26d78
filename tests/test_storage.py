"""Tests for InventoryStore, below the HTTP layer."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from merch_inventory.errors import ConstraintViolation, InsufficientStockError, NotFoundError, ValidationError
from merch_inventory.storage import InventoryStore


@pytest.fixture()
def product(store):
    return store.create_product("Hoodie", "HD-1", 5)


def test_duplicate_sku_is_a_typed_violation(store, product):
    with pytest.raises(ConstraintViolation) as excinfo:
        store.create_product("Hoodie again", "HD-1", 0)
    assert excinfo.value.field == "sku"


def test_lookups(store, product):
    assert store.get_product(product.id).sku == "HD-1"
    assert store.get_product_by_sku("HD-1").id == product.id
    assert store.get_product(product.id + 100) is None
    assert store.get_product_by_sku("missing") is None


def test_adjust_stock_writes_product_and_movement(store, product):
    updated = store.adjust_stock("HD-1", -2, "sale", "market stall")

    assert updated.stock == 3
    [movement] = store.list_movements()
    assert movement["delta"] == -2
    assert movement["reason"] == "sale"
    assert movement["note"] == "market stall"
    assert movement["product_id"] == product.id


def test_adjust_stock_never_goes_negative(store, product):
    with pytest.raises(InsufficientStockError) as excinfo:
        store.adjust_stock("HD-1", -6, "sale")

    assert excinfo.value.stock == 5
    assert excinfo.value.payload() == {"error": "Insufficient stock", "stock": 5}
    assert store.get_product(product.id).stock == 5
    assert store.list_movements() == []


def test_adjust_unknown_sku(store):
    with pytest.raises(NotFoundError):
        store.adjust_stock("nope", 1, "restock")


def test_list_movements_respects_limit(store, product):
    for _ in range(4):
        store.adjust_stock("HD-1", 1, "restock")

    assert len(store.list_movements(limit=3)) == 3
    assert len(store.list_movements()) == 4
    assert store.list_movements(limit=0) == []


def test_duplicate_detected_after_integrity_error(store, product, monkeypatch):
    # Another writer inserts the same code between the lookup and the commit
    real_sku_taken = InventoryStore._sku_taken
    calls = []

    def sku_taken(db, sku):
        calls.append(sku)
        if len(calls) == 1:
            return False
        return real_sku_taken(db, sku)

    monkeypatch.setattr(InventoryStore, "_sku_taken", staticmethod(sku_taken))

    with pytest.raises(ConstraintViolation) as excinfo:
        store.create_product("Hoodie again", "HD-1", 0)

    assert excinfo.value.field == "sku"
    assert calls == ["HD-1", "HD-1"]
    [only] = store.list_products()
    assert only.name == "Hoodie"


def test_huge_consume_reports_current_stock(store, product):
    with pytest.raises(InsufficientStockError) as excinfo:
        store.adjust_stock("HD-1", -(10**20), "sale")

    assert excinfo.value.stock == 5
    assert store.list_movements() == []


def test_restock_beyond_integer_range_is_rejected(store, product):
    with pytest.raises(ValidationError):
        store.adjust_stock("HD-1", 2**63 - 5, "restock")

    assert store.get_product(product.id).stock == 5


def test_concurrent_consumes_never_oversell(store):
    store.create_product("Sticker", "ST-1", 10)

    def consume_one(_):
        try:
            store.adjust_stock("ST-1", -1, "sale")
            return True
        except InsufficientStockError:
            return False

    with ThreadPoolExecutor(max_workers=25) as pool:
        results = list(pool.map(consume_one, range(25)))

    assert results.count(True) == 10
    assert store.get_product_by_sku("ST-1").stock == 0
    movements = store.list_movements()
    assert len(movements) == 10
    assert all(m["delta"] == -1 for m in movements)
