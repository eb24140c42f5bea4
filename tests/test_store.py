import pytest

from shop_fakes import APPLE, BREAD, CANDY, FakeShopService
from shop_pos.core.errors import FetchError
from shop_pos.core.store import ShopStore, StoreEvent


async def test_read_models_after_refresh(store):
    assert [p.code for p in store.get_catalog()] == ["A", "B", "C"]
    assert store.get_cart() == ()


async def test_listeners_only_hear_real_changes(store):
    events = []
    store.subscribe(events.append)

    store.add_to_cart(APPLE)
    store.add_to_cart(APPLE)
    store.add_to_cart(APPLE)  # at ceiling
    store.update_quantity("A", +1)  # rejected
    store.remove_item("B")  # absent
    store.add_to_cart(CANDY)  # sold out

    assert events == [StoreEvent.CART_CHANGED, StoreEvent.CART_CHANGED]


async def test_unsubscribe(store):
    events = []
    unsubscribe = store.subscribe(events.append)
    unsubscribe()
    unsubscribe()

    store.add_to_cart(BREAD)
    assert events == []


async def test_clear_cart_gated_by_confirm(store):
    events = []
    store.add_to_cart(BREAD)
    store.subscribe(events.append)

    assert store.clear_cart(confirm=lambda: False) is False
    assert events == []
    assert store.clear_cart(confirm=lambda: True) is True
    assert events == [StoreEvent.CART_CHANGED]
    assert store.get_cart() == ()


async def test_add_code_looks_up_catalog(store):
    assert store.add_code("B") is True
    assert store.add_code("nope") is False
    assert [(it.code, it.quantity) for it in store.get_cart()] == [("B", 1)]


async def test_available_stock_by_code(store):
    store.add_code("B")
    assert store.available_stock("B") == 4
    assert store.available_stock("nope") == 0


async def test_refresh_failure_is_published_and_raised():
    service = FakeShopService([APPLE])
    s = ShopStore(service)
    events = []
    s.subscribe(events.append)
    service.fetch_error = FetchError("offline")

    with pytest.raises(FetchError):
        await s.refresh()

    assert events == [StoreEvent.CATALOG_FAILED]
    assert s.get_catalog() == ()

    service.fetch_error = None
    await s.refresh()
    assert s.last_refresh_error is None
    assert events[-1] is StoreEvent.CATALOG_CHANGED


async def test_checkout_events(store, service):
    events = []
    store.add_code("A")
    store.subscribe(events.append)

    await store.checkout()
    await store.checkout_flow.refresh_task

    assert events == [
        StoreEvent.CART_CHANGED,
        StoreEvent.CHECKOUT_SUCCEEDED,
        StoreEvent.CATALOG_CHANGED,
    ]
