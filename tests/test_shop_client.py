import json

import httpx
import pytest
from httpx import Response

from shop_pos.core.errors import CheckoutError, FetchError
from shop_pos.core.models import CartItem, Product
from shop_pos.services.shop_client import HttpShopService

BASE = "http://shop.test/api"


@pytest.fixture
def client():
    return HttpShopService(base_url=BASE + "/", timeout=1.0)


def _item(quantity: int = 1) -> CartItem:
    return CartItem(code="A", name="Apple", price=10, remain=2, quantity=quantity)


async def test_get_products(client, respx_mock):
    respx_mock.get(f"{BASE}/products").mock(
        return_value=Response(200, json=[
            {"code": "A", "name": "Apple", "price": 10, "remain": 2},
            {"code": "B", "name": "Bread", "price": 33, "remain": 0},
        ])
    )

    products = await client.get_products()

    assert products == [
        Product(code="A", name="Apple", price=10, remain=2),
        Product(code="B", name="Bread", price=33, remain=0),
    ]


@pytest.mark.parametrize(
    "response",
    [
        Response(500, json={"detail": "db down"}),
        Response(200, text="<html>not json</html>"),
        Response(200, json={"products": []}),
        Response(200, json=[{"code": "A", "name": "Apple", "price": "10", "remain": 2}]),
        Response(200, json=[{"code": "A", "name": "Apple", "price": 10}]),
        Response(200, json=[{"code": "A", "name": "Apple", "price": 10, "remain": -1}]),
        Response(200, json=[{"code": "", "name": "Apple", "price": 10, "remain": 1}]),
    ],
)
async def test_get_products_failures_become_fetch_error(client, respx_mock, response):
    respx_mock.get(f"{BASE}/products").mock(return_value=response)

    with pytest.raises(FetchError):
        await client.get_products()


async def test_get_products_transport_error(client, respx_mock):
    respx_mock.get(f"{BASE}/products").mock(side_effect=httpx.ConnectError("refused"))

    with pytest.raises(FetchError):
        await client.get_products()


async def test_checkout_posts_codes_and_quantities(client, respx_mock):
    route = respx_mock.post(f"{BASE}/checkout").mock(
        return_value=Response(200, json={"ok": True, "order_id": 1, "total": 20})
    )

    await client.checkout([_item(2)])

    assert route.called
    assert json.loads(route.calls.last.request.content) == {"items": [{"code": "A", "quantity": 2}]}


async def test_checkout_conflict_carries_detail(client, respx_mock):
    respx_mock.post(f"{BASE}/checkout").mock(
        return_value=Response(409, json={"detail": "not enough A: have 1, need 2"})
    )

    with pytest.raises(CheckoutError) as exc:
        await client.checkout([_item(2)])

    assert exc.value.message == "not enough A: have 1, need 2"


async def test_checkout_error_without_detail(client, respx_mock):
    respx_mock.post(f"{BASE}/checkout").mock(return_value=Response(502, text="bad gateway"))

    with pytest.raises(CheckoutError) as exc:
        await client.checkout([_item()])

    assert exc.value.message == "HTTP 502"


async def test_checkout_unreachable(client, respx_mock):
    respx_mock.post(f"{BASE}/checkout").mock(side_effect=httpx.ConnectTimeout("slow"))

    with pytest.raises(CheckoutError, match="unreachable"):
        await client.checkout([_item()])
