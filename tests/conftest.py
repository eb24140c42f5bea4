import pytest

from shop_fakes import APPLE, BREAD, CANDY, FakeShopService
from shop_pos.core.cart import CartReconciler
from shop_pos.core.catalog import CatalogView
from shop_pos.core.store import ShopStore


@pytest.fixture
def service():
    return FakeShopService([APPLE, BREAD, CANDY])


@pytest.fixture
async def catalog(service):
    view = CatalogView(service)
    await view.refresh()
    return view


@pytest.fixture
def cart(catalog):
    return CartReconciler(catalog)


@pytest.fixture
async def store(service):
    s = ShopStore(service)
    await s.refresh()
    return s
