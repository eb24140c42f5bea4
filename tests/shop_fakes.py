import asyncio
from typing import List, Optional, Sequence

from shop_pos.core.errors import CheckoutError, FetchError
from shop_pos.core.models import CartItem, Product


class FakeShopService:
    def __init__(self, products: Optional[List[Product]] = None):
        self.products = list(products or [])
        self.fetch_error: Optional[FetchError] = None
        self.checkout_error: Optional[CheckoutError] = None
        self.fetch_gate: Optional[asyncio.Event] = None
        self.checkout_gate: Optional[asyncio.Event] = None
        self.fetch_calls = 0
        self.checkout_calls: List[tuple] = []

    async def get_products(self) -> List[Product]:
        self.fetch_calls += 1
        if self.fetch_gate is not None:
            await self.fetch_gate.wait()
        if self.fetch_error is not None:
            raise self.fetch_error
        return list(self.products)

    async def checkout(self, items: Sequence[CartItem]) -> None:
        self.checkout_calls.append(tuple(items))
        if self.checkout_gate is not None:
            await self.checkout_gate.wait()
        if self.checkout_error is not None:
            raise self.checkout_error


APPLE = Product(code="A", name="Apple", price=10, remain=2)
BREAD = Product(code="B", name="Bread", price=33, remain=5)
CANDY = Product(code="C", name="Candy", price=7, remain=0)
