from __future__ import annotations

from typing import List, Protocol, Sequence

from shop_pos.core.models import CartItem, Product


class ShopService(Protocol):
    async def get_products(self) -> List[Product]:
        """Full current catalog. Raises FetchError."""
        ...

    async def checkout(self, items: Sequence[CartItem]) -> None:
        """Decrement stock for every line, all or nothing. Raises CheckoutError."""
        ...
