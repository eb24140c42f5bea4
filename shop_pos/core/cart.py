from __future__ import annotations

from dataclasses import replace
from typing import Callable, List, Optional, Tuple

from shop_pos.core.catalog import CatalogView
from shop_pos.core.models import CartItem, Product

ConfirmFn = Callable[[], bool]


class CartReconciler:
    """
    Cart lines kept consistent with catalog stock.

    Every mutation runs to completion and returns True only when the cart
    actually changed. Requests that would exceed a ceiling are no-ops.
    """

    def __init__(self, catalog: CatalogView) -> None:
        self._catalog = catalog
        self._items: List[CartItem] = []

    @property
    def items(self) -> Tuple[CartItem, ...]:
        return tuple(self._items)

    def snapshot(self) -> Tuple[CartItem, ...]:
        return tuple(self._items)

    def is_empty(self) -> bool:
        return not self._items

    def _find(self, code: str) -> Optional[int]:
        for i, item in enumerate(self._items):
            if item.code == code:
                return i
        return None

    def quantity_in_cart(self, code: str) -> int:
        idx = self._find(code)
        return self._items[idx].quantity if idx is not None else 0

    def available_stock(self, product: Product) -> int:
        return product.remain - self.quantity_in_cart(product.code)

    def add_to_cart(self, product: Product) -> bool:
        idx = self._find(product.code)
        if idx is not None:
            item = self._items[idx]
            if item.quantity < product.remain:
                self._items[idx] = replace(item, quantity=item.quantity + 1)
                return True
            return False

        if product.remain <= 0:
            return False
        self._items.append(CartItem.from_product(product, quantity=1))
        return True

    def update_quantity(self, code: str, delta: int) -> bool:
        before = list(self._items)

        updated: List[CartItem] = []
        for item in self._items:
            if item.code == code:
                new_qty = item.quantity + delta
                # unknown product -> ceiling 0, only a drop to zero goes through
                if new_qty <= self._catalog.remain_of(code):
                    item = replace(item, quantity=new_qty)
            updated.append(item)

        self._items = [item for item in updated if item.quantity > 0]
        return self._items != before

    def remove_item(self, code: str) -> bool:
        idx = self._find(code)
        if idx is None:
            return False
        del self._items[idx]
        return True

    def clear_cart(self, confirm: Optional[ConfirmFn] = None) -> bool:
        if confirm is not None and not confirm():
            return False
        return self.reset()

    def reset(self) -> bool:
        if not self._items:
            return False
        self._items = []
        return True

    def cart_total(self) -> int:
        return sum(item.line_total for item in self._items)
