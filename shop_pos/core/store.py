from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, List, Optional, Tuple

from shop_pos.core.cart import CartReconciler, ConfirmFn
from shop_pos.core.catalog import CatalogView
from shop_pos.core.checkout import CheckoutFlow, CheckoutOutcome
from shop_pos.core.errors import FetchError
from shop_pos.core.models import CartItem, Product
from shop_pos.core.service import ShopService

logger = logging.getLogger(__name__)


class StoreEvent(str, Enum):
    CATALOG_CHANGED = "catalog_changed"
    CATALOG_FAILED = "catalog_failed"
    CART_CHANGED = "cart_changed"
    CHECKOUT_SUCCEEDED = "checkout_succeeded"
    CHECKOUT_FAILED = "checkout_failed"


Listener = Callable[[StoreEvent], None]


class ShopStore:
    """
    Observable container for one operator session.

    The mutation methods below are the only way state changes. Listeners
    are notified only when something actually changed.
    """

    def __init__(self, service: ShopService) -> None:
        self.catalog = CatalogView(service)
        self.cart = CartReconciler(self.catalog)
        self.checkout_flow = CheckoutFlow(
            service,
            self.catalog,
            self.cart,
            on_cart_reset=lambda: self._emit(StoreEvent.CART_CHANGED),
            on_refreshed=lambda: self._emit(StoreEvent.CATALOG_CHANGED),
            on_refresh_failed=self._refresh_failed,
        )
        self.last_refresh_error: Optional[FetchError] = None
        self._listeners: List[Listener] = []

    # ---------------- read models ----------------

    def get_catalog(self) -> Tuple[Product, ...]:
        return self.catalog.products

    def get_cart(self) -> Tuple[CartItem, ...]:
        return self.cart.items

    def available_stock(self, code: str) -> int:
        product = self.catalog.get(code)
        if product is None:
            return 0
        return self.cart.available_stock(product)

    def cart_total(self) -> int:
        return self.cart.cart_total()

    # ---------------- subscriptions ----------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event: StoreEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Store listener failed on %s", event.value)

    def _refresh_failed(self, error: FetchError) -> None:
        self.last_refresh_error = error
        self._emit(StoreEvent.CATALOG_FAILED)

    # ---------------- mutations ----------------

    async def refresh(self) -> Tuple[Product, ...]:
        try:
            products = await self.catalog.refresh()
        except FetchError as e:
            self._refresh_failed(e)
            raise
        self.last_refresh_error = None
        self._emit(StoreEvent.CATALOG_CHANGED)
        return products

    def _changed(self, changed: bool) -> bool:
        if changed:
            self._emit(StoreEvent.CART_CHANGED)
        return changed

    def add_to_cart(self, product: Product) -> bool:
        return self._changed(self.cart.add_to_cart(product))

    def add_code(self, code: str) -> bool:
        product = self.catalog.get(code)
        if product is None:
            return False
        return self.add_to_cart(product)

    def update_quantity(self, code: str, delta: int) -> bool:
        return self._changed(self.cart.update_quantity(code, delta))

    def remove_item(self, code: str) -> bool:
        return self._changed(self.cart.remove_item(code))

    def clear_cart(self, confirm: Optional[ConfirmFn] = None) -> bool:
        return self._changed(self.cart.clear_cart(confirm))

    async def checkout(self) -> Optional[CheckoutOutcome]:
        outcome = await self.checkout_flow.submit()
        if outcome is None:
            return None
        self._emit(StoreEvent.CHECKOUT_SUCCEEDED if outcome.ok else StoreEvent.CHECKOUT_FAILED)
        return outcome
