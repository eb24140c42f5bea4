from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Tuple

from shop_pos.core.cart import CartReconciler
from shop_pos.core.catalog import CatalogView
from shop_pos.core.errors import CheckoutError, FetchError
from shop_pos.core.models import CartItem
from shop_pos.core.service import ShopService

logger = logging.getLogger(__name__)


class CheckoutState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class CheckoutOutcome:
    state: CheckoutState
    items: Tuple[CartItem, ...]
    total: int
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.state is CheckoutState.SUCCEEDED


class CheckoutFlow:
    """
    Idle -> Submitting -> (Succeeded | Failed) -> Idle.

    On success the cart is reset before the catalog refresh is even scheduled;
    the refresh runs as a background task and its failure never touches the cart.
    """

    def __init__(
        self,
        service: ShopService,
        catalog: CatalogView,
        cart: CartReconciler,
        on_cart_reset: Optional[Callable[[], None]] = None,
        on_refreshed: Optional[Callable[[], None]] = None,
        on_refresh_failed: Optional[Callable[[FetchError], None]] = None,
    ) -> None:
        self._service = service
        self._catalog = catalog
        self._cart = cart
        self._on_cart_reset = on_cart_reset
        self._on_refreshed = on_refreshed
        self._on_refresh_failed = on_refresh_failed
        self.state = CheckoutState.IDLE
        self.refresh_task: Optional[asyncio.Task] = None

    @property
    def is_submitting(self) -> bool:
        return self.state is CheckoutState.SUBMITTING

    async def submit(self) -> Optional[CheckoutOutcome]:
        if self.is_submitting:
            logger.warning("Checkout already in flight, ignoring second submission")
            return None
        if self._cart.is_empty():
            return None

        items = self._cart.snapshot()
        total = self._cart.cart_total()

        self.state = CheckoutState.SUBMITTING
        try:
            try:
                await self._service.checkout(items)
            except CheckoutError as e:
                logger.warning("Checkout failed (%d lines, total=%d): %s", len(items), total, e.message)
                self.state = CheckoutState.FAILED
                return CheckoutOutcome(CheckoutState.FAILED, items, total, error=e.message)

            self.state = CheckoutState.SUCCEEDED
            cleared = self._cart.reset()
            self.refresh_task = asyncio.create_task(self._refresh_catalog())
            logger.info("Checkout succeeded (%d lines, total=%d)", len(items), total)
            if cleared and self._on_cart_reset:
                self._on_cart_reset()
            return CheckoutOutcome(CheckoutState.SUCCEEDED, items, total)
        finally:
            self.state = CheckoutState.IDLE

    async def _refresh_catalog(self) -> None:
        try:
            await self._catalog.refresh()
        except FetchError as e:
            logger.error("Catalog refresh after checkout failed: %s", e)
            if self._on_refresh_failed:
                self._on_refresh_failed(e)
            return
        if self._on_refreshed:
            self._on_refreshed()
