from __future__ import annotations

import logging
from typing import Dict, Optional, Tuple

from shop_pos.core.errors import FetchError
from shop_pos.core.models import Product
from shop_pos.core.service import ShopService

logger = logging.getLogger(__name__)


class CatalogView:
    """Products as last fetched from the shop service. Only refresh() replaces them."""

    def __init__(self, service: ShopService) -> None:
        self._service = service
        self._products: Tuple[Product, ...] = ()
        self._index: Dict[str, Product] = {}
        self._in_flight = 0
        self._generation = 0
        self.loaded = False

    @property
    def products(self) -> Tuple[Product, ...]:
        return self._products

    @property
    def is_loading(self) -> bool:
        return self._in_flight > 0

    def get(self, code: str) -> Optional[Product]:
        return self._index.get(code)

    def remain_of(self, code: str) -> int:
        product = self._index.get(code)
        return product.remain if product else 0

    async def refresh(self) -> Tuple[Product, ...]:
        # overlapping refreshes: only the most recently started one may apply
        self._generation += 1
        generation = self._generation
        self._in_flight += 1
        try:
            products = tuple(await self._service.get_products())
        except FetchError as e:
            logger.warning("Catalog fetch failed, keeping %d products: %s", len(self._products), e)
            raise
        finally:
            self._in_flight -= 1

        if generation != self._generation:
            logger.info("Dropping stale catalog response (%d products)", len(products))
            return self._products

        self._products = products
        self._index = {p.code: p for p in products}
        self.loaded = True
        logger.info("Catalog refreshed: %d products", len(products))
        return products
