from __future__ import annotations

import logging
from typing import Any, List, Sequence

import httpx

from shop_pos.config import settings
from shop_pos.core.errors import CheckoutError, FetchError
from shop_pos.core.models import CartItem, Product

logger = logging.getLogger(__name__)


class HttpShopService:
    """Shop service reached over the JSON API served by shop_pos.web.main."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.shop_api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.shop_api_timeout
        self.transport = transport

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    async def get_products(self) -> List[Product]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.get(self._url("products"), headers={"Accept": "application/json"})
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise FetchError(f"cannot load products: {e}") from e

        if not isinstance(data, list):
            raise FetchError("cannot load products: expected a list")
        try:
            return [Product.from_payload(row) for row in data]
        except (KeyError, TypeError, ValueError) as e:
            raise FetchError(f"malformed product data: {e}") from e

    async def checkout(self, items: Sequence[CartItem]) -> None:
        payload = {"items": [{"code": it.code, "quantity": it.quantity} for it in items]}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.post(self._url("checkout"), json=payload)
        except httpx.HTTPError as e:
            raise CheckoutError(f"shop service unreachable: {e}") from e

        if resp.is_success:
            return
        raise CheckoutError(_error_message(resp))


def _error_message(resp: httpx.Response) -> str:
    try:
        body: Any = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("detail"):
        detail = body["detail"]
        return detail if isinstance(detail, str) else str(detail)
    return f"HTTP {resp.status_code}"
