from __future__ import annotations


class ShopError(Exception):
    """Recoverable, user-visible failure talking to the shop service."""


class FetchError(ShopError):
    """Catalog load failed; the previous catalog is still in place."""


class CheckoutError(ShopError):
    """Checkout was refused or did not reach the service; the cart is kept."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
