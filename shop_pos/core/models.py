from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from shop_pos.utils.validators import require_int, require_non_negative, require_text


@dataclass(frozen=True)
class Product:
    code: str
    name: str
    price: int  # minor currency unit
    remain: int

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> "Product":
        """Build a Product from a service payload; ValueError/KeyError/TypeError on bad data."""
        price = require_int(data["price"], "price")
        remain = require_int(data["remain"], "remain")
        require_non_negative(price, "price")
        require_non_negative(remain, "remain")
        return cls(
            code=require_text(data["code"], "code"),
            name=str(data["name"]),
            price=price,
            remain=remain,
        )


@dataclass(frozen=True)
class CartItem:
    code: str
    name: str
    price: int
    remain: int
    quantity: int

    @classmethod
    def from_product(cls, product: Product, quantity: int = 1) -> "CartItem":
        return cls(
            code=product.code,
            name=product.name,
            price=product.price,
            remain=product.remain,
            quantity=quantity,
        )

    @property
    def line_total(self) -> int:
        return self.price * self.quantity
