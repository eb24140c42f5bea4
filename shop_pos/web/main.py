from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Annotated, List, Optional

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel, Field, StringConstraints

from shop_pos.config import settings
from shop_pos.db.sqlite import (
    checkout,
    find_product,
    init_db,
    list_order_items,
    list_products,
    upsert_product,
)

logger = logging.getLogger(__name__)


Code = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class ProductIn(BaseModel):
    code: Code
    name: str
    price: int = Field(ge=0)
    remain: int = Field(ge=0)


class CheckoutLine(BaseModel):
    code: Code
    quantity: int = Field(gt=0)


class CheckoutIn(BaseModel):
    items: List[CheckoutLine] = Field(min_length=1)


def _db(request: Request) -> str:
    return request.app.state.db_path


def create_app(db_path: Optional[str] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_db(app.state.db_path)
        yield

    app = FastAPI(title="Shop POS Service", lifespan=lifespan)
    app.state.db_path = db_path or settings.db_path

    @app.get("/health")
    def health():
        return {"status": "ok"}

    # ---------------- products ----------------

    @app.get("/api/products")
    def products(request: Request):
        return list_products(_db(request))

    @app.get("/api/products/{code}")
    def product_get(request: Request, code: str):
        row = find_product(code.strip(), _db(request))
        if row is None:
            raise HTTPException(status_code=404, detail=f"product not found: {code}")
        return row

    @app.post("/api/products")
    def products_upsert(request: Request, body: ProductIn):
        upsert_product(body.code, body.name, body.price, body.remain, _db(request))
        logger.info("Stock set: %s remain=%d", body.code, body.remain)
        return {"ok": True}

    # ---------------- checkout ----------------

    @app.post("/api/checkout")
    def checkout_post(request: Request, body: CheckoutIn):
        ok, res = checkout([(it.code, it.quantity) for it in body.items], _db(request))
        if not ok:
            logger.warning("Checkout refused: %s", res)
            raise HTTPException(status_code=409, detail=res)
        order_id, total = res
        logger.info("Order #%d stored, total=%d", order_id, total)
        return {"ok": True, "order_id": order_id, "total": total}

    @app.get("/api/orders/{order_id}")
    def order_get(request: Request, order_id: int):
        items = list_order_items(order_id, _db(request))
        if not items:
            raise HTTPException(status_code=404, detail=f"order not found: {order_id}")
        return {"order_id": order_id, "items": items, "total": sum(i["line_total"] for i in items)}

    return app


app = create_app()
