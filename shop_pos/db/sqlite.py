from __future__ import annotations

import os
import sqlite3
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

from shop_pos.config import settings


def _connect(db_path: Optional[str] = None) -> sqlite3.Connection:
    path = db_path or settings.db_path
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    conn = sqlite3.connect(path, isolation_level=None)
    conn.row_factory = sqlite3.Row
    return conn

def init_db(db_path: Optional[str] = None) -> None:
    conn = _connect(db_path)
    try:
        with open(os.path.join(os.path.dirname(__file__), "schema.sql"), "r", encoding="utf-8") as f:
            conn.executescript(f.read())
    finally:
        conn.close()

def upsert_product(code: str, name: str, price: int, remain: int, db_path: Optional[str] = None) -> None:
    conn = _connect(db_path)
    try:
        conn.execute(
            "INSERT INTO products(code, name, price, remain) VALUES(?,?,?,?) "
            "ON CONFLICT(code) DO UPDATE SET name=excluded.name, price=excluded.price, remain=excluded.remain",
            (code, name, price, remain),
        )
    finally:
        conn.close()

def list_products(db_path: Optional[str] = None) -> List[Dict[str, Any]]:
    conn = _connect(db_path)
    try:
        rows = conn.execute("SELECT code, name, price, remain FROM products ORDER BY code").fetchall()
        return [dict(r) for r in rows]
    finally:
        conn.close()

def find_product(code: str, db_path: Optional[str] = None) -> Optional[Dict[str, Any]]:
    conn = _connect(db_path)
    try:
        row = conn.execute(
            "SELECT code, name, price, remain FROM products WHERE code=?",
            (code,),
        ).fetchone()
        return dict(row) if row else None
    finally:
        conn.close()

def checkout(lines: Sequence[Tuple[str, int]], db_path: Optional[str] = None) -> Tuple[bool, Any]:
    """
    All or nothing:
    - check every line against products.remain
    - decrement stock
    - write orders + order_items
    Returns (True, (order_id, total)) or (False, reason).
    """
    if not lines:
        return False, "cart is empty"

    # the same code twice counts as one line
    wanted: Dict[str, int] = {}
    for code, qty in lines:
        if qty <= 0:
            return False, f"quantity for {code} must be > 0"
        wanted[code] = wanted.get(code, 0) + qty

    conn = _connect(db_path)
    try:
        conn.execute("BEGIN IMMEDIATE")

        # 1) check everything is in stock
        found: Dict[str, sqlite3.Row] = {}
        for code, qty in wanted.items():
            prod = conn.execute(
                "SELECT code, name, price, remain FROM products WHERE code=?",
                (code,),
            ).fetchone()
            if not prod:
                conn.execute("ROLLBACK")
                return False, f"product not found: {code}"
            if prod["remain"] < qty:
                conn.execute("ROLLBACK")
                return False, f"not enough {code}: have {prod['remain']}, need {qty}"
            found[code] = prod

        # 2) create order
        created_at = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        cur = conn.execute("INSERT INTO orders(created_at, total) VALUES(?,?)", (created_at, 0))
        order_id = int(cur.lastrowid)

        # 3) decrement stock + write items
        total = 0
        for code, qty in wanted.items():
            prod = found[code]
            conn.execute("UPDATE products SET remain = remain - ? WHERE code=?", (qty, code))
            line_total = prod["price"] * qty
            total += line_total
            conn.execute(
                """
                INSERT INTO order_items(order_id, code, name, qty, price, line_total)
                VALUES(?,?,?,?,?,?)
                """,
                (order_id, code, prod["name"], qty, prod["price"], line_total),
            )

        # 4) update total
        conn.execute("UPDATE orders SET total=? WHERE id=?", (total, order_id))

        conn.execute("COMMIT")
        return True, (order_id, total)
    except sqlite3.Error as e:
        if conn.in_transaction:
            conn.execute("ROLLBACK")
        return False, str(e)
    finally:
        conn.close()

def list_order_items(order_id: int, db_path: Optional[str] = None) -> List[Dict[str, Any]]:
    conn = _connect(db_path)
    try:
        rows = conn.execute(
            "SELECT code, name, qty, price, line_total FROM order_items WHERE order_id=? ORDER BY id",
            (order_id,),
        ).fetchall()
        return [dict(r) for r in rows]
    finally:
        conn.close()
