from __future__ import annotations

import os
from datetime import datetime
from typing import Optional, Sequence

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from shop_pos.config import settings
from shop_pos.core.models import CartItem
from shop_pos.utils.formatters import money


def generate_receipt_pdf(items: Sequence[CartItem], total: int, export_dir: Optional[str] = None) -> str:
    out_dir = export_dir or settings.export_dir
    os.makedirs(out_dir, exist_ok=True)

    now = datetime.now()
    filename = f"receipt_{now.strftime('%Y-%m-%d_%H-%M-%S_%f')}.pdf"
    path = os.path.join(out_dir, filename)

    c = canvas.Canvas(path, pagesize=A4)
    w, h = A4

    y = h - 50
    c.setFont("Helvetica-Bold", 14)
    c.drawString(40, y, "RECEIPT")
    y -= 20

    c.setFont("Helvetica", 11)
    c.drawString(40, y, f"Date: {now.strftime('%Y-%m-%d %H:%M:%S')}")
    y -= 16
    c.drawString(40, y, f"Currency: {settings.currency}")
    y -= 24

    # header
    c.setFont("Helvetica-Bold", 10)
    c.drawString(40, y, "Item")
    c.drawString(310, y, "Qty")
    c.drawString(360, y, "Price")
    c.drawString(440, y, "Total")
    y -= 10
    c.line(40, y, 550, y)
    y -= 16

    c.setFont("Helvetica", 10)
    for it in items:
        c.drawString(40, y, f"{it.code} - {it.name}"[:45])
        c.drawRightString(340, y, str(it.quantity))
        c.drawRightString(420, y, money(it.price))
        c.drawRightString(550, y, money(it.line_total))
        y -= 14
        if y < 80:
            c.showPage()
            y = h - 50
            c.setFont("Helvetica", 10)

    y -= 10
    c.line(40, y, 550, y)
    y -= 18
    c.setFont("Helvetica-Bold", 12)
    c.drawRightString(550, y, f"TOTAL: {money(total)}")

    c.save()
    return path
