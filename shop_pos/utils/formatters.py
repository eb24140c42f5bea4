from decimal import Decimal

from shop_pos.config import settings


def money(minor: int) -> str:
    amount = Decimal(minor).scaleb(-settings.decimals)
    return f"{amount:,.{settings.decimals}f} {settings.currency}"
