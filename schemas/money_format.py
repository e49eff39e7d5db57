# money_format.py
from decimal import Decimal

from core.money import Money

NBSP = "\u00a0"


def format_currency(money: Money) -> str:
    """Render like a German-locale euro amount: ``1.234,50 €``."""
    value = money.to_decimal()
    sign = "-" if value < 0 else ""
    whole, fraction = f"{abs(value):.2f}".split(".")
    grouped = f"{int(whole):,}".replace(",", ".")
    return f"{sign}{grouped},{fraction}{NBSP}€"


def as_number(money: Money) -> float:
    """Major-unit number for JSON (``1050`` cents -> ``10.5``)."""
    return float(Decimal(money.cents) / 100)
