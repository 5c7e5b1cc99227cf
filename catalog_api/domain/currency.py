"""Domain helpers for currency codes and price conversion."""
from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal

CURRENCY_PATTERN = re.compile(r"[A-Z]{3}")


def normalize_currency(value: str | None) -> str:
    return (value or "").strip().upper()


def is_valid_currency(value: str | None) -> bool:
    """Return True when value is a three-letter upper-case ISO-style code."""
    if not value:
        return False
    return bool(CURRENCY_PATTERN.fullmatch(value))


def convert_price(price: float, rate: float) -> float:
    """Multiply and round half-up to two decimal places."""
    amount = Decimal(str(price)) * Decimal(str(rate))
    return float(amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
