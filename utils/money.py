"""Decimal helpers for currency amounts."""
import math
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

from config.settings import AMOUNT_PRECISION

CENT = Decimal(1).scaleb(-AMOUNT_PRECISION)


def to_decimal(value, default: Optional[Decimal] = None) -> Optional[Decimal]:
    """Convert workbook/CLI values to Decimal; blanks and NaN give `default`."""
    if value is None:
        return default
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        if math.isnan(value):
            return default
        # go through str so 0.1 stays 0.1
        return Decimal(repr(value))
    if isinstance(value, str):
        value = value.strip().replace(",", "")
        if not value:
            return default
    try:
        return Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        return default


def round_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)
