"""Principal validation against the approved limit and the bookable floor."""
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Tuple

from config.constants import ErrorCode
from config.settings import CURRENCY, DEFAULT_MIN_BOOKABLE_AMOUNT
from utils.money import round_money


def parse_principal(raw) -> Tuple[Optional[Decimal], Optional[ErrorCode]]:
    """Parse the entered principal.

    Returns (amount, None) for a usable amount, (None, None) when nothing has
    been entered (blank or zero) and (None, INVALID_AMOUNT) for text that is
    not a number, non-finite values, negatives and amounts finer than a cent.
    """
    if raw is None:
        return None, None
    if isinstance(raw, bool):
        return None, ErrorCode.INVALID_AMOUNT
    if isinstance(raw, str):
        raw = raw.strip().replace(",", "")
        if not raw:
            return None, None
    try:
        amount = raw if isinstance(raw, Decimal) else Decimal(str(raw))
    except (InvalidOperation, ValueError, TypeError):
        return None, ErrorCode.INVALID_AMOUNT
    if not amount.is_finite() or amount < 0:
        return None, ErrorCode.INVALID_AMOUNT
    if amount == 0:
        return None, None
    if amount != round_money(amount):
        return None, ErrorCode.INVALID_AMOUNT
    return amount, None


def validate(
    principal: Decimal,
    approved_limit: Decimal,
    min_amount: Decimal = Decimal(DEFAULT_MIN_BOOKABLE_AMOUNT),
) -> List[ErrorCode]:
    """Check a parsed principal against its bounds, in rule order.

    EXCEEDS_APPROVED_LIMIT is terminal and returned alone. BELOW_MINIMUM_BOOKABLE
    blocks booking but still lets the amount be priced.
    """
    if principal > approved_limit:
        return [ErrorCode.EXCEEDS_APPROVED_LIMIT]
    errors = []
    if principal < min_amount:
        errors.append(ErrorCode.BELOW_MINIMUM_BOOKABLE)
    return errors


def describe_error(
    code: ErrorCode,
    approved_limit: Decimal,
    min_amount: Decimal = Decimal(DEFAULT_MIN_BOOKABLE_AMOUNT),
) -> str:
    """Human-readable explanation naming the bound that failed."""
    if code == ErrorCode.EXCEEDS_APPROVED_LIMIT:
        return (f"Amount exceeds approved limit of {CURRENCY} {approved_limit:,.2f}. "
                f"Please enter a valid amount.")
    if code == ErrorCode.BELOW_MINIMUM_BOOKABLE:
        return f"Amount must be {CURRENCY} {min_amount:,.2f} or more."
    if code == ErrorCode.NO_PRODUCT_MATCH:
        return "No loan product covers this amount."
    if code == ErrorCode.NO_PRICING_TIER_AVAILABLE:
        return "The matched loan product has no product type to price with."
    return (f"Please enter a valid loan amount ({CURRENCY} {min_amount:,.2f} - "
            f"{approved_limit:,.2f}).")
