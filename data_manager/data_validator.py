from decimal import Decimal
from typing import Iterable, Optional, Tuple

from config.constants import ProcessingFeeMode
from data_manager.schema import LoanProduct
from utils.money import CENT, to_decimal


def validate_loan_product(
    product_name: str,
    min_amount,
    max_amount=None,
    registration_fee=None,
) -> Tuple[bool, str]:
    """Validate a loan product entry, returns (ok, error message)."""
    if not product_name or not str(product_name).strip():
        return False, "Product name is required"

    low = to_decimal(min_amount)
    if low is None or not low.is_finite():
        return False, "Minimum amount is required"
    if low <= 0:
        return False, "Minimum amount must be greater than 0"

    if max_amount is not None and max_amount != "":
        high = to_decimal(max_amount)
        if high is None or not high.is_finite():
            return False, f"Invalid maximum amount: {max_amount}"
        if high < low:
            return False, "Maximum amount must not be below the minimum amount"

    if registration_fee is not None and registration_fee != "":
        fee = to_decimal(registration_fee)
        if fee is None or fee < 0:
            return False, "Registration fee must be 0 or more"

    return True, ""


def validate_product_type(
    product_type: str,
    duration_weeks,
    interest_rate,
    processing_fee_rate=0,
    processing_fee_mode: str = ProcessingFeeMode.FLAT.value,
    registration_fee=0,
) -> Tuple[bool, str]:
    """Validate a product type entry."""
    if not product_type or not str(product_type).strip():
        return False, "Product type name is required"

    try:
        weeks = int(duration_weeks)
    except (TypeError, ValueError):
        return False, f"Invalid duration: {duration_weeks}"
    if weeks <= 0 or weeks != float(duration_weeks):
        return False, "Duration must be a whole number of weeks greater than 0"

    if processing_fee_mode not in [e.value for e in ProcessingFeeMode]:
        return False, f"Invalid processing fee mode: {processing_fee_mode}"

    for label, value in (("Interest rate", interest_rate),
                         ("Processing fee rate", processing_fee_rate),
                         ("Registration fee", registration_fee)):
        number = to_decimal(value, Decimal("0") if label != "Interest rate" else None)
        if number is None:
            return False, f"{label} is required"
        if not number.is_finite() or number < 0:
            return False, f"{label} must be 0 or more"

    return True, ""


def validate_catalog_ranges(products: Iterable[LoanProduct]) -> Tuple[bool, str]:
    """Ranges must not overlap and must leave no gap wider than one cent."""
    ordered = sorted(products, key=lambda p: p.min_amount)
    previous: Optional[LoanProduct] = None
    for product in ordered:
        if previous is not None:
            if previous.max_amount is None:
                return False, f"{previous.product_name} has no upper bound but {product.product_name} starts above it"
            if product.min_amount <= previous.max_amount:
                return False, f"{product.product_name} overlaps {previous.product_name}"
            if product.min_amount - previous.max_amount > CENT:
                return False, f"Amounts between {previous.product_name} and {product.product_name} are not covered"
        previous = product
    return True, ""
