"""Loan record construction for the "create loan" command."""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from config.settings import DEFAULT_LOAN_STATUS
from core.engine import Quote
from core.exceptions import BookingBlockedError
from utils.id_generator import generate_loan_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BookingContext:
    """Booking metadata stamped on the record as-is."""
    customer_id: str
    booked_by: Optional[str] = None
    branch_id: Optional[str] = None
    region_id: Optional[str] = None
    tenant_id: Optional[str] = None


def build_loan_record(
    quote: Optional[Quote],
    approved_limit,
    context: BookingContext,
    booked_at: Optional[datetime] = None,
    loan_id: Optional[str] = None,
) -> dict:
    """Turn a bookable quote into the loan row to persist.

    Raises BookingBlockedError with the reasons when the quote carries errors
    or no amount was entered.
    """
    if quote is None:
        raise BookingBlockedError(["No loan amount entered."])
    if not quote.is_bookable:
        reasons = quote.messages() or ["Select a product type."]
        logger.info("booking blocked for customer %s: %s", context.customer_id, reasons)
        raise BookingBlockedError(reasons)

    result = quote.result
    booked_at = booked_at or datetime.now()
    return {
        "loan_id": loan_id or generate_loan_id(),
        "customer_id": context.customer_id,
        "product_id": result.product_id,
        "product_name": result.product_name,
        "product_type_id": result.type_id,
        "product_type": result.type_name,
        "prequalified_amount": float(approved_limit),
        "scored_amount": float(result.principal),
        "duration_weeks": result.duration_weeks,
        "processing_fee": float(result.processing_fee),
        "registration_fee": float(result.registration_fee),
        "interest_rate": float(result.interest_rate),
        "total_interest": float(result.total_interest),
        "total_payable": float(result.total_payable),
        "weekly_payment": float(result.weekly_installment),
        "status": DEFAULT_LOAN_STATUS,
        "is_new_loan": result.is_new_customer,
        "booked_at": booked_at.isoformat(),
        "booked_by": context.booked_by,
        "branch_id": context.branch_id,
        "region_id": context.region_id,
        "tenant_id": context.tenant_id,
    }
