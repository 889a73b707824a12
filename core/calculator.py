"""Core pricing: fees, flat interest, weekly installment, effective rate"""
from decimal import Decimal
from typing import List, Optional, Sequence

import numpy as np
from scipy import optimize

from config.constants import CustomerClass, ProcessingFeeMode
from config.settings import WEEKS_PER_YEAR, RATE_PRECISION
from data_manager.schema import (
    LoanProduct, PricingResult, ProductType, RepaymentScheduleEntry,
)
from utils.money import round_money

HUNDRED = Decimal(100)


def calc_processing_fee(principal: Decimal, product_type: ProductType) -> Decimal:
    """Percentage mode charges a percent of principal, flat mode the rate itself."""
    if product_type.processing_fee_mode == ProcessingFeeMode.PERCENTAGE.value:
        return principal * product_type.processing_fee_rate / HUNDRED
    return product_type.processing_fee_rate


def calc_registration_fee(
    product: LoanProduct,
    product_type: ProductType,
    customer_class: CustomerClass,
) -> Decimal:
    """Registration fee, charged once and only to new customers.

    The product's fee applies; the product type's fee is used only when the
    product does not define one.
    """
    if customer_class != CustomerClass.NEW:
        return Decimal("0")
    if product.registration_fee is not None:
        return product.registration_fee
    return product_type.registration_fee


def calc_flat_interest(principal: Decimal, interest_rate: Decimal) -> Decimal:
    """Simple interest over the whole duration, never compounded."""
    return principal * interest_rate / HUNDRED


def price(
    principal: Decimal,
    product: LoanProduct,
    product_type: ProductType,
    customer_class: CustomerClass,
    approved_limit: Optional[Decimal] = None,
) -> PricingResult:
    """Price a validated principal with a matched product and product type.

    Fees are billed with the first installment and stay out of total_payable,
    so the installment amortises principal + interest only. Intermediate
    values are kept exact; only the returned amounts are rounded to cents.
    """
    processing_fee = calc_processing_fee(principal, product_type)
    registration_fee = calc_registration_fee(product, product_type, customer_class)
    total_interest = calc_flat_interest(principal, product_type.interest_rate)
    total_payable = principal + total_interest
    weekly_installment = total_payable / product_type.duration_weeks

    return PricingResult(
        principal=principal,
        approved_limit=approved_limit if approved_limit is not None else principal,
        product_id=product.product_id,
        product_name=product.product_name,
        product_range=product.range_label,
        type_id=product_type.type_id,
        type_name=product_type.product_type,
        is_new_customer=customer_class == CustomerClass.NEW,
        processing_fee=round_money(processing_fee),
        registration_fee=round_money(registration_fee),
        interest_rate=product_type.interest_rate,
        total_interest=round_money(total_interest),
        total_payable=round_money(total_payable),
        weekly_installment=round_money(weekly_installment),
        duration_weeks=product_type.duration_weeks,
    )


def select_tier(
    available: Sequence[ProductType],
    duration_weeks: Optional[int],
    selected_type_id: Optional[str] = None,
) -> Optional[ProductType]:
    """Pick the product type to price with.

    An explicit selection wins while it still belongs to the matched product.
    A stale or missing selection falls back to the type matching the held
    duration, then to the first available type (the shortest duration).
    """
    if not available:
        return None
    if selected_type_id:
        for product_type in available:
            if product_type.type_id == selected_type_id:
                return product_type
    if duration_weeks is not None:
        for product_type in available:
            if product_type.duration_weeks == duration_weeks:
                return product_type
    return available[0]


def calc_effective_rate(
    result: PricingResult,
    schedule: List[RepaymentScheduleEntry],
) -> float:
    """Annualised IRR (%) of the borrower's weekly cash flows, fees included."""
    if not schedule or result.principal <= 0:
        return 0.0
    cash_flows = [-float(result.principal)]
    cash_flows.extend(
        float(e.total_due + e.processing_fee_due + e.registration_fee_due)
        for e in schedule
    )
    flows = np.array(cash_flows)
    periods = np.arange(len(flows))

    def npv(rate):
        return float(np.sum(flows / (1 + rate) ** periods))

    try:
        weekly_irr = optimize.brentq(npv, -0.5, 1.0)
        annual_irr = (1 + weekly_irr) ** WEEKS_PER_YEAR - 1
        return round(annual_irr * 100, RATE_PRECISION)
    except (ValueError, RuntimeError, OverflowError):
        return 0.0
