"""Pricing pipeline and the reactive booking-form state around it."""
import logging
import time
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Callable, List, Optional

from config.constants import CustomerClass, ErrorCode
from config.settings import (
    DEFAULT_DURATION_WEEKS, DEFAULT_MIN_BOOKABLE_AMOUNT, LIMIT_WARNING_SECONDS,
)
from core.calculator import price, select_tier
from core.catalog import ProductCatalog
from core.classifier import classify
from core.eligibility import describe_error, parse_principal, validate
from core.schedule_generator import generate
from data_manager.schema import (
    PricingRequest, PricingResult, ProductType, RepaymentScheduleEntry,
)
from utils.money import to_decimal

logger = logging.getLogger(__name__)


@dataclass
class Quote:
    result: PricingResult
    schedule: List[RepaymentScheduleEntry] = field(default_factory=list)
    product_type: Optional[ProductType] = None
    available_types: List[ProductType] = field(default_factory=list)
    min_amount: Decimal = Decimal(DEFAULT_MIN_BOOKABLE_AMOUNT)

    @property
    def errors(self) -> List[ErrorCode]:
        return self.result.errors

    @property
    def is_bookable(self) -> bool:
        return not self.result.errors and bool(self.schedule)

    def messages(self) -> List[str]:
        return [describe_error(code, self.result.approved_limit, self.min_amount)
                for code in self.result.errors]


def compute_quote(
    request: PricingRequest,
    catalog: ProductCatalog,
    start_date: Optional[date] = None,
    min_amount: Decimal = Decimal(DEFAULT_MIN_BOOKABLE_AMOUNT),
) -> Optional[Quote]:
    """
    One full pricing pass: validate, match product, select type, price, schedule.

    Returns None when no amount has been entered. Otherwise returns a Quote;
    its result carries every error code found, and an error-free quote with a
    schedule is ready to book. Same inputs always give the same quote.
    """
    approved_limit = to_decimal(request.approved_limit, Decimal("0"))
    min_amount = to_decimal(min_amount, Decimal(DEFAULT_MIN_BOOKABLE_AMOUNT))
    start_date = start_date or date.today()

    principal, parse_error = parse_principal(request.principal)
    if parse_error is not None:
        result = PricingResult(principal=Decimal("0"), approved_limit=approved_limit,
                               errors=[parse_error])
        return Quote(result=result, min_amount=min_amount)
    if principal is None:
        return None

    errors = validate(principal, approved_limit, min_amount)
    if ErrorCode.EXCEEDS_APPROVED_LIMIT in errors:
        result = PricingResult(principal=principal, approved_limit=approved_limit, errors=errors)
        return Quote(result=result, min_amount=min_amount)

    customer_class = classify(request.prior_loans)
    product = catalog.match_product(principal)
    if product is None:
        errors.append(ErrorCode.NO_PRODUCT_MATCH)
        result = PricingResult(
            principal=principal, approved_limit=approved_limit,
            is_new_customer=customer_class == CustomerClass.NEW, errors=errors,
        )
        return Quote(result=result, min_amount=min_amount)

    available = catalog.list_types_for_product(product.product_id)
    product_type = select_tier(available, request.duration_weeks, request.selected_type_id)
    if product_type is None:
        errors.append(ErrorCode.NO_PRICING_TIER_AVAILABLE)
        result = PricingResult(
            principal=principal, approved_limit=approved_limit,
            product_id=product.product_id, product_name=product.product_name,
            product_range=product.range_label,
            is_new_customer=customer_class == CustomerClass.NEW, errors=errors,
        )
        return Quote(result=result, min_amount=min_amount)

    result = price(principal, product, product_type, customer_class, approved_limit)
    result.errors = errors
    schedule = generate(result, start_date)
    logger.debug("priced %s with %s: payable %s over %s weeks, errors=%s",
                 principal, product_type.type_id, result.total_payable,
                 result.duration_weeks, [e.value for e in errors])
    return Quote(result=result, schedule=schedule, product_type=product_type,
                 available_types=available, min_amount=min_amount)


@dataclass(frozen=True)
class LimitWarning:
    message: str
    raised_at: float
    display_seconds: float = LIMIT_WARNING_SECONDS

    def is_active(self, now: float) -> bool:
        return now - self.raised_at < self.display_seconds


class PricingEngine:
    """Booking form state: any input change recomputes the quote from scratch.

    Inputs are the entered principal, the held duration and the selected
    product type. The catalog, prior loans and approved limit are fixed for
    the lifetime of the form.
    """

    def __init__(
        self,
        catalog: ProductCatalog,
        approved_limit,
        prior_loans=(),
        start_date: Optional[date] = None,
        min_amount=DEFAULT_MIN_BOOKABLE_AMOUNT,
        duration_weeks: int = DEFAULT_DURATION_WEEKS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.catalog = catalog
        self.approved_limit = to_decimal(approved_limit, Decimal("0"))
        self.prior_loans = tuple(prior_loans or ())
        self.start_date = start_date
        self.min_amount = to_decimal(min_amount, Decimal(DEFAULT_MIN_BOOKABLE_AMOUNT))
        self.clock = clock

        self.principal = None
        self.duration_weeks = duration_weeks
        self.selected_type_id: Optional[str] = None
        self.quote: Optional[Quote] = None
        self.warning: Optional[LimitWarning] = None

    def set_principal(self, raw) -> Optional[Quote]:
        """Enter a new amount. Over the limit resets the amount to zero."""
        self.principal = raw
        quote = self.recompute()
        if quote is not None and ErrorCode.EXCEEDS_APPROVED_LIMIT in quote.errors:
            message = describe_error(ErrorCode.EXCEEDS_APPROVED_LIMIT, self.approved_limit, self.min_amount)
            self.warning = LimitWarning(message=message, raised_at=self.clock())
            logger.info("amount %s over approved limit %s, reset to zero", raw, self.approved_limit)
            self.principal = 0
            self.recompute()
            return quote
        self.warning = None
        return quote

    def set_duration(self, weeks: int) -> Optional[Quote]:
        """Hold a duration; the product type is re-picked to match it."""
        self.duration_weeks = int(weeks)
        self.selected_type_id = None
        return self.recompute()

    def select_type(self, type_id: Optional[str]) -> Optional[Quote]:
        self.selected_type_id = type_id or None
        return self.recompute()

    def recompute(self) -> Optional[Quote]:
        request = PricingRequest(
            principal=self.principal,
            approved_limit=self.approved_limit,
            prior_loans=self.prior_loans,
            selected_type_id=self.selected_type_id,
            duration_weeks=self.duration_weeks,
        )
        quote = compute_quote(request, self.catalog, self.start_date, self.min_amount)
        if quote is None or quote.product_type is None:
            self.selected_type_id = None
        else:
            self.selected_type_id = quote.product_type.type_id
            self.duration_weeks = quote.product_type.duration_weeks
        self.quote = quote
        return quote

    def active_warning(self) -> Optional[LimitWarning]:
        """The limit warning while its display window is open."""
        if self.warning is not None and not self.warning.is_active(self.clock()):
            self.warning = None
        return self.warning
