from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional

from config.constants import CustomerClass, ErrorCode, ProcessingFeeMode


@dataclass(frozen=True)
class LoanProduct:
    product_id: str
    product_name: str
    min_amount: Decimal
    max_amount: Optional[Decimal] = None  # None means no upper bound
    registration_fee: Optional[Decimal] = None
    product_code: str = ""

    def contains(self, amount: Decimal) -> bool:
        if amount < self.min_amount:
            return False
        return self.max_amount is None or amount <= self.max_amount

    @property
    def range_label(self) -> str:
        if self.max_amount is None:
            return f"{self.min_amount:,.2f} and above"
        return f"{self.min_amount:,.2f} - {self.max_amount:,.2f}"


@dataclass(frozen=True)
class ProductType:
    type_id: str
    product_id: str
    product_type: str
    duration_weeks: int
    interest_rate: Decimal  # percent of principal over the whole duration
    processing_fee_rate: Decimal = Decimal("0")
    processing_fee_mode: str = ProcessingFeeMode.FLAT.value
    registration_fee: Decimal = Decimal("0")
    penalty_rate: Decimal = Decimal("0")  # carried through, never applied


@dataclass(frozen=True)
class CustomerLoanRecord:
    status: str
    loan_id: str = ""


@dataclass(frozen=True)
class PricingRequest:
    principal: object  # raw input, parsed by the eligibility validator
    approved_limit: Decimal
    prior_loans: tuple = ()
    selected_type_id: Optional[str] = None
    duration_weeks: Optional[int] = None


@dataclass
class PricingResult:
    principal: Decimal
    approved_limit: Decimal
    product_id: str = ""
    product_name: str = ""
    product_range: str = ""
    type_id: str = ""
    type_name: str = ""
    is_new_customer: bool = False
    processing_fee: Decimal = Decimal("0")
    registration_fee: Decimal = Decimal("0")
    interest_rate: Decimal = Decimal("0")
    total_interest: Decimal = Decimal("0")
    total_payable: Decimal = Decimal("0")
    weekly_installment: Decimal = Decimal("0")
    duration_weeks: int = 0
    errors: List[ErrorCode] = field(default_factory=list)

    @property
    def customer_class(self) -> CustomerClass:
        return CustomerClass.NEW if self.is_new_customer else CustomerClass.REPEAT

    @property
    def is_priced(self) -> bool:
        return bool(self.type_id) and self.duration_weeks > 0


@dataclass(frozen=True)
class RepaymentScheduleEntry:
    week_number: int
    due_date: date
    principal_portion: Decimal
    interest_portion: Decimal
    processing_fee_due: Decimal
    registration_fee_due: Decimal
    total_due: Decimal
