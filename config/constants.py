from enum import Enum


class ProcessingFeeMode(str, Enum):
    FLAT = "flat"  # rate is a currency amount
    PERCENTAGE = "percentage"  # rate is a percent of principal

    @property
    def label(self) -> str:
        return {
            "flat": "Flat amount",
            "percentage": "Percent of principal",
        }[self.value]


class CustomerClass(str, Enum):
    NEW = "new"
    REPEAT = "repeat"

    @property
    def label(self) -> str:
        return {
            "new": "New Loan",
            "repeat": "Repeat",
        }[self.value]


class LoanStatus(str, Enum):
    BM_REVIEW = "bm_review"
    PENDING_DISBURSEMENT = "pending_disbursement"
    DISBURSED = "disbursed"
    REJECTED = "rejected"


# A customer with any loan in these states is a repeat customer
QUALIFYING_LOAN_STATUSES = (
    LoanStatus.DISBURSED.value,
    LoanStatus.PENDING_DISBURSEMENT.value,
)


class ErrorCode(str, Enum):
    INVALID_AMOUNT = "invalid_amount"
    EXCEEDS_APPROVED_LIMIT = "exceeds_approved_limit"
    BELOW_MINIMUM_BOOKABLE = "below_minimum_bookable"
    NO_PRODUCT_MATCH = "no_product_match"
    NO_PRICING_TIER_AVAILABLE = "no_pricing_tier_available"

    @property
    def label(self) -> str:
        return {
            "invalid_amount": "Invalid amount",
            "exceeds_approved_limit": "Exceeds approved limit",
            "below_minimum_bookable": "Below minimum bookable amount",
            "no_product_match": "No matching loan product",
            "no_pricing_tier_available": "No product type available",
        }[self.value]


# Sheet names
SHEET_LOAN_PRODUCTS = "loan_products"
SHEET_PRODUCT_TYPES = "loan_product_types"
SHEET_CUSTOMER_LOANS = "customer_loans"
SHEET_LOANS = "loans"
SHEET_CONFIG = "config"

# Column definitions
LOAN_PRODUCTS_COLUMNS = [
    "product_id", "product_name", "product_code",
    "min_amount", "max_amount", "registration_fee", "created_at",
]

PRODUCT_TYPES_COLUMNS = [
    "type_id", "product_id", "product_type", "duration_weeks",
    "interest_rate", "processing_fee_rate", "processing_fee_mode",
    "registration_fee", "penalty_rate", "created_at",
]

CUSTOMER_LOANS_COLUMNS = ["loan_id", "customer_id", "status", "created_at"]

LOANS_COLUMNS = [
    "loan_id", "customer_id", "product_id", "product_name", "product_type_id",
    "product_type", "prequalified_amount", "scored_amount", "duration_weeks",
    "processing_fee", "registration_fee", "interest_rate", "total_interest",
    "total_payable", "weekly_payment", "status", "is_new_loan",
    "booked_at", "booked_by", "branch_id", "region_id", "tenant_id",
]

REPAYMENT_SCHEDULE_COLUMNS = [
    "week", "due_date", "principal", "interest",
    "processing_fee", "registration_fee", "total_due",
]

TIER_COMPARISON_COLUMNS = [
    "type_id", "product_type", "duration_weeks", "interest_rate",
    "processing_fee", "registration_fee", "total_interest",
    "total_payable", "weekly_installment", "effective_rate",
]

CONFIG_COLUMNS = ["key", "value", "description", "updated_at"]
