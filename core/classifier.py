"""New vs repeat customer classification."""
from typing import Iterable

from config.constants import CustomerClass, QUALIFYING_LOAN_STATUSES


def _status_of(loan) -> str:
    if isinstance(loan, str):
        return loan
    if isinstance(loan, dict):
        return str(loan.get("status", ""))
    return str(getattr(loan, "status", ""))


def classify(prior_loans: Iterable) -> CustomerClass:
    """NEW unless some prior loan is disbursed or pending disbursement.

    Accepts CustomerLoanRecord objects, dicts with a "status" key or bare
    status strings.
    """
    for loan in prior_loans or ():
        if _status_of(loan) in QUALIFYING_LOAN_STATUSES:
            return CustomerClass.REPEAT
    return CustomerClass.NEW
