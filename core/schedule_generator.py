"""
Weekly repayment schedule generator

Expands a priced loan into its weekly installments. Every week is charged the
same installment; interest is split evenly; fees are listed on week 1 only.
Rounding remainders are carried into the final week so the schedule sums to
the priced totals to the cent.
"""
from datetime import date
from decimal import Decimal
from typing import List

import pandas as pd

from config.constants import REPAYMENT_SCHEDULE_COLUMNS
from data_manager.schema import PricingResult, RepaymentScheduleEntry
from utils.date_utils import get_due_date
from utils.money import round_money

ZERO = Decimal("0")


def _even_split(total: Decimal, parts: int) -> List[Decimal]:
    """Split a cent amount into `parts` rounded shares, remainder in the last."""
    share = round_money(total / parts)
    shares = [share] * (parts - 1)
    shares.append(total - share * (parts - 1))
    return shares


def generate(result: PricingResult, start_date: date) -> List[RepaymentScheduleEntry]:
    """
    Build the weekly schedule for a priced result

    Args:
        result: a priced PricingResult (duration_weeks > 0)
        start_date: booking date; week 1 is due 7 days later

    Returns:
        exactly duration_weeks entries, sum(total_due) == total_payable
    """
    weeks = int(result.duration_weeks)
    if weeks <= 0:
        return []

    # weekly_installment is already rounded; the last week absorbs the drift
    dues = [result.weekly_installment] * (weeks - 1)
    dues.append(result.total_payable - result.weekly_installment * (weeks - 1))
    interests = _even_split(result.total_interest, weeks)

    schedule = []
    for i in range(weeks):
        week = i + 1
        schedule.append(RepaymentScheduleEntry(
            week_number=week,
            due_date=get_due_date(start_date, week),
            principal_portion=dues[i] - interests[i],
            interest_portion=interests[i],
            processing_fee_due=result.processing_fee if week == 1 else ZERO,
            registration_fee_due=result.registration_fee if week == 1 else ZERO,
            total_due=dues[i],
        ))
    return schedule


def schedule_to_frame(schedule: List[RepaymentScheduleEntry]) -> pd.DataFrame:
    """Schedule as a DataFrame for tables, charts and CSV output."""
    records = [{
        "week": e.week_number,
        "due_date": e.due_date.strftime("%Y-%m-%d"),
        "principal": float(e.principal_portion),
        "interest": float(e.interest_portion),
        "processing_fee": float(e.processing_fee_due),
        "registration_fee": float(e.registration_fee_due),
        "total_due": float(e.total_due),
    } for e in schedule]
    return pd.DataFrame(records, columns=REPAYMENT_SCHEDULE_COLUMNS)
