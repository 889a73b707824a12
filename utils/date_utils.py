from datetime import date
from dateutil.relativedelta import relativedelta


def add_weeks(d: date, weeks: int) -> date:
    """Date plus N weeks."""
    return d + relativedelta(weeks=weeks)


def get_due_date(start_date: date, week: int) -> date:
    """Due date of installment `week`; week 1 falls 7 days after the start."""
    return add_weeks(start_date, week)
