from config.settings import CURRENCY


def fmt_amount(value, currency: str = CURRENCY) -> str:
    """Format an amount: 1234567.891 -> KES 1,234,567.89"""
    return f"{currency} {float(value):,.2f}"


def fmt_rate(value) -> str:
    """Format a percentage: 6.25 -> 6.25%"""
    return f"{float(value):.2f}%"


def fmt_weeks(weeks: int) -> str:
    """4 -> 4 Weeks, 1 -> 1 Week"""
    weeks = int(weeks)
    return f"{weeks} Week" if weeks == 1 else f"{weeks} Weeks"


def fmt_range(min_amount, max_amount, currency: str = CURRENCY) -> str:
    """Amount range of a product, open ended when max_amount is None."""
    if max_amount is None:
        return f"{currency} {float(min_amount):,.0f} and above"
    return f"{currency} {float(min_amount):,.0f} - {float(max_amount):,.0f}"
