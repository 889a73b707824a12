import os
from pathlib import Path

# Project root
PROJECT_ROOT = Path(__file__).parent.parent

# Data file paths
DATA_DIR = PROJECT_ROOT / "data"
EXCEL_FILE = Path(os.getenv("LOANBOOK_DATA_FILE") or DATA_DIR / "loan_book.xlsx")
BACKUP_KEEP = 5

# Logging
LOG_LEVEL = os.getenv("LOANBOOK_LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Booking rules
CURRENCY = "KES"
DEFAULT_MIN_BOOKABLE_AMOUNT = 1000
DEFAULT_DURATION_WEEKS = 4
DEFAULT_LOAN_STATUS = "bm_review"

# Seconds the "exceeds approved limit" warning stays on screen
LIMIT_WARNING_SECONDS = 4

# Weeks per year, used to annualise the effective rate
WEEKS_PER_YEAR = 52

# Page configuration
PAGE_TITLE = "Loan Booking Console"
PAGE_ICON = "💳"
LAYOUT = "wide"

# Chart colours
COLORS = {
    "primary": "#1f77b4",
    "secondary": "#ff7f0e",
    "success": "#2ca02c",
    "danger": "#d62728",
    "warning": "#bcbd22",
    "info": "#17becf",
    "principal": "#1f77b4",
    "interest": "#ff7f0e",
    "fees": "#d62728",
}

# Amount precision
AMOUNT_PRECISION = 2
RATE_PRECISION = 4
