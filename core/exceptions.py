"""Exceptions raised by booking and catalog commands.

Pricing itself never raises for bad input: validation failures travel as
error codes on the pricing result.
"""


class LoanBookError(Exception):
    """Base exception for all loan book errors."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class CatalogError(LoanBookError):
    """Raised when a catalog record is missing or inconsistent."""


class BookingBlockedError(LoanBookError):
    """Raised when a quote with errors is submitted for booking."""

    def __init__(self, reasons: list):
        self.reasons = list(reasons)
        message = "Loan cannot be booked"
        if self.reasons:
            message = f"Loan cannot be booked: {'; '.join(self.reasons)}"
        super().__init__(message)
