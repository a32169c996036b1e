"""Exceptions for django-travel-desk."""


class TravelDeskError(Exception):
    """Base exception for travel desk errors."""
    pass


class InvalidAmountError(TravelDeskError, ValueError):
    """Raised when a booked amount is zero or negative."""
    pass


class InsufficientBalanceError(TravelDeskError):
    """Raised when a debit exceeds the balance it is drawn from."""

    def __init__(self, balance, requested, label="balance"):
        self.balance = balance
        self.requested = requested
        super().__init__(
            f"Insufficient {label}: available={balance}, requested={requested}"
        )


class InsufficientDepositError(InsufficientBalanceError):
    """Raised when a deposit debit would take a customer below zero."""

    def __init__(self, balance, requested):
        super().__init__(balance, requested, label="deposit")
