"""Django Travel Desk - ticket and invoice pricing with customer deposit deduction."""

__version__ = "0.1.0"

from django_travel_desk.calculator import (
    DeductionResult,
    InvoiceLine,
    InvoicePricing,
    LineItem,
    TicketPricing,
    TicketPricingSession,
    aggregate_line_items,
    combine_addition,
    per_person_price,
    price_invoice,
    price_ticket,
    resolve_deposit_deduction,
    resolve_vendor_balance_deduction,
)
from django_travel_desk.exceptions import (
    InsufficientBalanceError,
    InsufficientDepositError,
    InvalidAmountError,
    TravelDeskError,
)

__all__ = [
    "DeductionResult",
    "InvoiceLine",
    "InvoicePricing",
    "LineItem",
    "TicketPricing",
    "TicketPricingSession",
    "aggregate_line_items",
    "combine_addition",
    "per_person_price",
    "price_invoice",
    "price_ticket",
    "resolve_deposit_deduction",
    "resolve_vendor_balance_deduction",
    "InsufficientBalanceError",
    "InsufficientDepositError",
    "InvalidAmountError",
    "TravelDeskError",
]
