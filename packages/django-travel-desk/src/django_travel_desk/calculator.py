"""Ticket and invoice pricing calculator.

Pure functions that turn raw form values into the totals submitted to the
backend. The ticket pipeline runs in a fixed order, each stage consuming the
previous stage's output:

    aggregate_line_items -> combine_addition -> per_person_price
                                             -> resolve_deposit_deduction

Nothing here touches the database or raises on bad numeric input; every
value passes through amounts.to_amount()/to_count() first.

Usage:
    pricing = price_ticket(
        unit_prices=["500", "500"],
        addition="100",
        passenger_count=2,
        deposit_enabled=True,
        available_deposit=customer.deposit_balance,
    )
    pricing.face_value                  # Decimal("1100")
    pricing.per_person_price            # Decimal("550")
    pricing.deposit.amount_due          # what is still owed in cash
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable, Iterable, List, Optional

from django_travel_desk.amounts import ZERO, to_amount, to_count, to_flag

logger = logging.getLogger(__name__)


VENDOR_BALANCE_NONE = 'none'
VENDOR_BALANCE_CREDIT = 'credit'
VENDOR_BALANCE_DEPOSIT = 'deposit'
VENDOR_BALANCE_SOURCES = (
    VENDOR_BALANCE_NONE,
    VENDOR_BALANCE_CREDIT,
    VENDOR_BALANCE_DEPOSIT,
)


@dataclass(frozen=True)
class LineItem:
    """One passenger row of a ticket booking."""

    unit_price: Any = ZERO
    travel_date: str = ''
    sector: str = ''
    passenger_name: str = ''
    ticket_number: Optional[str] = None

    def __post_init__(self):
        # Frozen dataclass, so normalize through object.__setattr__
        object.__setattr__(self, 'unit_price', to_amount(self.unit_price))


@dataclass(frozen=True)
class DeductionResult:
    """How a total splits between customer deposit and cash due."""

    deposit_deducted: Decimal
    amount_due: Decimal


@dataclass(frozen=True)
class TicketPricing:
    """Every intermediate value of the ticket pipeline."""

    items_total: Decimal
    addition: Decimal
    face_value: Decimal
    passenger_count: int
    per_person_price: Decimal
    deposit: DeductionResult
    vendor_cost: Decimal = ZERO
    vendor_balance_deducted: Decimal = ZERO

    @property
    def deposit_deducted(self) -> Decimal:
        return self.deposit.deposit_deducted

    @property
    def amount_due(self) -> Decimal:
        return self.deposit.amount_due

    @property
    def margin(self) -> Decimal:
        """Face value less what the vendor is paid."""
        return self.face_value - self.vendor_cost


def _price_of(item: Any) -> Decimal:
    if isinstance(item, LineItem):
        return item.unit_price
    if isinstance(item, dict):
        return to_amount(item.get('unit_price', item.get('unitPrice')))
    if hasattr(item, 'unit_price'):
        return to_amount(item.unit_price)
    return to_amount(item)


def aggregate_line_items(items: Iterable[Any]) -> Decimal:
    """
    Sum per-item prices.

    Accepts LineItem objects, dicts with a unit_price/unitPrice key, or raw
    prices. Invalid, empty and negative prices count as zero. The result is
    a plain sum, so reordering items never changes it.
    """
    return sum((_price_of(item) for item in items), ZERO)


def combine_addition(items_total: Any, addition: Any = None) -> Decimal:
    """
    Add the flat per-booking addition (MC addition / service charge).

    The addition is applied once per booking. It is never multiplied or
    divided by passenger count.
    """
    return to_amount(items_total) + to_amount(addition)


def resolve_deposit_deduction(
    total: Any,
    deposit_enabled: Any,
    available_deposit: Any = None,
) -> DeductionResult:
    """
    Decide how much of ``total`` is drawn from the customer's deposit.

    Returns:
        DeductionResult where deposit_deducted is min(available_deposit, total)
        when enabled and exactly zero otherwise, and amount_due is the rest.
        A missing or invalid balance is treated as zero. deposit_enabled may
        be a form value such as "false" or "on"; see amounts.to_flag().
    """
    total = to_amount(total)
    if to_flag(deposit_enabled):
        deducted = min(to_amount(available_deposit), total)
    else:
        deducted = ZERO
    return DeductionResult(deposit_deducted=deducted, amount_due=total - deducted)


def per_person_price(total: Any, passenger_count: Any) -> Decimal:
    """
    Average price per passenger, for the legacy vendor/airline price fields.

    A passenger count of zero falls back to the total itself.
    """
    total = to_amount(total)
    count = to_count(passenger_count)
    if count > 0:
        return total / count
    return total


def resolve_vendor_balance_deduction(
    vendor_cost: Any,
    source: str = VENDOR_BALANCE_NONE,
    credit_balance: Any = None,
    deposit_balance: Any = None,
) -> Decimal:
    """
    Amount of the vendor cost settled from a balance held with the vendor.

    ``source`` picks the balance: 'credit' (credit the vendor extends to us)
    or 'deposit' (money we placed with the vendor). Anything else, including
    'none', deducts nothing. This reduces what the agency owes the vendor and
    never changes the customer-facing total.
    """
    cost = to_amount(vendor_cost)
    if source == VENDOR_BALANCE_CREDIT:
        return min(to_amount(credit_balance), cost)
    if source == VENDOR_BALANCE_DEPOSIT:
        return min(to_amount(deposit_balance), cost)
    return ZERO


def price_ticket(
    unit_prices: Iterable[Any] = (),
    addition: Any = None,
    passenger_count: Any = None,
    deposit_enabled: bool = False,
    available_deposit: Any = None,
    *,
    vendor_cost: Any = None,
    vendor_balance_source: str = VENDOR_BALANCE_NONE,
    vendor_credit_balance: Any = None,
    vendor_deposit_balance: Any = None,
) -> TicketPricing:
    """
    Run the full ticket pricing pipeline.

    Args:
        unit_prices: Per-passenger prices (LineItems, dicts or raw values)
        addition: Flat MC addition for the whole booking
        passenger_count: Number of passengers; missing/invalid means 1
        deposit_enabled: Whether the customer deposit toggle is on
        available_deposit: Customer deposit balance (read-only here)
        vendor_cost: What the agency pays the vendor
        vendor_balance_source: 'none', 'credit' or 'deposit'
        vendor_credit_balance: Credit the vendor extends to the agency
        vendor_deposit_balance: Deposit the agency holds with the vendor

    Returns:
        TicketPricing with every intermediate value.
    """
    items_total = aggregate_line_items(unit_prices)
    flat_addition = to_amount(addition)
    face_value = combine_addition(items_total, flat_addition)
    count = to_count(passenger_count)
    deposit = resolve_deposit_deduction(face_value, deposit_enabled, available_deposit)
    cost = to_amount(vendor_cost)

    return TicketPricing(
        items_total=items_total,
        addition=flat_addition,
        face_value=face_value,
        passenger_count=count,
        per_person_price=per_person_price(face_value, count),
        deposit=deposit,
        vendor_cost=cost,
        vendor_balance_deducted=resolve_vendor_balance_deduction(
            cost,
            vendor_balance_source,
            vendor_credit_balance,
            vendor_deposit_balance,
        ),
    )


# =============================================================================
# INVOICES
# =============================================================================


@dataclass(frozen=True)
class InvoiceLine:
    """A described, quantity-priced invoice row."""

    description: str = ''
    quantity: Any = 1
    unit_price: Any = ZERO

    def __post_init__(self):
        object.__setattr__(self, 'quantity', to_count(self.quantity, default=0))
        object.__setattr__(self, 'unit_price', to_amount(self.unit_price))

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class InvoicePricing:
    """Invoice totals, in the order they are applied."""

    subtotal: Decimal
    discount_percent: Decimal
    discount_amount: Decimal
    after_discount: Decimal
    deposit_used: Decimal
    agent_credit_used: Decimal
    total: Decimal
    vendor_cost: Decimal = ZERO
    vendor_balance_deducted: Decimal = ZERO


def clamp_percent(value: Any) -> Decimal:
    """Coerce a discount percentage into [0, 100]."""
    return min(to_amount(value), Decimal("100"))


def price_invoice(
    lines: Iterable[Any],
    discount_percent: Any = None,
    use_deposit: bool = False,
    available_deposit: Any = None,
    use_agent_credit: bool = False,
    available_agent_credit: Any = None,
    *,
    vendor_cost: Any = None,
    vendor_balance_source: str = VENDOR_BALANCE_NONE,
    vendor_credit_balance: Any = None,
    vendor_deposit_balance: Any = None,
) -> InvoicePricing:
    """
    Price an invoice: subtotal, percentage discount, then deposit, then agent credit.

    The customer deposit is drawn first against the discounted amount, agent
    credit against whatever remains. Vendor balance deduction is reported
    alongside but does not reduce the invoice total.
    """
    invoice_lines = [
        line if isinstance(line, InvoiceLine) else _invoice_line(line)
        for line in lines
    ]
    subtotal = sum((line.line_total for line in invoice_lines), ZERO)
    percent = clamp_percent(discount_percent)
    discount_amount = subtotal * percent / Decimal("100")
    after_discount = subtotal - discount_amount

    deposit = resolve_deposit_deduction(after_discount, use_deposit, available_deposit)
    agent_credit = resolve_deposit_deduction(
        deposit.amount_due, use_agent_credit, available_agent_credit
    )
    cost = to_amount(vendor_cost)

    return InvoicePricing(
        subtotal=subtotal,
        discount_percent=percent,
        discount_amount=discount_amount,
        after_discount=after_discount,
        deposit_used=deposit.deposit_deducted,
        agent_credit_used=agent_credit.deposit_deducted,
        total=agent_credit.amount_due,
        vendor_cost=cost,
        vendor_balance_deducted=resolve_vendor_balance_deduction(
            cost,
            vendor_balance_source,
            vendor_credit_balance,
            vendor_deposit_balance,
        ),
    )


def _invoice_line(line: Any) -> InvoiceLine:
    if isinstance(line, dict):
        return InvoiceLine(
            description=line.get('description', ''),
            quantity=line.get('quantity', 1),
            unit_price=line.get('unit_price', line.get('unitPrice')),
        )
    return InvoiceLine(
        description=getattr(line, 'description', ''),
        quantity=getattr(line, 'quantity', 1),
        unit_price=getattr(line, 'unit_price', None),
    )


# =============================================================================
# PRICING SESSION
# =============================================================================


@dataclass
class TicketPricingSession:
    """
    Holds the pricing fields of one ticket form and recomputes on every change.

    Subscribers are called synchronously with the new TicketPricing after each
    update(); there is no other state.

    Usage:
        session = TicketPricingSession(available_deposit=customer.deposit_balance)
        unsubscribe = session.subscribe(lambda pricing: render(pricing))
        session.update(unit_prices=["500", "500"], passenger_count=2)
        session.update(addition="100")
        session.pricing.face_value  # Decimal("1100")
    """

    unit_prices: List[Any] = field(default_factory=list)
    addition: Any = None
    passenger_count: Any = None
    deposit_enabled: bool = False
    available_deposit: Any = None
    vendor_cost: Any = None
    vendor_balance_source: str = VENDOR_BALANCE_NONE
    vendor_credit_balance: Any = None
    vendor_deposit_balance: Any = None
    _subscribers: List[Callable[[TicketPricing], None]] = field(
        default_factory=list, init=False, repr=False
    )

    FIELDS = (
        'unit_prices',
        'addition',
        'passenger_count',
        'deposit_enabled',
        'available_deposit',
        'vendor_cost',
        'vendor_balance_source',
        'vendor_credit_balance',
        'vendor_deposit_balance',
    )

    @property
    def pricing(self) -> TicketPricing:
        return price_ticket(
            self.unit_prices,
            self.addition,
            self.passenger_count,
            self.deposit_enabled,
            self.available_deposit,
            vendor_cost=self.vendor_cost,
            vendor_balance_source=self.vendor_balance_source,
            vendor_credit_balance=self.vendor_credit_balance,
            vendor_deposit_balance=self.vendor_deposit_balance,
        )

    def subscribe(self, callback: Callable[[TicketPricing], None]) -> Callable[[], None]:
        """Register a callback; returns a function that removes it again."""
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def update(self, **fields) -> TicketPricing:
        """
        Set one or more fields, recompute, and notify subscribers.

        Every subscriber is called even if an earlier one raises; the first
        error is re-raised once all of them have seen the new pricing.
        """
        unknown = set(fields) - set(self.FIELDS)
        if unknown:
            raise TypeError(f"Unknown pricing fields: {sorted(unknown)}")
        for name, value in fields.items():
            if name == 'unit_prices':
                value = list(value or [])
            setattr(self, name, value)
        pricing = self.pricing

        first_error = None
        for callback in list(self._subscribers):
            try:
                callback(pricing)
            except Exception as exc:
                logger.exception("Pricing subscriber %r failed", callback)
                if first_error is None:
                    first_error = exc
        if first_error is not None:
            raise first_error
        return pricing
