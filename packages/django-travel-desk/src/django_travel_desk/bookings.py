"""Ticket, invoice and cash receipt creation requests.

One request type per document, branched on ``source`` rather than one form
per variant. Requests carry raw form values; clean() reports what the form
layer must show the user, and the builders flatten a request plus its
pricing into the backend's camelCase submission payload.
"""

from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from django.core.exceptions import ValidationError

from django_travel_desk.amounts import ZERO, to_count, to_decimal, to_flag
from django_travel_desk.calculator import (
    VENDOR_BALANCE_NONE,
    VENDOR_BALANCE_SOURCES,
    InvoiceLine,
    InvoicePricing,
    LineItem,
    TicketPricing,
    clamp_percent,
)


class TicketSource(str, Enum):
    """Where the ticket was bought."""

    DIRECT = 'direct'  # From the airline
    VENDOR = 'vendor'  # Through a vendor/consolidator
    AGENT = 'agent'    # Sold on to a bulk agent, bought through a vendor

    @property
    def price_field(self) -> str:
        """Legacy payload field that carries the per-person price."""
        if self is TicketSource.DIRECT:
            return 'airlinePrice'
        return 'vendorPrice'

    @property
    def requires_vendor(self) -> bool:
        return self is not TicketSource.DIRECT


TRIP_TYPES = ('one_way', 'round_trip')
SEAT_CLASSES = ('economy', 'business', 'first')
CUSTOMER_TYPES = ('customer', 'agent')
PAYMENT_METHODS = ('cash', 'card', 'credit')

PARTY_TYPES = ('customer', 'agent', 'vendor')
RECEIPT_SOURCE_TYPES = ('flight', 'other')
RECEIPT_PAYMENT_METHODS = ('cash', 'card', 'cheque', 'bank_transfer')
MIN_RECEIPT_AMOUNT = Decimal('0.01')

PNR_MAX_LENGTH = 10


def resize_line_items(
    items: List[LineItem],
    quantity: Any,
    template: Optional[LineItem] = None,
) -> List[LineItem]:
    """
    Grow or shrink the passenger rows to match ``quantity``.

    New rows copy the template's price, date and sector with blank passenger
    name and ticket number. Shrinking drops rows from the end.
    """
    count = to_count(quantity, default=len(items))
    if count <= len(items):
        return list(items[:count])
    seed = template or (items[-1] if items else LineItem())
    blank = replace(seed, passenger_name='', ticket_number=None)
    return list(items) + [blank] * (count - len(items))


@dataclass
class TicketCreationRequest:
    """
    Everything the ticket form submits, for any ticket source.

    Usage:
        request = TicketCreationRequest(
            customer_id=customer.pk,
            source=TicketSource.VENDOR,
            vendor_id=vendor.pk,
            route="DXB-LHR",
            airlines="Emirates",
            travel_date="2026-11-01",
            line_items=[LineItem("500", passenger_name="A. Khan"),
                        LineItem("500", passenger_name="B. Khan")],
            addition="100",
            deduct_from_deposit=True,
        )
        request.clean()
    """

    customer_id: Any = None
    source: TicketSource = TicketSource.DIRECT
    vendor_id: Any = None
    trip_type: str = 'one_way'
    seat_class: str = 'economy'
    route: str = ''
    airlines: str = ''
    flight_number: str = ''
    pnr: str = ''
    travel_date: str = ''
    return_date: str = ''
    line_items: List[LineItem] = field(default_factory=list)
    passenger_count: Any = None
    addition: Any = None
    deduct_from_deposit: bool = False
    vendor_cost: Any = None
    vendor_balance_source: str = VENDOR_BALANCE_NONE

    def __post_init__(self):
        self.source = TicketSource(self.source)
        self.deduct_from_deposit = to_flag(self.deduct_from_deposit)

    @property
    def effective_passenger_count(self) -> int:
        """Explicit passenger count, else one per line item, else 1."""
        if self.passenger_count not in (None, ''):
            return to_count(self.passenger_count)
        return len(self.line_items) or 1

    @property
    def passenger_names(self) -> List[str]:
        return [item.passenger_name for item in self.line_items if item.passenger_name]

    @property
    def ticket_numbers(self) -> List[str]:
        return [item.ticket_number for item in self.line_items if item.ticket_number]

    @property
    def lead_passenger(self) -> str:
        names = self.passenger_names
        return names[0] if names else ''

    def clean(self) -> None:
        """
        Validate the request for submission.

        Raises:
            ValidationError: dict of field name -> messages
        """
        errors: Dict[str, List[str]] = {}

        def add(name, message):
            errors.setdefault(name, []).append(message)

        if not self.customer_id:
            add('customer_id', "Customer is required")
        if self.source.requires_vendor and not self.vendor_id:
            add('vendor_id', "Vendor is required")
        if not self.route.strip():
            add('route', "Route is required")
        if not self.airlines.strip():
            add('airlines', "Airlines is required")
        if not self.travel_date:
            add('travel_date', "Travel date is required")
        if self.trip_type not in TRIP_TYPES:
            add('trip_type', f"Trip type must be one of {', '.join(TRIP_TYPES)}")
        elif self.trip_type == 'round_trip' and not self.return_date:
            add('return_date', "Return date is required")
        if self.seat_class not in SEAT_CLASSES:
            add('seat_class', f"Seat class must be one of {', '.join(SEAT_CLASSES)}")
        if len(self.pnr) > PNR_MAX_LENGTH:
            add('pnr', f"PNR must be at most {PNR_MAX_LENGTH} characters")
        if not self.line_items:
            add('line_items', "At least one passenger is required")
        elif not self.lead_passenger:
            add('passenger_name', "Passenger name is required")
        if to_decimal(self.addition) < 0:
            add('addition', "Amount must be positive")
        if to_decimal(self.vendor_cost) < 0:
            add('vendor_cost', "Amount must be positive")
        if self.vendor_balance_source not in VENDOR_BALANCE_SOURCES:
            add('vendor_balance_source', "Unknown vendor balance source")
        elif self.vendor_balance_source != VENDOR_BALANCE_NONE and not self.vendor_id:
            add('vendor_balance_source', "Vendor balance needs a vendor")

        if errors:
            raise ValidationError(errors)


def _wire(amount: Decimal) -> str:
    return str(amount)


def build_ticket_payload(
    request: TicketCreationRequest,
    pricing: TicketPricing,
    issued_by: Any = None,
) -> Dict[str, Any]:
    """
    Flatten a ticket request and its pricing into the submission payload.

    The per-person price goes to airlinePrice for direct tickets and to
    vendorPrice otherwise; the other field is zero. Amounts are strings.
    """
    prices = {'vendorPrice': _wire(ZERO), 'airlinePrice': _wire(ZERO)}
    prices[request.source.price_field] = _wire(pricing.per_person_price)

    return {
        'customerId': str(request.customer_id) if request.customer_id else '',
        'vendorId': str(request.vendor_id) if request.vendor_id else '',
        'source': request.source.value,
        'tripType': request.trip_type,
        'seatClass': request.seat_class,
        'route': request.route,
        'airlines': request.airlines,
        'flightNumber': request.flight_number,
        'pnr': request.pnr,
        'travelDate': request.travel_date,
        'returnDate': request.return_date,
        'passengerName': request.lead_passenger,
        'passengerNames': request.passenger_names,
        'ticketNumbers': request.ticket_numbers,
        'passengerCount': pricing.passenger_count,
        'faceValue': _wire(pricing.face_value),
        'additionalCost': _wire(pricing.addition),
        'vendorCost': _wire(pricing.vendor_cost),
        'deductFromDeposit': request.deduct_from_deposit,
        'depositDeducted': _wire(pricing.deposit_deducted),
        'useVendorBalance': request.vendor_balance_source,
        'vendorBalanceDeducted': _wire(pricing.vendor_balance_deducted),
        'issuedBy': str(issued_by) if issued_by else '',
        **prices,
    }


@dataclass
class InvoiceCreationRequest:
    """Everything the invoice form submits."""

    customer_id: Any = None
    customer_type: str = 'customer'
    vendor_id: Any = None
    lines: List[InvoiceLine] = field(default_factory=list)
    discount_percent: Any = None
    payment_method: str = 'cash'
    use_customer_deposit: bool = False
    use_agent_credit: bool = False
    vendor_cost: Any = None
    vendor_balance_source: str = VENDOR_BALANCE_NONE
    notes: str = ''

    def __post_init__(self):
        self.use_customer_deposit = to_flag(self.use_customer_deposit)
        self.use_agent_credit = to_flag(self.use_agent_credit)

    def clean(self) -> None:
        """
        Validate the request for submission.

        Raises:
            ValidationError: dict of field name -> messages
        """
        errors: Dict[str, List[str]] = {}

        if not self.customer_id:
            errors['customer_id'] = ["Customer/Agent is required"]
        if self.customer_type not in CUSTOMER_TYPES:
            errors['customer_type'] = ["Customer type must be customer or agent"]
        if not self.vendor_id:
            errors['vendor_id'] = ["Vendor is required"]
        if not self.lines:
            errors['lines'] = ["At least one item is required"]
        for index, line in enumerate(self.lines):
            if not line.description:
                errors.setdefault('lines', []).append(f"Item {index + 1}: Description is required")
            if line.quantity < 1:
                errors.setdefault('lines', []).append(f"Item {index + 1}: Quantity must be at least 1")
        percent = to_decimal(self.discount_percent)
        if percent < 0 or percent > 100:
            errors['discount_percent'] = ["Discount must be between 0 and 100"]
        if self.payment_method not in PAYMENT_METHODS:
            errors['payment_method'] = [f"Payment method must be one of {', '.join(PAYMENT_METHODS)}"]
        if self.use_agent_credit and self.customer_type != 'agent':
            errors['use_agent_credit'] = ["Agent credit is only available for agents"]
        if self.vendor_balance_source not in VENDOR_BALANCE_SOURCES:
            errors['vendor_balance_source'] = ["Unknown vendor balance source"]

        if errors:
            raise ValidationError(errors)

    @property
    def discount(self) -> Decimal:
        return clamp_percent(self.discount_percent)


def build_invoice_payload(
    request: InvoiceCreationRequest,
    pricing: InvoicePricing,
    issued_by: Any = None,
) -> Dict[str, Any]:
    """Flatten an invoice request and its pricing into the submission payload."""
    return {
        'customerType': request.customer_type,
        'customerId': str(request.customer_id) if request.customer_id else '',
        'vendorId': str(request.vendor_id) if request.vendor_id else '',
        'items': [
            {
                'description': line.description,
                'quantity': line.quantity,
                'unitPrice': _wire(line.unit_price),
            }
            for line in request.lines
        ],
        'subtotal': _wire(pricing.subtotal),
        'discountPercent': _wire(pricing.discount_percent),
        'discountAmount': _wire(pricing.discount_amount),
        'total': _wire(pricing.total),
        'vendorCost': _wire(pricing.vendor_cost),
        'paymentMethod': request.payment_method,
        'useCustomerDeposit': request.use_customer_deposit,
        'depositUsed': _wire(pricing.deposit_used),
        'useAgentCredit': request.use_agent_credit,
        'agentCreditUsed': _wire(pricing.agent_credit_used),
        'useVendorBalance': request.vendor_balance_source,
        'vendorBalanceDeducted': _wire(pricing.vendor_balance_deducted),
        'notes': request.notes,
        'issuedBy': str(issued_by) if issued_by else '',
    }


@dataclass
class ReceiptCreationRequest:
    """
    Cash received from a customer, agent or vendor.

    Usage:
        request = ReceiptCreationRequest(
            party_type='customer',
            party_id=customer.pk,
            source_type='flight',
            pnr="XK4P2Q",
            amount="1100",
        )
        request.clean()
    """

    party_type: str = 'customer'
    party_id: Any = None
    source_type: str = 'flight'
    pnr: str = ''
    service_name: str = ''
    amount: Any = None
    payment_method: str = 'cash'
    description: str = ''
    reference_number: str = ''

    @property
    def amount_value(self) -> Decimal:
        return to_decimal(self.amount)

    def clean(self) -> None:
        """
        Validate the request for submission.

        Raises:
            ValidationError: dict of field name -> messages
        """
        errors: Dict[str, List[str]] = {}

        if self.party_type not in PARTY_TYPES:
            errors['party_type'] = [f"Party type must be one of {', '.join(PARTY_TYPES)}"]
        if not self.party_id:
            errors['party_id'] = ["Party is required"]
        if self.source_type not in RECEIPT_SOURCE_TYPES:
            errors['source_type'] = ["Source type must be flight or other"]
        if len(self.pnr) > PNR_MAX_LENGTH:
            errors['pnr'] = [f"PNR must be at most {PNR_MAX_LENGTH} characters"]
        if self.amount_value < MIN_RECEIPT_AMOUNT:
            errors['amount'] = ["Amount must be positive"]
        if self.payment_method not in RECEIPT_PAYMENT_METHODS:
            errors['payment_method'] = [
                f"Payment method must be one of {', '.join(RECEIPT_PAYMENT_METHODS)}"
            ]

        if errors:
            raise ValidationError(errors)


def build_receipt_payload(request: ReceiptCreationRequest, issued_by: Any = None) -> Dict[str, Any]:
    """Flatten a receipt request into the submission payload.

    PNR only travels with flight receipts and the service name only with
    other receipts.
    """
    is_flight = request.source_type == 'flight'
    return {
        'partyType': request.party_type,
        'partyId': str(request.party_id) if request.party_id else '',
        'sourceType': request.source_type,
        'pnr': request.pnr if is_flight else '',
        'serviceName': '' if is_flight else request.service_name,
        'amount': _wire(request.amount_value),
        'paymentMethod': request.payment_method,
        'description': request.description,
        'referenceNumber': request.reference_number,
        'issuedBy': str(issued_by) if issued_by else '',
    }
