"""Travel desk services: numbering, deposits, tickets, invoices and receipts.

Every write runs inside transaction.atomic and locks the balance rows it
changes with select_for_update(). Prices are always recomputed here from the
locked balances; amounts computed by a client are never trusted.
"""

import logging
from decimal import Decimal
from typing import Any, Optional, Union

from django.db import transaction

from django_travel_desk import conf
from django_travel_desk.amounts import to_amount
from django_travel_desk.bookings import (
    InvoiceCreationRequest,
    ReceiptCreationRequest,
    TicketCreationRequest,
    TicketSource,
)
from django_travel_desk.calculator import (
    VENDOR_BALANCE_CREDIT,
    VENDOR_BALANCE_DEPOSIT,
    InvoicePricing,
    TicketPricing,
    price_invoice,
    price_ticket,
)
from django_travel_desk.exceptions import (
    InsufficientBalanceError,
    InsufficientDepositError,
    InvalidAmountError,
)
from django_travel_desk.models import (
    CashReceipt,
    Customer,
    DepositTransaction,
    DocumentCounter,
    Invoice,
    Ticket,
    Vendor,
)

logger = logging.getLogger(__name__)


def next_document_number(
    scope: str,
    prefix: Optional[str] = None,
    pad_width: Optional[int] = None,
) -> str:
    """
    Get the next document number for a scope atomically.

    Uses select_for_update() so concurrent requests never share a number.
    The counter is created on first use with the configured prefix and
    padding.

    Usage:
        next_document_number('ticket')   # "TKT-000001"
        next_document_number('invoice')  # "INV-000001"
    """
    with transaction.atomic():
        counter, _ = DocumentCounter.objects.select_for_update().get_or_create(
            scope=scope,
            defaults={
                'prefix': prefix if prefix is not None else conf.get_number_prefix(scope),
                'pad_width': pad_width if pad_width is not None else conf.get_pad_width(),
            },
        )
        counter.current_value += 1
        counter.save(update_fields=['current_value'])
    return counter.formatted_value


def get_deposit_balance(customer: Union[Customer, Any]) -> Decimal:
    """
    Current deposit balance for a customer (instance or primary key).

    Always re-reads the row, so a stale instance still returns the stored
    balance.

    Raises:
        Customer.DoesNotExist: If the customer is unknown
    """
    pk = customer.pk if isinstance(customer, Customer) else customer
    return Customer.objects.values_list('deposit_balance', flat=True).get(pk=pk)


@transaction.atomic
def record_deposit_transaction(
    customer: Customer,
    transaction_type: str,
    amount: Any,
    description: str,
    reference: Optional[Any] = None,
) -> DepositTransaction:
    """
    Credit or debit a customer's deposit balance.

    Args:
        customer: The customer whose deposit moves
        transaction_type: 'credit' (top up) or 'debit' (draw down)
        amount: Positive amount
        description: Shown on the customer's deposit history
        reference: Optional Ticket or Invoice that drew the deposit

    Returns:
        The DepositTransaction, with balance_after set

    Raises:
        InvalidAmountError: If amount is not positive or the type is unknown
        InsufficientDepositError: If a debit exceeds the balance
    """
    amount = to_amount(amount)
    if amount <= 0:
        raise InvalidAmountError(f"Deposit amount must be positive, got {amount}")
    if transaction_type not in DepositTransaction.TransactionType.values:
        raise InvalidAmountError(f"Unknown deposit transaction type: {transaction_type}")

    locked = Customer.objects.select_for_update().get(pk=customer.pk)

    if transaction_type == DepositTransaction.TransactionType.CREDIT:
        balance_after = locked.deposit_balance + amount
    else:
        if amount > locked.deposit_balance:
            logger.warning(
                "Refused deposit debit of %s for customer %s (balance %s)",
                amount, locked.pk, locked.deposit_balance,
            )
            raise InsufficientDepositError(locked.deposit_balance, amount)
        balance_after = locked.deposit_balance - amount

    locked.deposit_balance = balance_after
    locked.save(update_fields=['deposit_balance', 'updated_at'])
    customer.deposit_balance = balance_after

    reference_type = ''
    reference_id = ''
    if reference is not None:
        reference_type = reference._meta.model_name
        reference_id = str(reference.pk)

    tx = DepositTransaction.objects.create(
        customer=locked,
        transaction_type=transaction_type,
        amount=amount,
        description=description,
        reference_id=reference_id,
        reference_type=reference_type,
        balance_after=balance_after,
    )
    logger.info(
        "Deposit %s of %s for customer %s, balance now %s",
        transaction_type, amount, locked.pk, balance_after,
    )
    return tx


def _lock_vendor(vendor_id) -> Optional[Vendor]:
    if not vendor_id:
        return None
    return Vendor.objects.select_for_update().get(pk=vendor_id)


def _draw_vendor_balance(vendor: Optional[Vendor], source: str, amount: Decimal) -> None:
    """Reduce the vendor balance selected by ``source`` by ``amount``."""
    if vendor is None or amount <= 0:
        return
    if source == VENDOR_BALANCE_CREDIT:
        field = 'credit_balance'
    elif source == VENDOR_BALANCE_DEPOSIT:
        field = 'deposit_balance'
    else:
        return
    balance = getattr(vendor, field)
    if amount > balance:
        raise InsufficientBalanceError(balance, amount, label=f"vendor {field}")
    setattr(vendor, field, balance - amount)
    vendor.save(update_fields=[field, 'updated_at'])


def _price_ticket_request(
    request: TicketCreationRequest,
    customer: Customer,
    vendor: Optional[Vendor],
) -> TicketPricing:
    return price_ticket(
        request.line_items,
        request.addition,
        request.effective_passenger_count,
        request.deduct_from_deposit,
        customer.deposit_balance,
        vendor_cost=request.vendor_cost,
        vendor_balance_source=request.vendor_balance_source,
        vendor_credit_balance=vendor.credit_balance if vendor else None,
        vendor_deposit_balance=vendor.deposit_balance if vendor else None,
    )


@transaction.atomic
def issue_ticket(request: TicketCreationRequest, issued_by: Any) -> Ticket:
    """
    Price, number and store a ticket, drawing on deposits as requested.

    Steps:
    1. Validate the request (ValidationError for the form layer)
    2. Lock the customer and vendor rows
    3. Price the ticket against the locked balances
    4. Store the ticket as issued
    5. Debit the customer deposit and the selected vendor balance

    Args:
        request: The ticket creation request
        issued_by: ID of the bill creator issuing the ticket

    Returns:
        The issued Ticket

    Raises:
        ValidationError: If the request is incomplete
        Customer.DoesNotExist / Vendor.DoesNotExist: Unknown parties
    """
    request.clean()

    customer = Customer.objects.select_for_update().get(pk=request.customer_id)
    vendor = _lock_vendor(request.vendor_id)
    pricing = _price_ticket_request(request, customer, vendor)

    per_person = pricing.per_person_price
    is_direct = request.source is TicketSource.DIRECT

    ticket = Ticket.objects.create(
        ticket_number=next_document_number('ticket'),
        ticket_numbers=request.ticket_numbers,
        pnr=request.pnr,
        customer=customer,
        vendor=vendor,
        source=request.source.value,
        trip_type=request.trip_type,
        seat_class=request.seat_class,
        route=request.route,
        airlines=request.airlines,
        flight_number=request.flight_number,
        travel_date=request.travel_date,
        return_date=request.return_date,
        passenger_name=request.lead_passenger,
        passenger_names=request.passenger_names,
        passenger_count=max(pricing.passenger_count, 1),
        vendor_price=Decimal('0') if is_direct else per_person,
        airline_price=per_person if is_direct else Decimal('0'),
        vendor_cost=pricing.vendor_cost,
        additional_cost=pricing.addition,
        face_value=pricing.face_value,
        deduct_from_deposit=request.deduct_from_deposit,
        deposit_deducted=pricing.deposit_deducted,
        vendor_balance_source=request.vendor_balance_source,
        vendor_balance_deducted=pricing.vendor_balance_deducted,
        issued_by=str(issued_by),
        status=Ticket.Status.ISSUED,
    )

    if pricing.deposit_deducted > 0:
        record_deposit_transaction(
            customer,
            DepositTransaction.TransactionType.DEBIT,
            pricing.deposit_deducted,
            f"Ticket {ticket.ticket_number} - {ticket.route}",
            reference=ticket,
        )
    _draw_vendor_balance(vendor, request.vendor_balance_source, pricing.vendor_balance_deducted)

    logger.info(
        "Issued ticket %s for customer %s: face value %s, deposit %s, due %s",
        ticket.ticket_number, customer.pk, pricing.face_value,
        pricing.deposit_deducted, pricing.amount_due,
    )
    return ticket


@transaction.atomic
def create_invoice(request: InvoiceCreationRequest, issued_by: Any) -> Invoice:
    """
    Price, number and store an invoice, drawing deposit then agent credit.

    Args:
        request: The invoice creation request
        issued_by: ID of the bill creator

    Returns:
        The issued Invoice

    Raises:
        ValidationError: If the request is incomplete
        Customer.DoesNotExist / Vendor.DoesNotExist: Unknown parties
    """
    request.clean()

    customer = Customer.objects.select_for_update().get(pk=request.customer_id)
    vendor = _lock_vendor(request.vendor_id)
    use_agent_credit = request.use_agent_credit and customer.is_agent

    pricing: InvoicePricing = price_invoice(
        request.lines,
        request.discount_percent,
        request.use_customer_deposit,
        customer.deposit_balance,
        use_agent_credit,
        customer.credit_balance,
        vendor_cost=request.vendor_cost,
        vendor_balance_source=request.vendor_balance_source,
        vendor_credit_balance=vendor.credit_balance if vendor else None,
        vendor_deposit_balance=vendor.deposit_balance if vendor else None,
    )

    invoice = Invoice.objects.create(
        invoice_number=next_document_number('invoice'),
        customer=customer,
        vendor=vendor,
        items=[
            {
                'description': line.description,
                'quantity': line.quantity,
                'unit_price': str(line.unit_price),
            }
            for line in request.lines
        ],
        subtotal=pricing.subtotal,
        discount_percent=pricing.discount_percent,
        discount_amount=pricing.discount_amount,
        total=pricing.total,
        vendor_cost=pricing.vendor_cost,
        payment_method=request.payment_method,
        use_customer_deposit=request.use_customer_deposit,
        deposit_used=pricing.deposit_used,
        use_agent_credit=use_agent_credit,
        agent_credit_used=pricing.agent_credit_used,
        vendor_balance_source=request.vendor_balance_source,
        vendor_balance_deducted=pricing.vendor_balance_deducted,
        notes=request.notes,
        issued_by=str(issued_by),
        status=Invoice.Status.ISSUED,
    )

    if pricing.deposit_used > 0:
        record_deposit_transaction(
            customer,
            DepositTransaction.TransactionType.DEBIT,
            pricing.deposit_used,
            f"Invoice {invoice.invoice_number} - Deposit applied",
            reference=invoice,
        )
    if pricing.agent_credit_used > 0:
        customer.refresh_from_db(fields=['credit_balance'])
        customer.credit_balance -= pricing.agent_credit_used
        customer.save(update_fields=['credit_balance', 'updated_at'])
    _draw_vendor_balance(vendor, request.vendor_balance_source, pricing.vendor_balance_deducted)

    logger.info(
        "Created invoice %s for customer %s: total %s (subtotal %s, deposit %s, agent credit %s)",
        invoice.invoice_number, customer.pk, pricing.total, pricing.subtotal,
        pricing.deposit_used, pricing.agent_credit_used,
    )
    return invoice


@transaction.atomic
def create_cash_receipt(
    request: ReceiptCreationRequest,
    issued_by: Any,
    created_by_name: str = '',
) -> CashReceipt:
    """
    Number and store a cash receipt for a customer, agent or vendor.

    Customers and agents are both Customer rows; the party type must match
    the stored customer_type.

    Raises:
        ValidationError: If the request is incomplete
        Customer.DoesNotExist / Vendor.DoesNotExist: Unknown party
    """
    request.clean()

    customer = None
    vendor = None
    if request.party_type == CashReceipt.PartyType.VENDOR:
        vendor = Vendor.objects.get(pk=request.party_id)
    else:
        customer = Customer.objects.get(
            pk=request.party_id,
            customer_type=request.party_type,
        )

    is_flight = request.source_type == CashReceipt.SourceType.FLIGHT
    receipt = CashReceipt.objects.create(
        receipt_number=next_document_number('receipt'),
        party_type=request.party_type,
        customer=customer,
        vendor=vendor,
        source_type=request.source_type,
        pnr=request.pnr if is_flight else '',
        service_name='' if is_flight else request.service_name,
        amount=request.amount_value,
        payment_method=request.payment_method,
        description=request.description,
        reference_number=request.reference_number,
        issued_by=str(issued_by),
        created_by_name=created_by_name,
        status=CashReceipt.Status.ISSUED,
    )

    logger.info(
        "Recorded receipt %s: %s from %s %s via %s",
        receipt.receipt_number, receipt.amount, request.party_type,
        request.party_id, request.payment_method,
    )
    return receipt
