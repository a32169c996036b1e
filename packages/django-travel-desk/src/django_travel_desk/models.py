"""Customer, vendor, ticket, invoice, receipt and deposit models.

Balances live on Customer and Vendor and are only ever changed through
django_travel_desk.services, which locks the row and writes a
DepositTransaction for every customer deposit movement.
"""

import uuid
from decimal import Decimal

from django.db import models
from django.db.models import F, Q


def _money_field(**kwargs):
    kwargs.setdefault('max_digits', 19)
    kwargs.setdefault('decimal_places', 4)
    return models.DecimalField(**kwargs)


class Customer(models.Model):
    """
    A customer or bulk-buying agent.

    Usage:
        customer = Customer.objects.create(name="A. Khan", phone="+971500000000")
        customer.deposit_balance  # Decimal("0")
    """

    class CustomerType(models.TextChoices):
        CUSTOMER = 'customer', 'Customer'
        AGENT = 'agent', 'Agent'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    phone = models.CharField(max_length=50)
    company = models.CharField(max_length=255, blank=True, default='')
    address = models.TextField(blank=True, default='')
    email = models.EmailField(blank=True, default='')
    customer_type = models.CharField(
        max_length=20,
        choices=CustomerType.choices,
        default=CustomerType.CUSTOMER,
        db_index=True,
    )
    deposit_balance = _money_field(
        default=Decimal('0'),
        help_text="Pre-paid credit that can offset new charges",
    )
    credit_balance = _money_field(
        default=Decimal('0'),
        help_text="Credit extended to the customer (agents only)",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = 'django_travel_desk'
        ordering = ['name']
        constraints = [
            models.CheckConstraint(
                condition=Q(deposit_balance__gte=0),
                name='customer_deposit_balance_non_negative',
            ),
            models.CheckConstraint(
                condition=Q(credit_balance__gte=0),
                name='customer_credit_balance_non_negative',
            ),
        ]

    def __str__(self):
        return self.name

    @property
    def is_agent(self) -> bool:
        return self.customer_type == self.CustomerType.AGENT


class Vendor(models.Model):
    """A ticket supplier (consolidator) the agency buys through."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    email = models.EmailField(blank=True, default='')
    phone = models.CharField(max_length=50, blank=True, default='')
    credit_balance = _money_field(
        default=Decimal('0'),
        help_text="Credit the vendor extends to the agency",
    )
    deposit_balance = _money_field(
        default=Decimal('0'),
        help_text="Deposit the agency holds with the vendor",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = 'django_travel_desk'
        ordering = ['name']
        constraints = [
            models.CheckConstraint(
                condition=Q(credit_balance__gte=0),
                name='vendor_credit_balance_non_negative',
            ),
            models.CheckConstraint(
                condition=Q(deposit_balance__gte=0),
                name='vendor_deposit_balance_non_negative',
            ),
        ]

    def __str__(self):
        return self.name


class VendorBalanceSource(models.TextChoices):
    NONE = 'none', 'None'
    CREDIT = 'credit', 'Vendor Credit'
    DEPOSIT = 'deposit', 'Deposit with Vendor'


class Ticket(models.Model):
    """
    An issued flight ticket, possibly covering several passengers.

    face_value is the customer-facing total; vendor_price/airline_price hold
    the per-person average for legacy consumers, routed by source.
    """

    class Source(models.TextChoices):
        DIRECT = 'direct', 'Direct'
        VENDOR = 'vendor', 'Vendor'
        AGENT = 'agent', 'Agent'

    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        PROCESSING = 'processing', 'Processing'
        APPROVED = 'approved', 'Approved'
        ISSUED = 'issued', 'Issued'
        USED = 'used', 'Used'
        CANCELLED = 'cancelled', 'Cancelled'
        REFUNDED = 'refunded', 'Refunded'

    class TripType(models.TextChoices):
        ONE_WAY = 'one_way', 'One Way'
        ROUND_TRIP = 'round_trip', 'Round Trip'

    class SeatClass(models.TextChoices):
        ECONOMY = 'economy', 'Economy'
        BUSINESS = 'business', 'Business'
        FIRST = 'first', 'First'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    ticket_number = models.CharField(max_length=50, unique=True)
    ticket_numbers = models.JSONField(
        default=list,
        blank=True,
        help_text="Airline ticket numbers, one per passenger",
    )
    pnr = models.CharField(max_length=10, blank=True, default='')

    customer = models.ForeignKey(
        Customer,
        on_delete=models.PROTECT,
        related_name='tickets',
    )
    vendor = models.ForeignKey(
        Vendor,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='tickets',
        help_text="Empty for tickets bought directly from the airline",
    )
    source = models.CharField(max_length=20, choices=Source.choices, default=Source.DIRECT)

    trip_type = models.CharField(max_length=20, choices=TripType.choices, default=TripType.ONE_WAY)
    seat_class = models.CharField(max_length=20, choices=SeatClass.choices, default=SeatClass.ECONOMY)
    route = models.CharField(max_length=255)
    airlines = models.CharField(max_length=255)
    flight_number = models.CharField(max_length=50, blank=True, default='')
    travel_date = models.CharField(max_length=20)
    return_date = models.CharField(max_length=20, blank=True, default='')

    passenger_name = models.CharField(max_length=255, help_text="Lead passenger")
    passenger_names = models.JSONField(default=list, blank=True)
    passenger_count = models.PositiveIntegerField(default=1)

    vendor_price = _money_field(default=Decimal('0'))
    airline_price = _money_field(default=Decimal('0'))
    vendor_cost = _money_field(default=Decimal('0'))
    additional_cost = _money_field(
        default=Decimal('0'),
        help_text="Flat MC addition for the whole booking",
    )
    face_value = _money_field(help_text="Final price to customer")

    deduct_from_deposit = models.BooleanField(default=False)
    deposit_deducted = _money_field(default=Decimal('0'))
    vendor_balance_source = models.CharField(
        max_length=20,
        choices=VendorBalanceSource.choices,
        default=VendorBalanceSource.NONE,
    )
    vendor_balance_deducted = _money_field(default=Decimal('0'))

    issued_by = models.CharField(max_length=36, help_text="Bill creator ID")
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = 'django_travel_desk'
        ordering = ['-created_at']
        constraints = [
            models.CheckConstraint(
                condition=Q(face_value__gte=0),
                name='ticket_face_value_non_negative',
            ),
            models.CheckConstraint(
                condition=Q(deposit_deducted__gte=0) & Q(deposit_deducted__lte=F('face_value')),
                name='ticket_deposit_within_face_value',
            ),
            models.CheckConstraint(
                condition=Q(passenger_count__gte=1),
                name='ticket_passenger_count_positive',
            ),
        ]

    def __str__(self):
        return f"Ticket {self.ticket_number}: {self.route} ({self.status})"

    @property
    def amount_due(self) -> Decimal:
        return self.face_value - self.deposit_deducted

    @property
    def margin(self) -> Decimal:
        return self.face_value - self.vendor_cost


class Invoice(models.Model):
    """Customer or agent invoice with a JSON snapshot of its line items."""

    class Status(models.TextChoices):
        DRAFT = 'draft', 'Draft'
        ISSUED = 'issued', 'Issued'
        PAID = 'paid', 'Paid'
        PARTIAL = 'partial', 'Partial'
        CANCELLED = 'cancelled', 'Cancelled'

    class PaymentMethod(models.TextChoices):
        CASH = 'cash', 'Cash'
        CARD = 'card', 'Card'
        CREDIT = 'credit', 'Credit'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    invoice_number = models.CharField(max_length=50, unique=True)
    customer = models.ForeignKey(
        Customer,
        on_delete=models.PROTECT,
        related_name='invoices',
    )
    vendor = models.ForeignKey(
        Vendor,
        on_delete=models.PROTECT,
        related_name='invoices',
    )
    items = models.JSONField(default=list, blank=True)

    subtotal = _money_field()
    discount_percent = models.DecimalField(max_digits=7, decimal_places=4, default=Decimal('0'))
    discount_amount = _money_field(default=Decimal('0'))
    total = _money_field()
    vendor_cost = _money_field(default=Decimal('0'))
    payment_method = models.CharField(max_length=20, choices=PaymentMethod.choices)

    use_customer_deposit = models.BooleanField(default=False)
    deposit_used = _money_field(default=Decimal('0'))
    use_agent_credit = models.BooleanField(default=False)
    agent_credit_used = _money_field(default=Decimal('0'))
    vendor_balance_source = models.CharField(
        max_length=20,
        choices=VendorBalanceSource.choices,
        default=VendorBalanceSource.NONE,
    )
    vendor_balance_deducted = _money_field(default=Decimal('0'))

    notes = models.TextField(blank=True, default='')
    issued_by = models.CharField(max_length=36, help_text="Bill creator ID")
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.ISSUED)
    paid_amount = _money_field(default=Decimal('0'))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = 'django_travel_desk'
        ordering = ['-created_at']
        constraints = [
            models.CheckConstraint(
                condition=Q(subtotal__gte=0),
                name='invoice_subtotal_non_negative',
            ),
            models.CheckConstraint(
                condition=Q(total__gte=0),
                name='invoice_total_non_negative',
            ),
            models.CheckConstraint(
                condition=Q(discount_percent__gte=0) & Q(discount_percent__lte=100),
                name='invoice_discount_percent_range',
            ),
        ]

    def __str__(self):
        return f"Invoice {self.invoice_number} - {self.total} ({self.status})"


class DepositTransaction(models.Model):
    """
    One movement of a customer's deposit balance.

    balance_after snapshots the customer's balance once this movement has
    been applied, so the history can be read without replaying it.
    """

    class TransactionType(models.TextChoices):
        CREDIT = 'credit', 'Credit'
        DEBIT = 'debit', 'Debit'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    customer = models.ForeignKey(
        Customer,
        on_delete=models.PROTECT,
        related_name='deposit_transactions',
    )
    transaction_type = models.CharField(max_length=10, choices=TransactionType.choices)
    amount = _money_field()
    description = models.TextField()
    reference_id = models.CharField(max_length=36, blank=True, default='')
    reference_type = models.CharField(
        max_length=50,
        blank=True,
        default='',
        help_text="'ticket' or 'invoice' when drawn by a booking",
    )
    balance_after = _money_field()

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        app_label = 'django_travel_desk'
        ordering = ['-created_at']
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=0),
                name='deposittransaction_amount_positive',
            ),
            models.CheckConstraint(
                condition=Q(balance_after__gte=0),
                name='deposittransaction_balance_after_non_negative',
            ),
        ]

    def __str__(self):
        return f"{self.transaction_type} {self.amount} for {self.customer_id}"


class DocumentCounter(models.Model):
    """Per-scope counter behind TKT-000001 style document numbers."""

    scope = models.CharField(max_length=50, unique=True)
    prefix = models.CharField(max_length=20)
    current_value = models.PositiveBigIntegerField(default=0)
    pad_width = models.PositiveSmallIntegerField(default=6)

    class Meta:
        app_label = 'django_travel_desk'

    def __str__(self):
        return f"{self.scope}: {self.current_value}"

    @property
    def formatted_value(self) -> str:
        return f"{self.prefix}{str(self.current_value).zfill(self.pad_width)}"


class CashReceipt(models.Model):
    """
    Money received over the counter from a customer, agent or vendor.

    Exactly one of customer/vendor is set, matching party_type. Receipts
    record the payment only; they do not move deposit balances.
    """

    class PartyType(models.TextChoices):
        CUSTOMER = 'customer', 'Customer'
        AGENT = 'agent', 'Agent'
        VENDOR = 'vendor', 'Vendor'

    class SourceType(models.TextChoices):
        FLIGHT = 'flight', 'Flight'
        OTHER = 'other', 'Other'

    class PaymentMethod(models.TextChoices):
        CASH = 'cash', 'Cash'
        CARD = 'card', 'Card'
        CHEQUE = 'cheque', 'Cheque'
        BANK_TRANSFER = 'bank_transfer', 'Bank Transfer'

    class Status(models.TextChoices):
        ISSUED = 'issued', 'Issued'
        CANCELLED = 'cancelled', 'Cancelled'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    receipt_number = models.CharField(max_length=50, unique=True)
    party_type = models.CharField(max_length=20, choices=PartyType.choices)
    customer = models.ForeignKey(
        Customer,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='cash_receipts',
    )
    vendor = models.ForeignKey(
        Vendor,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='cash_receipts',
    )
    source_type = models.CharField(
        max_length=20,
        choices=SourceType.choices,
        default=SourceType.FLIGHT,
    )
    pnr = models.CharField(max_length=10, blank=True, default='')
    service_name = models.CharField(max_length=255, blank=True, default='')
    amount = _money_field()
    payment_method = models.CharField(max_length=20, choices=PaymentMethod.choices)
    description = models.TextField(blank=True, default='')
    reference_number = models.CharField(max_length=100, blank=True, default='')
    issued_by = models.CharField(max_length=36, help_text="Bill creator ID")
    created_by_name = models.CharField(max_length=255, blank=True, default='')
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.ISSUED)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = 'django_travel_desk'
        ordering = ['-created_at']
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=0),
                name='cashreceipt_amount_positive',
            ),
            models.CheckConstraint(
                condition=(
                    Q(customer__isnull=False, vendor__isnull=True)
                    | Q(customer__isnull=True, vendor__isnull=False)
                ),
                name='cashreceipt_single_party',
            ),
        ]

    def __str__(self):
        return f"Receipt {self.receipt_number} - {self.amount} ({self.party_type})"

    @property
    def party(self):
        return self.customer if self.customer_id else self.vendor
