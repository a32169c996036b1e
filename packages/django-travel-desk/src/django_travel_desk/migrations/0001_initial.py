# Generated manually for standalone django-travel-desk package

import uuid
from decimal import Decimal

import django.db.models.deletion
from django.db import migrations, models


def money(**kwargs):
    return models.DecimalField(max_digits=19, decimal_places=4, **kwargs)


def timestamps():
    return [
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
    ]


VENDOR_BALANCE_CHOICES = [
    ("none", "None"),
    ("credit", "Vendor Credit"),
    ("deposit", "Deposit with Vendor"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Customer",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("phone", models.CharField(max_length=50)),
                ("company", models.CharField(blank=True, default="", max_length=255)),
                ("address", models.TextField(blank=True, default="")),
                ("email", models.EmailField(blank=True, default="", max_length=254)),
                (
                    "customer_type",
                    models.CharField(
                        choices=[("customer", "Customer"), ("agent", "Agent")],
                        db_index=True,
                        default="customer",
                        max_length=20,
                    ),
                ),
                (
                    "deposit_balance",
                    money(default=Decimal("0"), help_text="Pre-paid credit that can offset new charges"),
                ),
                (
                    "credit_balance",
                    money(default=Decimal("0"), help_text="Credit extended to the customer (agents only)"),
                ),
                *timestamps(),
            ],
            options={
                "ordering": ["name"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(deposit_balance__gte=0),
                        name="customer_deposit_balance_non_negative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(credit_balance__gte=0),
                        name="customer_credit_balance_non_negative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Vendor",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("email", models.EmailField(blank=True, default="", max_length=254)),
                ("phone", models.CharField(blank=True, default="", max_length=50)),
                (
                    "credit_balance",
                    money(default=Decimal("0"), help_text="Credit the vendor extends to the agency"),
                ),
                (
                    "deposit_balance",
                    money(default=Decimal("0"), help_text="Deposit the agency holds with the vendor"),
                ),
                *timestamps(),
            ],
            options={
                "ordering": ["name"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(credit_balance__gte=0),
                        name="vendor_credit_balance_non_negative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(deposit_balance__gte=0),
                        name="vendor_deposit_balance_non_negative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="DocumentCounter",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("scope", models.CharField(max_length=50, unique=True)),
                ("prefix", models.CharField(max_length=20)),
                ("current_value", models.PositiveBigIntegerField(default=0)),
                ("pad_width", models.PositiveSmallIntegerField(default=6)),
            ],
        ),
        migrations.CreateModel(
            name="Ticket",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("ticket_number", models.CharField(max_length=50, unique=True)),
                (
                    "ticket_numbers",
                    models.JSONField(blank=True, default=list, help_text="Airline ticket numbers, one per passenger"),
                ),
                ("pnr", models.CharField(blank=True, default="", max_length=10)),
                (
                    "customer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="tickets",
                        to="django_travel_desk.customer",
                    ),
                ),
                (
                    "vendor",
                    models.ForeignKey(
                        blank=True,
                        help_text="Empty for tickets bought directly from the airline",
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="tickets",
                        to="django_travel_desk.vendor",
                    ),
                ),
                (
                    "source",
                    models.CharField(
                        choices=[("direct", "Direct"), ("vendor", "Vendor"), ("agent", "Agent")],
                        default="direct",
                        max_length=20,
                    ),
                ),
                (
                    "trip_type",
                    models.CharField(
                        choices=[("one_way", "One Way"), ("round_trip", "Round Trip")],
                        default="one_way",
                        max_length=20,
                    ),
                ),
                (
                    "seat_class",
                    models.CharField(
                        choices=[("economy", "Economy"), ("business", "Business"), ("first", "First")],
                        default="economy",
                        max_length=20,
                    ),
                ),
                ("route", models.CharField(max_length=255)),
                ("airlines", models.CharField(max_length=255)),
                ("flight_number", models.CharField(blank=True, default="", max_length=50)),
                ("travel_date", models.CharField(max_length=20)),
                ("return_date", models.CharField(blank=True, default="", max_length=20)),
                ("passenger_name", models.CharField(help_text="Lead passenger", max_length=255)),
                ("passenger_names", models.JSONField(blank=True, default=list)),
                ("passenger_count", models.PositiveIntegerField(default=1)),
                ("vendor_price", money(default=Decimal("0"))),
                ("airline_price", money(default=Decimal("0"))),
                ("vendor_cost", money(default=Decimal("0"))),
                (
                    "additional_cost",
                    money(default=Decimal("0"), help_text="Flat MC addition for the whole booking"),
                ),
                ("face_value", money(help_text="Final price to customer")),
                ("deduct_from_deposit", models.BooleanField(default=False)),
                ("deposit_deducted", money(default=Decimal("0"))),
                (
                    "vendor_balance_source",
                    models.CharField(choices=VENDOR_BALANCE_CHOICES, default="none", max_length=20),
                ),
                ("vendor_balance_deducted", money(default=Decimal("0"))),
                ("issued_by", models.CharField(help_text="Bill creator ID", max_length=36)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("processing", "Processing"),
                            ("approved", "Approved"),
                            ("issued", "Issued"),
                            ("used", "Used"),
                            ("cancelled", "Cancelled"),
                            ("refunded", "Refunded"),
                        ],
                        default="pending",
                        max_length=20,
                    ),
                ),
                *timestamps(),
            ],
            options={
                "ordering": ["-created_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(face_value__gte=0),
                        name="ticket_face_value_non_negative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(deposit_deducted__gte=0)
                        & models.Q(deposit_deducted__lte=models.F("face_value")),
                        name="ticket_deposit_within_face_value",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(passenger_count__gte=1),
                        name="ticket_passenger_count_positive",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Invoice",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("invoice_number", models.CharField(max_length=50, unique=True)),
                (
                    "customer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="invoices",
                        to="django_travel_desk.customer",
                    ),
                ),
                (
                    "vendor",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="invoices",
                        to="django_travel_desk.vendor",
                    ),
                ),
                ("items", models.JSONField(blank=True, default=list)),
                ("subtotal", money()),
                ("discount_percent", models.DecimalField(decimal_places=4, default=Decimal("0"), max_digits=7)),
                ("discount_amount", money(default=Decimal("0"))),
                ("total", money()),
                ("vendor_cost", money(default=Decimal("0"))),
                (
                    "payment_method",
                    models.CharField(
                        choices=[("cash", "Cash"), ("card", "Card"), ("credit", "Credit")],
                        max_length=20,
                    ),
                ),
                ("use_customer_deposit", models.BooleanField(default=False)),
                ("deposit_used", money(default=Decimal("0"))),
                ("use_agent_credit", models.BooleanField(default=False)),
                ("agent_credit_used", money(default=Decimal("0"))),
                (
                    "vendor_balance_source",
                    models.CharField(choices=VENDOR_BALANCE_CHOICES, default="none", max_length=20),
                ),
                ("vendor_balance_deducted", money(default=Decimal("0"))),
                ("notes", models.TextField(blank=True, default="")),
                ("issued_by", models.CharField(help_text="Bill creator ID", max_length=36)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("draft", "Draft"),
                            ("issued", "Issued"),
                            ("paid", "Paid"),
                            ("partial", "Partial"),
                            ("cancelled", "Cancelled"),
                        ],
                        default="issued",
                        max_length=20,
                    ),
                ),
                ("paid_amount", money(default=Decimal("0"))),
                *timestamps(),
            ],
            options={
                "ordering": ["-created_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(subtotal__gte=0),
                        name="invoice_subtotal_non_negative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(total__gte=0),
                        name="invoice_total_non_negative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(discount_percent__gte=0) & models.Q(discount_percent__lte=100),
                        name="invoice_discount_percent_range",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="DepositTransaction",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "customer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="deposit_transactions",
                        to="django_travel_desk.customer",
                    ),
                ),
                (
                    "transaction_type",
                    models.CharField(choices=[("credit", "Credit"), ("debit", "Debit")], max_length=10),
                ),
                ("amount", money()),
                ("description", models.TextField()),
                ("reference_id", models.CharField(blank=True, default="", max_length=36)),
                (
                    "reference_type",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="'ticket' or 'invoice' when drawn by a booking",
                        max_length=50,
                    ),
                ),
                ("balance_after", money()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["-created_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(amount__gt=0),
                        name="deposittransaction_amount_positive",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(balance_after__gte=0),
                        name="deposittransaction_balance_after_non_negative",
                    ),
                ],
            },
        ),
    ]
