# Generated manually for standalone django-travel-desk package

import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("django_travel_desk", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="CashReceipt",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("receipt_number", models.CharField(max_length=50, unique=True)),
                (
                    "party_type",
                    models.CharField(
                        choices=[("customer", "Customer"), ("agent", "Agent"), ("vendor", "Vendor")],
                        max_length=20,
                    ),
                ),
                (
                    "customer",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="cash_receipts",
                        to="django_travel_desk.customer",
                    ),
                ),
                (
                    "vendor",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="cash_receipts",
                        to="django_travel_desk.vendor",
                    ),
                ),
                (
                    "source_type",
                    models.CharField(
                        choices=[("flight", "Flight"), ("other", "Other")],
                        default="flight",
                        max_length=20,
                    ),
                ),
                ("pnr", models.CharField(blank=True, default="", max_length=10)),
                ("service_name", models.CharField(blank=True, default="", max_length=255)),
                ("amount", models.DecimalField(decimal_places=4, max_digits=19)),
                (
                    "payment_method",
                    models.CharField(
                        choices=[
                            ("cash", "Cash"),
                            ("card", "Card"),
                            ("cheque", "Cheque"),
                            ("bank_transfer", "Bank Transfer"),
                        ],
                        max_length=20,
                    ),
                ),
                ("description", models.TextField(blank=True, default="")),
                ("reference_number", models.CharField(blank=True, default="", max_length=100)),
                ("issued_by", models.CharField(help_text="Bill creator ID", max_length=36)),
                ("created_by_name", models.CharField(blank=True, default="", max_length=255)),
                (
                    "status",
                    models.CharField(
                        choices=[("issued", "Issued"), ("cancelled", "Cancelled")],
                        default="issued",
                        max_length=20,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-created_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(amount__gt=0),
                        name="cashreceipt_amount_positive",
                    ),
                    models.CheckConstraint(
                        condition=(
                            models.Q(customer__isnull=False, vendor__isnull=True)
                            | models.Q(customer__isnull=True, vendor__isnull=False)
                        ),
                        name="cashreceipt_single_party",
                    ),
                ],
            },
        ),
    ]
