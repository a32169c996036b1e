"""Pytest configuration for django-travel-desk tests."""
import django
import pytest
from django.conf import settings


def pytest_configure():
    """Configure Django settings for pytest."""
    if not settings.configured:
        settings.configure(
            DEBUG=True,
            SECRET_KEY='test-secret-key-for-django-travel-desk',
            DATABASES={
                'default': {
                    'ENGINE': 'django.db.backends.sqlite3',
                    'NAME': ':memory:',
                }
            },
            INSTALLED_APPS=[
                'django.contrib.contenttypes',
                'django.contrib.auth',
                'django_travel_desk',
            ],
            DEFAULT_AUTO_FIELD='django.db.models.BigAutoField',
            USE_TZ=True,
            TIME_ZONE='UTC',
        )
    django.setup()


@pytest.fixture
def customer(db):
    """A customer holding a 300 deposit."""
    from decimal import Decimal
    from django_travel_desk.models import Customer
    return Customer.objects.create(
        name="Aisha Khan",
        phone="+971500000001",
        deposit_balance=Decimal("300"),
    )


@pytest.fixture
def agent(db):
    """A bulk-buying agent with deposit and credit."""
    from decimal import Decimal
    from django_travel_desk.models import Customer
    return Customer.objects.create(
        name="Gulf Travel Agents",
        phone="+971500000002",
        customer_type=Customer.CustomerType.AGENT,
        deposit_balance=Decimal("200"),
        credit_balance=Decimal("1000"),
    )


@pytest.fixture
def vendor(db):
    """A vendor that extends credit and holds a deposit."""
    from decimal import Decimal
    from django_travel_desk.models import Vendor
    return Vendor.objects.create(
        name="Skyline Consolidators",
        credit_balance=Decimal("2000"),
        deposit_balance=Decimal("400"),
    )
