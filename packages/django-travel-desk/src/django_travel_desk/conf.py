"""Django Travel Desk configuration.

All settings can be overridden in your Django settings.py.

Example:
    # settings.py
    TRAVEL_DESK_CURRENCY = 'AED'
    TRAVEL_DESK_TICKET_PREFIX = 'TKT-'
"""

from django.conf import settings


DEFAULTS = {
    'CURRENCY': 'AED',
    'TICKET_PREFIX': 'TKT-',
    'INVOICE_PREFIX': 'INV-',
    'RECEIPT_PREFIX': 'RCT-',
    'NUMBER_PAD_WIDTH': 6,
}


def get_setting(name: str, default=None):
    """Get a setting with TRAVEL_DESK_ prefix.

    Read at call time so that override_settings() is honoured.
    """
    if default is None:
        default = DEFAULTS.get(name)
    return getattr(settings, f"TRAVEL_DESK_{name}", default)


def get_currency() -> str:
    """Currency every amount is booked in."""
    return get_setting('CURRENCY')


def get_number_prefix(scope: str) -> str:
    """Prefix for human-readable document numbers.

    Scopes without a configured prefix use their first three letters,
    e.g. 'voucher' -> 'VOU-'.
    """
    prefix = get_setting(f"{scope.upper()}_PREFIX")
    if prefix is None:
        prefix = f"{scope[:3].upper()}-"
    return prefix


def get_pad_width() -> int:
    return int(get_setting('NUMBER_PAD_WIDTH'))


# =============================================================================
# DEFAULT SETTINGS REFERENCE
# =============================================================================

# TRAVEL_DESK_CURRENCY = 'AED'          # Booking currency
# TRAVEL_DESK_TICKET_PREFIX = 'TKT-'    # Ticket number prefix
# TRAVEL_DESK_INVOICE_PREFIX = 'INV-'   # Invoice number prefix
# TRAVEL_DESK_RECEIPT_PREFIX = 'RCT-'   # Cash receipt number prefix
# TRAVEL_DESK_NUMBER_PAD_WIDTH = 6      # Zero-padding for document numbers
