"""Amount coercion and currency display helpers.

Form values arrive as strings, floats, None or garbage. Everything in the
pricing pipeline is normalized to Decimal through to_amount() and to_count()
first; none of these functions ever raises.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN
from typing import Any

from django_travel_desk import conf


ZERO = Decimal("0")

# Currency precision rules for settlement/display
CURRENCY_DECIMALS = {
    'AED': 2, 'USD': 2, 'EUR': 2, 'GBP': 2,
    'SAR': 2, 'INR': 2, 'PKR': 2,
    'JPY': 0, 'KRW': 0,  # No decimal currencies
    'KWD': 3, 'BHD': 3, 'OMR': 3,
}

# Matches DecimalField(max_digits=19, decimal_places=4)
MAX_INTEGER_DIGITS = 15
MIN_ADJUSTED_EXPONENT = -28

# Passenger counts and invoice quantities
MAX_COUNT = 100_000

TRUE_STRINGS = ('1', 'true', 'yes', 'on', 'y', 't')


def to_decimal(value: Any) -> Decimal:
    """Convert value to a finite Decimal, or ZERO if that is not possible.

    Floats go through str() to avoid binary precision artefacts.
    Booleans are not amounts. Values too large for a money column, or too
    small to be one, are treated as garbage so that later arithmetic can
    never overflow.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        result = value
    else:
        if isinstance(value, float):
            value = str(value)
        try:
            result = Decimal(value if isinstance(value, (int, str)) else str(value))
        except (InvalidOperation, ValueError, TypeError):
            return ZERO
    if not result.is_finite() or result.is_zero():
        return ZERO
    if not MIN_ADJUSTED_EXPONENT <= result.adjusted() < MAX_INTEGER_DIGITS:
        return ZERO
    return result


def to_amount(value: Any) -> Decimal:
    """Coerce a price/amount field to a non-negative Decimal.

    Usage:
        to_amount("500")    # Decimal("500")
        to_amount(19.99)    # Decimal("19.99")
        to_amount("")       # Decimal("0")
        to_amount("-10")    # Decimal("0")
        to_amount("abc")    # Decimal("0")
        to_amount("1e999")  # Decimal("0")
    """
    result = to_decimal(value)
    if result < 0:
        return ZERO
    return result


def to_count(value: Any, default: int = 1) -> int:
    """Coerce a quantity/passenger count to a non-negative int.

    Missing, unparseable or absurdly large input falls back to ``default``.
    An explicit zero is kept, fractional counts are truncated.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, str) and not value.strip():
        return default
    if isinstance(value, int):
        count = value
    else:
        number = to_decimal(value)
        if number == ZERO and not _looks_like_zero(value):
            return default
        count = int(number)
    if count < 0 or count > MAX_COUNT:
        return default
    return count


def to_flag(value: Any) -> bool:
    """Coerce a checkbox/toggle form value to a bool.

    Usage:
        to_flag(True)      # True
        to_flag("false")   # False
        to_flag("on")      # True
        to_flag(None)      # False
    """
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip().lower() in TRUE_STRINGS
    if isinstance(value, (int, float, Decimal)):
        return to_decimal(value) != ZERO
    return False


def _looks_like_zero(value: Any) -> bool:
    try:
        return Decimal(str(value).strip()) == 0
    except (InvalidOperation, ValueError):
        return False


def quantize_amount(amount: Any, currency: str | None = None) -> Decimal:
    """
    Return amount quantized to the currency's decimals for display/settlement.

    Uses banker's rounding (ROUND_HALF_EVEN). Stored values are never
    quantized; call this only when rendering or settling.
    """
    currency = currency or conf.get_currency()
    decimals = CURRENCY_DECIMALS.get(currency, 2)
    return to_decimal(amount).quantize(
        Decimal(10) ** -decimals,
        rounding=ROUND_HALF_EVEN,
    )


def format_currency(amount: Any, currency: str | None = None) -> str:
    """Render an amount the way receipts show it, e.g. "AED 1,100.00"."""
    currency = currency or conf.get_currency()
    quantized = quantize_amount(amount, currency)
    return f"{currency} {quantized:,}"
