"""
Helper utilities
"""

from typing import Any, Iterable, Optional
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation

from storefront_pricing.core.exceptions import InvalidPrecisionException

ZERO = Decimal("0")
HUNDRED = Decimal("100")

CURRENCY_SYMBOLS = {
    "INR": "₹",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "AED": "د.إ",
    "SGD": "S$"
}

def to_decimal(value: Any, default: Decimal = ZERO) -> Decimal:
    """
    Convert a JSON-ish number to Decimal

    Args:
        value: int, float, str or Decimal (None falls back to default)
        default: Value used for None or unparsable input

    Returns:
        Decimal value
    """
    if value is None:
        return default
    if isinstance(value, Decimal):
        return value
    try:
        # str() keeps floats like 0.1 from dragging binary noise along
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return default

def quantum(precision: int) -> Decimal:
    """Smallest step representable at the given precision"""
    if precision is None or precision < 0:
        raise InvalidPrecisionException(precision)
    return Decimal(1).scaleb(-precision)

def round_money(value: Any, precision: int = 2) -> Decimal:
    """
    Round a monetary value half-up

    Args:
        value: Amount to round
        precision: Decimal places to keep

    Returns:
        Rounded Decimal
    """
    return to_decimal(value).quantize(quantum(precision), rounding=ROUND_HALF_UP)

def percentage_of(amount: Decimal, percent: Any) -> Decimal:
    """Unrounded `percent`% of `amount`"""
    return amount * to_decimal(percent) / HUNDRED

def apply_percentage_discount(price: Decimal, percent: Any, precision: int = 2) -> Decimal:
    """Price after removing `percent`% from it, rounded"""
    return round_money(price - percentage_of(price, percent), precision)

def sum_decimals(values: Iterable[Optional[Decimal]]) -> Decimal:
    """Sum ignoring missing values"""
    total = ZERO
    for value in values:
        if value is not None:
            total += value
    return total

def format_currency(
    amount: Decimal,
    currency: str = "INR",
    precision: int = 2
) -> str:
    """
    Format amount as currency

    Args:
        amount: Amount to format
        currency: Currency code
        precision: Decimal places shown

    Returns:
        Formatted currency string
    """
    amount = round_money(amount, precision)
    symbol = CURRENCY_SYMBOLS.get(currency)

    if currency == "INR":
        sign = "-" if amount < 0 else ""
        amount_str = f"{abs(amount):.{precision}f}"

        # Split into integer and decimal parts
        parts = amount_str.split('.')
        integer_part = parts[0]
        decimal_part = f".{parts[1]}" if len(parts) > 1 else ""

        # Indian numbering: last 3 digits, then groups of 2
        if len(integer_part) > 3:
            result = integer_part[-3:]
            integer_part = integer_part[:-3]

            while integer_part:
                result = integer_part[-2:] + "," + result
                integer_part = integer_part[:-2]

            return f"{sign}{symbol}{result}{decimal_part}"
        return f"{sign}{symbol}{integer_part}{decimal_part}"

    if symbol:
        return f"{symbol}{amount:,.{precision}f}"

    # Default formatting for other currencies
    return f"{currency} {amount:,.{precision}f}"
