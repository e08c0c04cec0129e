"""Utilities package"""

from .validators import validate_quantity
from .helpers import format_currency, round_money, to_decimal

__all__ = [
    "validate_quantity",
    "format_currency",
    "round_money",
    "to_decimal"
]
