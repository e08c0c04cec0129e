"""Custom validators for cart input"""

from typing import Any, Optional
from decimal import Decimal

from storefront_pricing.core.config import settings
from storefront_pricing.utils.helpers import to_decimal

def _display(value: Decimal) -> str:
    """Render quantities without trailing zeros (5, 2.5)"""
    text = format(value.normalize(), "f")
    return text

def validate_quantity(
    step: Any,
    minimum: Any,
    maximum: Any,
    quantity: Any
) -> Optional[str]:
    """
    Check a quantity against MOQ, maximum and packaging step

    This is a caller-side pre-check; it reports instead of raising.

    Args:
        step: Packaging quantity the order must be a multiple of
        minimum: Minimum order quantity
        maximum: Largest orderable quantity (None uses MAX_ORDER_QUANTITY)
        quantity: Requested quantity

    Returns:
        Error message, or None when the quantity is acceptable
    """
    quantity = to_decimal(quantity, default=None)
    if quantity is None or not quantity.is_finite():
        return "Enter a valid quantity"

    minimum = to_decimal(minimum, default=Decimal("1"))
    maximum = to_decimal(maximum, default=settings.MAX_ORDER_QUANTITY)
    step = to_decimal(step, default=Decimal("1"))

    if quantity <= 0:
        return "Quantity should be greater than 0"
    if quantity < minimum:
        return f"Minimum order quantity is {_display(minimum)}"
    if quantity > maximum:
        return f"Maximum order quantity is {_display(maximum)}"
    if step > 0 and quantity % step != 0:
        return f"Quantity should be in multiples of {_display(step)}"
    return None
