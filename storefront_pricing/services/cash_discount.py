"""
Cash discount service
Payment-term cash discount applied uniformly across a cart
"""

import logging
from typing import Any, List, Optional

from storefront_pricing.core.exceptions import InvalidInputException
from storefront_pricing.schemas.base import ZERO
from storefront_pricing.schemas.cart import CartItem
from storefront_pricing.services.discount_policy import DiscountPrecedencePolicy, default_policy
from storefront_pricing.utils.helpers import to_decimal, round_money, percentage_of

logger = logging.getLogger(__name__)


class CashDiscountApplier:
    """
    Applies and removes a cash discount percentage on cart lines

    apply/remove only record the discount on the lines; the calculator
    reprices them on its next run.
    """

    def __init__(self, policy: Optional[DiscountPrecedencePolicy] = None):
        self.policy = policy or default_policy

    def apply(self, products: List[CartItem], cash_discount_value: Any) -> List[CartItem]:
        """
        Record a cash discount on every line

        The current unit price is snapshotted into original_unit_price the
        first time only, so applying twice never loses the undiscounted price.

        Raises:
            InvalidInputException: If the discount value is negative or not a number
        """
        value = to_decimal(cash_discount_value, default=None)
        if value is None or not value.is_finite() or value < 0:
            logger.warning(f"Rejected cash discount value {cash_discount_value}")
            raise InvalidInputException(f"Invalid cash discount value: {cash_discount_value}")

        updated = []
        for item in products:
            updates = {"cashdiscount_value": value}
            if item.original_unit_price is None:
                updates["original_unit_price"] = item.unit_price
            updated.append(item.model_copy(update=updates))

        logger.debug(f"Cash discount {value}% recorded on {len(updated)} lines")
        return updated

    def remove(self, products: List[CartItem]) -> List[CartItem]:
        """Restore unit prices from the snapshot and clear the cash discount"""
        updated = []
        for item in products:
            updates = {
                "cashdiscount_value": ZERO,
                "cash_discounted_price": ZERO,
            }
            if item.original_unit_price is not None:
                updates["unit_price"] = item.original_unit_price
            updated.append(item.model_copy(update=updates))
        return updated

    def price_line(self, item: CartItem, precision: int = 2) -> CartItem:
        """
        Take the recorded cash discount off the line's current price

        The base is the volume-discounted unit price when volume discount
        ran, else the basic-discounted price.
        """
        if item.price_not_available:
            return item.model_copy(update={"cash_discounted_price": ZERO})

        base = _cash_discount_base(item)
        if base is None:
            return item

        rate = item.cashdiscount_value
        if not rate or rate <= 0 or not self.policy.allows_cash_discount(item):
            return item.model_copy(update={"unit_price": base, "cash_discounted_price": ZERO})

        amount = percentage_of(base, rate)
        return item.model_copy(update={
            "unit_price": round_money(base - amount, precision),
            "cash_discounted_price": round_money(amount * item.quantity, precision),
            "original_unit_price": (
                item.original_unit_price if item.original_unit_price is not None else base
            ),
        })


def _cash_discount_base(item: CartItem) -> Optional[Any]:
    if item.unit_volume_price is not None:
        return item.unit_volume_price
    if item.discounted_price is not None:
        return item.discounted_price
    return item.unit_price
