"""
Discount precedence rules

Which discounts may stack on a single cart line:

- A basic-discount tier flagged ``CantCombineWithOtherDisCounts`` wins
  outright. Volume discount is skipped for that line.
- Otherwise volume discount applies on top of the basic-discounted price.
- Cash discount applies last, on top of whatever the line price is after
  basic and volume discounts.
"""

import logging

from storefront_pricing.schemas.cart import CartItem

logger = logging.getLogger(__name__)


class DiscountPrecedencePolicy:
    """Decides whether later discount stages may touch a line"""

    def __init__(self, cash_combines_with_volume: bool = True):
        self.cash_combines_with_volume = cash_combines_with_volume

    def allows_volume_discount(self, item: CartItem) -> bool:
        if item.cant_combine_with_other_discounts:
            logger.debug(
                f"Volume discount skipped for product {item.product_id}: "
                f"basic discount cannot be combined"
            )
            return False
        return True

    def allows_cash_discount(self, item: CartItem) -> bool:
        if item.volume_discount_applied and not self.cash_combines_with_volume:
            return False
        return True


default_policy = DiscountPrecedencePolicy()
