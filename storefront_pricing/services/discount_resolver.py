"""
Discount resolution service
Picks the basic discount tier for a quantity and applies price-list data to cart lines
"""

import logging
from typing import Any, Iterable, List, Optional, Union

from storefront_pricing.core.exceptions import (
    InvalidQuantityException,
    EmptyDiscountRangesException
)
from storefront_pricing.schemas.base import ZERO
from storefront_pricing.schemas.cart import CartItem
from storefront_pricing.schemas.discount import DiscountRange, DiscountResolution
from storefront_pricing.utils.helpers import to_decimal, round_money, apply_percentage_discount

logger = logging.getLogger(__name__)

RangeInput = Union[DiscountRange, dict]


class DiscountResolver:
    """
    Resolves tiered (quantity range) discounts
    """

    def resolve(self, quantity: Any, ranges: Iterable[RangeInput]) -> DiscountResolution:
        """
        Find the applicable tier and the next tier up

        Ranges may overlap or leave gaps. Among ranges covering the
        quantity the highest Value wins; on equal values the first range
        encountered wins.

        Args:
            quantity: Ordered quantity, must be positive
            ranges: Discount tiers in source order

        Returns:
            Suitable discount (None inside a gap) and next suitable discount

        Raises:
            InvalidQuantityException: If quantity is not positive
            EmptyDiscountRangesException: If no ranges are given
        """
        quantity_value = to_decimal(quantity, default=None)
        if quantity_value is None or not quantity_value.is_finite() or quantity_value <= 0:
            logger.warning(f"Rejected discount resolution for quantity {quantity}")
            raise InvalidQuantityException(quantity)

        tiers = [self._coerce(r) for r in ranges or []]
        if not tiers:
            logger.warning("Rejected discount resolution without ranges")
            raise EmptyDiscountRangesException()

        suitable: Optional[DiscountRange] = None
        next_tier: Optional[DiscountRange] = None

        for tier in tiers:
            if tier.covers(quantity_value):
                if suitable is None or tier.value > suitable.value:
                    suitable = tier
            if tier.min_qty > quantity_value:
                if next_tier is None or tier.min_qty < next_tier.min_qty:
                    next_tier = tier

        return DiscountResolution(
            suitable_discount=suitable,
            next_suitable_discount=next_tier
        )

    def apply_price_list(self, item: CartItem) -> CartItem:
        """
        Take the list price and availability from the attached price-list record

        Returns the item unchanged when no record is attached.
        """
        price_list = item.disc_prd_related_obj
        if price_list is None:
            return item

        updates = {}

        if price_list.is_product_available_in_price_list is not None:
            updates["is_product_available_in_price_list"] = price_list.is_product_available_in_price_list
        if price_list.is_product_available_in_price_list is False:
            updates["price_not_available"] = True

        list_price = None
        if price_list.is_override_pricelist is False and price_list.master_price:
            list_price = price_list.master_price
        elif price_list.base_price is not None:
            list_price = price_list.base_price

        if list_price is not None:
            updates["unit_list_price"] = list_price
            # price-list price is the fresh pre-bundle baseline on every run
            updates["initial_unit_list_price"] = list_price

        return item.model_copy(update=updates) if updates else item

    def apply_basic_discount(self, item: CartItem, precision: int = 2) -> CartItem:
        """
        Resolve the basic discount and reset the line to its basic-discounted price

        Volume and cash discount state from earlier calculations is cleared;
        those stages run afterwards.
        """
        price_list = item.disc_prd_related_obj
        resolution = None
        discount_percentage = item.discount_percentage or ZERO

        if price_list is not None and (
            price_list.discounts
            or price_list.base_price is not None
            or price_list.master_price is not None
        ):
            if price_list.discounts:
                resolution = self.resolve(item.quantity, price_list.discounts)
                logger.debug(
                    f"Product {item.product_id} qty {item.quantity}: "
                    f"tier {resolution.suitable_discount}, next {resolution.next_suitable_discount}"
                )
            range_value = resolution.discount_percentage if resolution else ZERO
            if price_list.is_override_pricelist is False and price_list.master_price:
                discount_percentage = price_list.override_discount + range_value
            else:
                discount_percentage = range_value

        price_not_available = item.price_not_available or item.show_price is False
        list_price = item.unit_list_price

        if list_price is not None:
            discounted_price = apply_percentage_discount(list_price, discount_percentage, precision)
        elif item.discounted_price is not None:
            discounted_price = item.discounted_price
        elif item.unit_price is not None:
            discounted_price = item.unit_price
        else:
            discounted_price = None
            price_not_available = True

        updates = {
            "discount_percentage": discount_percentage,
            "volume_discount": ZERO,
            "volume_discount_applied": False,
            "applied_discount": discount_percentage,
            "unit_volume_price": None,
            "cash_discounted_price": ZERO,
            "check_moq": (
                item.min_order_quantity is not None
                and item.min_order_quantity > item.quantity
            ),
        }

        if resolution is not None:
            suitable = resolution.suitable_discount
            updates["discount_details"] = suitable
            updates["next_suitable_discount"] = resolution.next_suitable_discount
            updates["cant_combine_with_other_discounts"] = (
                suitable.cant_combine_with_other_discounts if suitable else None
            )

        if price_not_available:
            updates.update({
                "price_not_available": True,
                "discounted_price": ZERO,
                "unit_price": ZERO,
                "discount": ZERO,
                "total_lp": ZERO,
                "basic_discounted_price": ZERO,
            })
            return item.model_copy(update=updates)

        updates["discounted_price"] = discounted_price
        updates["unit_price"] = discounted_price

        if list_price is not None:
            updates["discount"] = round_money(list_price - discounted_price, precision)
            updates["total_lp"] = round_money(list_price * item.quantity, precision)
            updates["basic_discounted_price"] = (
                round_money((list_price - discounted_price) * item.quantity, precision)
                if list_price > discounted_price else ZERO
            )
        else:
            updates["discount"] = ZERO
            updates["total_lp"] = round_money(discounted_price * item.quantity, precision)
            updates["basic_discounted_price"] = ZERO

        return item.model_copy(update=updates)

    @staticmethod
    def _coerce(value: RangeInput) -> DiscountRange:
        if isinstance(value, DiscountRange):
            return value
        return DiscountRange.model_validate(value)


def get_suitable_discount_by_quantity(
    quantity: Any,
    ranges: List[RangeInput]
) -> DiscountResolution:
    """Shortcut for DiscountResolver().resolve"""
    return DiscountResolver().resolve(quantity, ranges)
