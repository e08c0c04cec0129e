"""
Volume discount service
Company-level volume discount on top of the basic-discounted price
"""

import logging
from typing import Any, Dict, List, Optional
from decimal import Decimal

from storefront_pricing.core.exceptions import InvalidInputException
from storefront_pricing.schemas.base import ZERO
from storefront_pricing.schemas.cart import (
    CartItem,
    CalculationOptions,
    CalculationSettings,
    ProductId,
    VolumeDiscountDetails,
    VolumeDiscountResult
)
from storefront_pricing.services.discount_policy import DiscountPrecedencePolicy, default_policy
from storefront_pricing.services.line_pricing import LinePricer
from storefront_pricing.services.tax_resolver import TaxResolver
from storefront_pricing.utils.helpers import to_decimal, round_money, HUNDRED

logger = logging.getLogger(__name__)


class VolumeDiscountCalculator:
    """
    Applies per-product volume discount percentages and reprices the cart

    The volume percentage multiplies onto the basic discount: a 10% basic
    discount followed by a 5% volume discount is 14.5% off list price.
    """

    def __init__(
        self,
        tax_resolver: Optional[TaxResolver] = None,
        policy: Optional[DiscountPrecedencePolicy] = None
    ):
        self.tax_resolver = tax_resolver
        self.policy = policy or default_policy

    def apply_to_line(self, item: CartItem, volume_discount: Any, precision: int = 2) -> CartItem:
        """
        Discount one line's basic-discounted unit price

        Args:
            item: Line after the basic discount stage
            volume_discount: Volume discount percent (None or 0 for none)
            precision: Decimal places for the unit price

        Returns:
            Line with unit_price and unit_volume_price set to the volume price

        Raises:
            InvalidInputException: If the percentage is outside 0-100
        """
        if item.price_not_available:
            return item

        base = _volume_base(item)
        if base is None:
            return item

        if volume_discount is None:
            percent = ZERO
        else:
            percent = to_decimal(volume_discount, default=None)
        if percent is None or not percent.is_finite() or percent < 0 or percent > HUNDRED:
            logger.warning(f"Rejected volume discount {volume_discount} for product {item.product_id}")
            raise InvalidInputException(
                f"Invalid volume discount {volume_discount} for product {item.product_id}"
            )

        if not self.policy.allows_volume_discount(item):
            percent = ZERO

        basic = item.discount_percentage or ZERO
        volume_price = round_money(base * (HUNDRED - percent) / HUNDRED, precision)
        applied = HUNDRED - (HUNDRED - basic) * (HUNDRED - percent) / HUNDRED

        return item.model_copy(update={
            "volume_discount": percent,
            "applied_discount": applied,
            "unit_price": volume_price,
            "unit_volume_price": volume_price,
            "volume_discount_applied": percent > 0,
        })

    def calculate(
        self,
        products: List[CartItem],
        volume_discounts: Dict[ProductId, Any],
        is_inter: bool = True,
        tax_exemption: bool = False,
        calculation_settings: Optional[CalculationSettings] = None,
        insurance_charges: Decimal = ZERO
    ) -> VolumeDiscountResult:
        """
        Apply volume discounts and recompute line prices, tax and cart totals

        Args:
            products: Lines after the basic discount stage
            volume_discounts: Volume discount percent per product id
            is_inter: Inter-state sale
            tax_exemption: Buyer is tax exempt
            calculation_settings: Rounding, shipping tax and precision switches
            insurance_charges: Cart-level insurance added to the total

        Returns:
            Repriced lines and the cart-level volume discount details
        """
        calculation_settings = calculation_settings or CalculationSettings()
        precision = calculation_settings.precision
        pricer = LinePricer(calculation_settings, self.tax_resolver)
        lookup = CalculationOptions(volume_discounts=volume_discounts)

        sub_total = ZERO
        priced: List[CartItem] = []
        for item in products:
            base = _volume_base(item)
            before = item if base is None else item.model_copy(update={"unit_price": base})
            sub_total += pricer.price(before, is_inter, tax_exemption).total_price

            discounted = self.apply_to_line(item, lookup.volume_discount_for(item.product_id), precision)
            priced.append(pricer.price(discounted, is_inter, tax_exemption))

        totals = pricer.summarize(priced, insurance_charges)
        details = VolumeDiscountDetails(
            sub_total=sub_total,
            sub_total_volume=totals.total_value,
            volume_discount_applied=sub_total - totals.total_value,
            overall_tax=totals.total_tax,
            taxable_amount=totals.taxable_amount,
            pf_rate=totals.pf_rate,
            total_shipping=totals.total_shipping,
            shipping_tax=totals.shipping_tax,
            insurance_charges=totals.insurance_charges,
            calculated_total=totals.calculated_total,
            rounding_adjustment=totals.rounding_adjustment,
            grand_total=totals.grand_total,
            tax_totals=totals.tax_totals,
        )

        logger.debug(
            f"Volume discount on {len(priced)} lines: "
            f"{details.sub_total} -> {details.sub_total_volume}"
        )
        return VolumeDiscountResult(products=priced, details=details)


def _volume_base(item: CartItem) -> Optional[Decimal]:
    if item.discounted_price is not None:
        return item.discounted_price
    return item.unit_price
