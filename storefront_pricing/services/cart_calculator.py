"""
Cart calculation service
Runs the pricing pipeline over a cart and aggregates the totals
"""

import logging
from typing import Any, Iterable, List, Optional, Union

from storefront_pricing.core.exceptions import InvalidQuantityException
from storefront_pricing.core.monitoring import CalculationContext, record_warning
from storefront_pricing.schemas.base import ZERO
from storefront_pricing.schemas.cart import (
    CartItem,
    CartValue,
    CalculatedCartResult,
    CalculationMetadata,
    CalculationOptions,
    CalculationSettings,
    CalculationWarning,
    WarningCode
)
from storefront_pricing.services.bundle_resolver import BundleResolver
from storefront_pricing.services.cash_discount import CashDiscountApplier
from storefront_pricing.services.discount_policy import DiscountPrecedencePolicy, default_policy
from storefront_pricing.services.discount_resolver import DiscountResolver
from storefront_pricing.services.line_pricing import LinePricer
from storefront_pricing.services.tax_resolver import TaxResolver
from storefront_pricing.services.volume_discount import VolumeDiscountCalculator
from storefront_pricing.utils.helpers import quantum, sum_decimals

logger = logging.getLogger(__name__)

ItemInput = Union[CartItem, dict]


class CartCalculator:
    """
    Cart pricing pipeline

    Stages run in a fixed order: price list, bundle resolution, basic
    discount, volume discount (when requested), cash discount, line
    pricing with tax/PF/shipping, then aggregation with rounding
    reconciliation. Every stage returns new line models; the input is
    never modified.
    """

    def __init__(
        self,
        discount_resolver: Optional[DiscountResolver] = None,
        bundle_resolver: Optional[BundleResolver] = None,
        policy: Optional[DiscountPrecedencePolicy] = None
    ):
        self.policy = policy or default_policy
        self.discount_resolver = discount_resolver or DiscountResolver()
        self.bundle_resolver = bundle_resolver or BundleResolver()
        self.volume_calculator = VolumeDiscountCalculator(policy=self.policy)
        self.cash_discount = CashDiscountApplier(policy=self.policy)

    def calculate(
        self,
        products: Iterable[ItemInput],
        is_inter: bool = True,
        tax_exemption: bool = False,
        calculation_settings: Optional[CalculationSettings] = None,
        options: Optional[CalculationOptions] = None
    ) -> CalculatedCartResult:
        """
        Price a cart

        Args:
            products: Cart lines (models or camelCase dicts)
            is_inter: Inter-state sale, selects the interTax rule set
            tax_exemption: Buyer is tax exempt
            calculation_settings: Rounding, shipping tax and precision switches
            options: Volume discount and insurance options

        Returns:
            Priced lines, cart totals, metadata and warnings

        Raises:
            InvalidQuantityException: If any line has a non-positive quantity
            InvalidPrecisionException: If the precision is negative
        """
        calculation_settings = calculation_settings or CalculationSettings()
        options = options or CalculationOptions()
        precision = calculation_settings.precision
        quantum(precision)

        with CalculationContext("calculate_cart"):
            items = [self._coerce(product) for product in products or []]
            metadata = CalculationMetadata(
                is_inter=is_inter,
                tax_exemption=tax_exemption,
                precision=precision
            )

            if not items:
                return CalculatedCartResult(metadata=metadata)

            for item in items:
                if not item.quantity.is_finite() or item.quantity <= 0:
                    logger.warning(f"Rejected cart line {item.product_id} with quantity {item.quantity}")
                    raise InvalidQuantityException(item.quantity, item.product_id)

            items = [self.discount_resolver.apply_price_list(item) for item in items]
            items = self.bundle_resolver.resolve_all(items)
            items = [self.discount_resolver.apply_basic_discount(item, precision) for item in items]

            volume_details = None
            if options.apply_volume_discount:
                volume_result = self.volume_calculator.calculate(
                    items,
                    options.volume_discounts,
                    is_inter,
                    tax_exemption,
                    calculation_settings,
                    options.insurance_charges
                )
                items = volume_result.products
                volume_details = volume_result.details

            items = [self.cash_discount.price_line(item, precision) for item in items]

            pricer = LinePricer(calculation_settings, TaxResolver(precision=precision))
            items = [pricer.price(item, is_inter, tax_exemption) for item in items]
            totals = pricer.summarize(items, options.insurance_charges)

            warnings = self._collect_warnings(items, is_inter, tax_exemption)
            cart_value = CartValue(
                total_items=len(items),
                total_value=totals.total_value,
                total_tax=totals.total_tax,
                taxable_amount=totals.taxable_amount,
                calculated_total=totals.calculated_total,
                rounding_adjustment=totals.rounding_adjustment,
                grand_total=totals.grand_total,
                total_shipping=totals.total_shipping,
                shipping_tax=totals.shipping_tax,
                pf_rate=totals.pf_rate,
                insurance_charges=totals.insurance_charges,
                total_lp=sum_decimals(item.total_lp for item in items),
                total_basic_discount=sum_decimals(item.basic_discounted_price for item in items),
                total_cash_discount=sum_decimals(item.cash_discounted_price for item in items),
                cash_discount_value=self._cash_discount_value(items),
                hide_list_price_public=any(item.list_price_public is False for item in items),
                has_products_with_negative_total_price=any(item.total_price < 0 for item in items),
                has_all_products_available_in_price_list=not any(
                    item.is_product_available_in_price_list is False for item in items
                ),
                tax_totals=totals.tax_totals,
            )

            metadata = metadata.model_copy(update={
                "total_products": len(items),
                "total_bundle_products": BundleResolver.count_selected(items),
                "volume_discount_applied": any(item.volume_discount_applied for item in items),
                "volume_discount_details": volume_details,
            })

            logger.info(
                f"Calculated cart of {len(items)} lines: grand total {cart_value.grand_total}, "
                f"{len(warnings)} warnings"
            )
            return CalculatedCartResult(
                products=items,
                cart_value=cart_value,
                metadata=metadata,
                warnings=warnings
            )

    def _collect_warnings(
        self,
        items: List[CartItem],
        is_inter: bool,
        tax_exemption: bool
    ) -> List[CalculationWarning]:
        warnings = []

        for item in items:
            if item.price_not_available:
                warnings.append(CalculationWarning(
                    code=WarningCode.PRICE_NOT_AVAILABLE,
                    message=f"Price not available for product {item.product_id}",
                    product_id=item.product_id
                ))
            elif not tax_exemption and not TaxResolver.has_rule(item.hsn_details, is_inter):
                warnings.append(CalculationWarning(
                    code=WarningCode.TAX_RULE_MISSING,
                    message=f"No tax rule for product {item.product_id}",
                    product_id=item.product_id
                ))

            if item.is_out_of_stock:
                warnings.append(CalculationWarning(
                    code=WarningCode.OUT_OF_STOCK,
                    message=f"Product {item.product_id} is out of stock",
                    product_id=item.product_id
                ))

        for warning in warnings:
            logger.debug(f"Cart warning {warning.code.value}: {warning.message}")
            record_warning(warning.code.value)

        return warnings

    @staticmethod
    def _cash_discount_value(items: List[CartItem]):
        for item in items:
            if item.cashdiscount_value and item.cashdiscount_value > 0:
                return item.cashdiscount_value
        return ZERO

    @staticmethod
    def _coerce(product: Any) -> CartItem:
        if isinstance(product, CartItem):
            return product
        return CartItem.model_validate(product)


def calculate_cart(
    products: Iterable[ItemInput],
    is_inter: bool = True,
    tax_exemption: bool = False,
    calculation_settings: Optional[CalculationSettings] = None,
    options: Optional[CalculationOptions] = None
) -> CalculatedCartResult:
    """Shortcut for CartCalculator().calculate"""
    return CartCalculator().calculate(
        products, is_inter, tax_exemption, calculation_settings, options
    )
