"""
Line pricing and cart totals
Shared by the cart calculator and the volume discount calculator
"""

import logging
from pydantic import Field
from typing import Dict, List, Optional
from decimal import Decimal

from storefront_pricing.core.exceptions import InvalidQuantityException
from storefront_pricing.schemas.base import BaseSchema, ZERO
from storefront_pricing.schemas.cart import CartItem, CalculationSettings
from storefront_pricing.services.tax_resolver import TaxResolver
from storefront_pricing.utils.helpers import round_money, percentage_of, HUNDRED

logger = logging.getLogger(__name__)


class LineTotals(BaseSchema):
    """Sums over priced lines plus cart-level charges"""
    total_value: Decimal = ZERO
    line_tax: Decimal = ZERO
    pf_rate: Decimal = ZERO
    total_shipping: Decimal = ZERO
    shipping_tax: Decimal = ZERO
    total_tax: Decimal = ZERO
    taxable_amount: Decimal = ZERO
    insurance_charges: Decimal = ZERO
    calculated_total: Decimal = ZERO
    grand_total: Decimal = ZERO
    rounding_adjustment: Decimal = ZERO
    tax_totals: Dict[str, Decimal] = Field(default_factory=dict)


class LinePricer:
    """
    Prices one cart line from its current unit price

    The incoming unit price is the final pre-tax price for tax-exclusive
    lines and the tax-inclusive price otherwise. Computes line total,
    packaging/forwarding, shipping and tax.
    """

    def __init__(
        self,
        calculation_settings: CalculationSettings,
        tax_resolver: Optional[TaxResolver] = None
    ):
        self.settings = calculation_settings
        self.precision = calculation_settings.precision
        self.tax_resolver = tax_resolver or TaxResolver(precision=self.precision)

    def price(self, item: CartItem, is_inter: bool = True, tax_exemption: bool = False) -> CartItem:
        if item.quantity <= 0:
            raise InvalidQuantityException(item.quantity, item.product_id)

        if item.price_not_available:
            return item.model_copy(update={
                "unit_price": ZERO,
                "total_price": ZERO,
                "pf_rate": ZERO,
                "shipping_total": ZERO,
                "shipping_tax": ZERO,
                "tax": ZERO,
                "total_tax": ZERO,
                "tax_breakup": {},
                "item_taxable_amount": ZERO,
            })

        p = self.precision
        quantity = item.quantity
        unit_price = item.unit_price or ZERO
        tax_rate = self.tax_resolver.tax_rate(item.hsn_details, is_inter, tax_exemption)
        shipping_total = round_money(item.shipping_charges * quantity, p)

        if item.tax_inclusive:
            goods_tax = self.tax_resolver.resolve(
                item.hsn_details, unit_price * quantity, is_inter, tax_exemption, tax_inclusive=True
            )
            total_price = goods_tax.taxable_amount
            net_unit_price = round_money(unit_price / (1 + tax_rate / HUNDRED), p)
        else:
            net_unit_price = round_money(unit_price, p)
            total_price = round_money(net_unit_price * quantity, p)
            goods_tax = None

        pf_rate = round_money(percentage_of(total_price, item.pf_item_value), p)

        if goods_tax is None:
            goods_tax = self.tax_resolver.resolve(
                item.hsn_details, total_price + pf_rate, is_inter, tax_exemption
            )
        elif pf_rate:
            goods_tax = goods_tax.combine(
                self.tax_resolver.resolve(item.hsn_details, pf_rate, is_inter, tax_exemption)
            )

        tax_result = goods_tax
        shipping_tax = ZERO
        item_taxable_amount = net_unit_price + pf_rate / quantity
        if self.settings.item_wise_shipping_tax and shipping_total:
            shipping_result = self.tax_resolver.resolve(
                item.hsn_details, shipping_total, is_inter, tax_exemption
            )
            shipping_tax = shipping_result.total_tax
            tax_result = tax_result.combine(shipping_result)
            item_taxable_amount += item.shipping_charges

        hsn_code = item.hsn_code
        if item.hsn_details is not None and item.hsn_details.hsn_code is not None:
            hsn_code = item.hsn_details.hsn_code

        return item.model_copy(update={
            "unit_price": net_unit_price,
            "total_price": total_price,
            "pf_rate": pf_rate,
            "shipping_total": shipping_total,
            "shipping_tax": shipping_tax,
            "tax": tax_rate,
            "total_tax": tax_result.total_tax,
            "tax_breakup": tax_result.tax_breakup,
            "item_taxable_amount": round_money(item_taxable_amount, p),
            "hsn_code": hsn_code,
        })

    def summarize(self, items: List[CartItem], insurance_charges: Decimal = ZERO) -> LineTotals:
        """Aggregate priced lines into cart totals and reconcile rounding"""
        p = self.precision
        total_value = ZERO
        line_tax = ZERO
        pf_rate = ZERO
        total_shipping = ZERO
        line_shipping_tax = ZERO
        tax_totals: Dict[str, Decimal] = {}

        for item in items:
            total_value += item.total_price
            line_tax += item.total_tax
            pf_rate += item.pf_rate
            total_shipping += item.shipping_total
            line_shipping_tax += item.shipping_tax
            for name, amount in item.tax_breakup.items():
                tax_totals[name] = tax_totals.get(name, ZERO) + amount

        # shipping not taxed per line is taxed once at the cart-level rate
        cart_shipping_tax = ZERO
        if not self.settings.item_wise_shipping_tax and total_shipping:
            cart_shipping_tax = round_money(
                percentage_of(total_shipping, self.settings.shipping_tax_percentage), p
            )

        total_tax = line_tax + cart_shipping_tax
        insurance = round_money(insurance_charges, p)
        taxable_amount = total_value + pf_rate
        if self.settings.item_wise_shipping_tax:
            taxable_amount += total_shipping

        calculated_total = total_value + total_tax + pf_rate + total_shipping + insurance
        grand_total, adjustment = reconcile_rounding(calculated_total, self.settings)

        return LineTotals(
            total_value=total_value,
            line_tax=line_tax,
            pf_rate=pf_rate,
            total_shipping=total_shipping,
            shipping_tax=line_shipping_tax + cart_shipping_tax,
            total_tax=total_tax,
            taxable_amount=taxable_amount,
            insurance_charges=insurance,
            calculated_total=calculated_total,
            grand_total=grand_total,
            rounding_adjustment=adjustment,
            tax_totals=tax_totals,
        )


def reconcile_rounding(calculated_total: Decimal, calculation_settings: CalculationSettings):
    """
    Round the grand total and report the difference

    With rounding adjustment on, the grand total is rounded to a whole
    currency unit; otherwise it stays at the configured precision.

    Returns:
        (grand_total, rounding_adjustment) where
        grand_total == calculated_total + rounding_adjustment
    """
    calculated = round_money(calculated_total, calculation_settings.precision)
    if calculation_settings.rounding_adjustment:
        grand_total = round_money(calculated, 0)
    else:
        grand_total = calculated
    return grand_total, grand_total - calculated
