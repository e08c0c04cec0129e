"""
Tax resolution service
Turns HSN tax rules into per-line tax amounts
"""

import logging
from typing import Any, Dict, Optional
from decimal import Decimal

from storefront_pricing.core.config import settings
from storefront_pricing.schemas.base import ZERO
from storefront_pricing.schemas.tax import HsnDetails, TaxResult, TaxRule
from storefront_pricing.utils.helpers import to_decimal, round_money, percentage_of, quantum, HUNDRED

logger = logging.getLogger(__name__)


class TaxResolver:
    """
    Resolves tax for a taxable amount from HSN details

    Inter-state sales use the interTax rule set, intra-state sales the
    intraTax one. Taxes are applied in the order they are listed:
    non-compound taxes on the taxable base, compound taxes on the base
    plus the compound taxes applied before them.
    """

    def __init__(self, precision: Optional[int] = None):
        self.precision = settings.PRICING_PRECISION if precision is None else precision
        quantum(self.precision)

    def resolve(
        self,
        hsn_details: Optional[HsnDetails],
        taxable_amount: Any,
        is_inter: bool = True,
        tax_exemption: bool = False,
        tax_inclusive: bool = False
    ) -> TaxResult:
        """
        Resolve tax for an amount

        Args:
            hsn_details: HSN record of the product (None means no rule)
            taxable_amount: Amount to tax; tax-inclusive amounts include the tax
            is_inter: Inter-state sale
            tax_exemption: Buyer is tax exempt
            tax_inclusive: Amount already contains the tax

        Returns:
            Total tax, per-tax-name breakup and the tax-exclusive base
        """
        amount = to_decimal(taxable_amount)
        rule = hsn_details.rule_for(is_inter) if hsn_details else None

        if tax_exemption or not self.has_rule(hsn_details, is_inter):
            return TaxResult(
                total_tax=ZERO,
                tax_breakup={},
                taxable_amount=round_money(amount, self.precision),
                tax_rate=ZERO
            )

        if tax_inclusive:
            return self._extract(rule, amount)
        return self._apply(rule, amount)

    @staticmethod
    def has_rule(hsn_details: Optional[HsnDetails], is_inter: bool) -> bool:
        if hsn_details is None:
            return False
        rule = hsn_details.rule_for(is_inter)
        return rule is not None and bool(rule.tax_req_ls)

    @staticmethod
    def tax_rate(
        hsn_details: Optional[HsnDetails],
        is_inter: bool = True,
        tax_exemption: bool = False
    ) -> Decimal:
        """Sum of the rates of the active rule set, in percent"""
        if tax_exemption or hsn_details is None:
            return ZERO
        rule = hsn_details.rule_for(is_inter)
        return rule.total_rate if rule is not None else ZERO

    def _apply(self, rule: TaxRule, base: Decimal) -> TaxResult:
        breakup: Dict[str, Decimal] = {}
        total = ZERO
        compound_running = ZERO

        for tax in rule.tax_req_ls:
            if tax.compound:
                value = round_money(percentage_of(base + compound_running, tax.rate), self.precision)
                compound_running += value
            else:
                value = round_money(percentage_of(base, tax.rate), self.precision)
            breakup[tax.tax_name] = breakup.get(tax.tax_name, ZERO) + value
            total += value

        return TaxResult(
            total_tax=total,
            tax_breakup=breakup,
            taxable_amount=round_money(base, self.precision),
            tax_rate=rule.total_rate
        )

    def _extract(self, rule: TaxRule, gross: Decimal) -> TaxResult:
        """Back the tax out of a tax-inclusive amount"""
        rate = rule.total_rate
        if rate <= 0:
            return TaxResult(
                total_tax=ZERO,
                tax_breakup={tax.tax_name: ZERO for tax in rule.tax_req_ls},
                taxable_amount=round_money(gross, self.precision),
                tax_rate=rate
            )

        total_tax = round_money(gross - gross / (1 + rate / HUNDRED), self.precision)

        # split in proportion to rates; the last tax absorbs the rounding remainder
        breakup: Dict[str, Decimal] = {}
        allocated = ZERO
        last_index = len(rule.tax_req_ls) - 1
        for index, tax in enumerate(rule.tax_req_ls):
            if index == last_index:
                share = total_tax - allocated
            else:
                share = round_money(total_tax * tax.rate / rate, self.precision)
            breakup[tax.tax_name] = breakup.get(tax.tax_name, ZERO) + share
            allocated += share

        return TaxResult(
            total_tax=total_tax,
            tax_breakup=breakup,
            taxable_amount=round_money(gross, self.precision) - total_tax,
            tax_rate=rate
        )
