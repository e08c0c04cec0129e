"""
Tax schemas: HSN rules and resolved tax amounts
"""

from pydantic import Field
from typing import Optional, List, Dict, Union
from decimal import Decimal

from .base import BaseSchema, ZERO


class TaxRequirement(BaseSchema):
    """Single tax in a rule set, e.g. IGST 18%"""
    tax_name: str
    rate: Decimal = ZERO
    compound: bool = False


class TaxRule(BaseSchema):
    """Tax rule set for one jurisdiction branch"""
    total_tax: Optional[Decimal] = None
    tax_req_ls: List[TaxRequirement] = Field(default_factory=list)

    @property
    def total_rate(self) -> Decimal:
        return sum((tax.rate for tax in self.tax_req_ls), ZERO)


class HsnDetails(BaseSchema):
    """HSN classification with inter- and intra-state rule sets"""
    hsn_code: Optional[Union[str, int]] = None
    tax: Optional[Decimal] = None
    inter_tax: Optional[TaxRule] = None
    intra_tax: Optional[TaxRule] = None

    def rule_for(self, is_inter: bool) -> Optional[TaxRule]:
        return self.inter_tax if is_inter else self.intra_tax


class TaxResult(BaseSchema):
    """Resolved tax for one taxable amount"""
    total_tax: Decimal = ZERO
    tax_breakup: Dict[str, Decimal] = Field(default_factory=dict)
    taxable_amount: Decimal = ZERO
    tax_rate: Decimal = ZERO

    def combine(self, other: "TaxResult") -> "TaxResult":
        """Add another result on top of this one, merging the breakup by tax name"""
        breakup = dict(self.tax_breakup)
        for name, amount in other.tax_breakup.items():
            breakup[name] = breakup.get(name, ZERO) + amount
        return TaxResult(
            total_tax=self.total_tax + other.total_tax,
            tax_breakup=breakup,
            taxable_amount=self.taxable_amount + other.taxable_amount,
            tax_rate=self.tax_rate or other.tax_rate,
        )
