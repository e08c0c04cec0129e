"""
Discount schemas: quantity ranges and price-list data
"""

from pydantic import Field
from typing import Optional, List, Union
from decimal import Decimal

from .base import BaseSchema, ZERO


class DiscountRange(BaseSchema):
    """One quantity tier of a price-list discount"""
    min_qty: Decimal = Field(..., alias="min_qty")
    max_qty: Decimal = Field(..., alias="max_qty")
    value: Decimal = Field(ZERO, alias="Value", description="Discount percentage")
    cant_combine_with_other_discounts: Optional[bool] = Field(
        None, alias="CantCombineWithOtherDisCounts"
    )
    pricing_condition_code: Optional[str] = None
    discount_id: Optional[str] = Field(None, alias="DiscountId")

    def covers(self, quantity: Decimal) -> bool:
        return self.min_qty <= quantity <= self.max_qty


class PriceListDiscountData(BaseSchema):
    """Raw price-list record attached to a cart line (disc_prd_related_obj)"""
    product_variant_id: Optional[Union[int, str]] = Field(None, alias="ProductVariantId")
    master_price: Optional[Decimal] = Field(None, alias="MasterPrice")
    base_price: Optional[Decimal] = Field(None, alias="BasePrice")
    discounts: List[DiscountRange] = Field(default_factory=list)
    is_override_pricelist: Optional[bool] = Field(None, alias="isOveridePricelist")
    is_product_available_in_price_list: Optional[bool] = None
    price_list_code: Optional[str] = None
    pln_erp_code: Optional[str] = None
    pricing_condition_code: Optional[str] = None

    @property
    def override_discount(self) -> Decimal:
        """Percentage between master and base price"""
        if not self.master_price or self.base_price is None:
            return ZERO
        return (self.master_price - self.base_price) / self.master_price * Decimal("100")


class DiscountResolution(BaseSchema):
    """Outcome of resolving a quantity against discount tiers"""
    suitable_discount: Optional[DiscountRange] = None
    next_suitable_discount: Optional[DiscountRange] = None

    @property
    def discount_percentage(self) -> Decimal:
        if self.suitable_discount is None:
            return ZERO
        return self.suitable_discount.value

    def quantity_to_next_tier(self, quantity: Decimal) -> Optional[Decimal]:
        """How many more units unlock the next tier"""
        if self.next_suitable_discount is None:
            return None
        return self.next_suitable_discount.min_qty - quantity
