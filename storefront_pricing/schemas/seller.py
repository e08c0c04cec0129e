"""
Multi-seller cart schemas
"""

from pydantic import Field
from typing import Optional, List
from decimal import Decimal

from .base import BaseSchema, ZERO
from .cart import CartItem, CalculatedCartResult, ProductId
from .discount import PriceListDiscountData


class SellerInfo(BaseSchema):
    id: str
    seller_id: Optional[ProductId] = None
    name: str = "Unknown Seller"
    location: str = "Location not specified"


class SellerCart(BaseSchema):
    """Cart lines sold by one seller"""
    seller: SellerInfo
    items: List[CartItem] = Field(default_factory=list)
    item_count: int = 0
    total_quantity: Decimal = ZERO
    pricing: Optional[CalculatedCartResult] = None


class PricingMatch(BaseSchema):
    """Price-list record chosen for a cart line"""
    pricing: PriceListDiscountData
    pricing_source: str
    matched_seller_id: str


class OverallCartSummary(BaseSchema):
    total_sellers: int = 0
    total_items: int = 0
    total_value: Decimal = ZERO
    total_tax: Decimal = ZERO
    grand_total: Decimal = ZERO
