"""Services package"""

from .bundle_resolver import BundleResolver
from .cart_calculator import CartCalculator
from .cash_discount import CashDiscountApplier
from .discount_policy import DiscountPrecedencePolicy
from .discount_resolver import DiscountResolver
from .line_pricing import LinePricer
from .seller_cart import SellerCartService
from .tax_resolver import TaxResolver
from .volume_discount import VolumeDiscountCalculator

__all__ = [
    "BundleResolver",
    "CartCalculator",
    "CashDiscountApplier",
    "DiscountPrecedencePolicy",
    "DiscountResolver",
    "LinePricer",
    "SellerCartService",
    "TaxResolver",
    "VolumeDiscountCalculator"
]
