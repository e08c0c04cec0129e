"""Storefront pricing engine"""

from .schemas.cart import (
    CartItem,
    CartValue,
    CalculatedCartResult,
    CalculationOptions,
    CalculationSettings,
    CalculationWarning,
    WarningCode
)
from .services.cart_calculator import CartCalculator, calculate_cart
from .services.cash_discount import CashDiscountApplier
from .services.discount_resolver import DiscountResolver, get_suitable_discount_by_quantity
from .services.seller_cart import SellerCartService
from .services.tax_resolver import TaxResolver
from .services.volume_discount import VolumeDiscountCalculator

__version__ = "1.0.0"

__all__ = [
    "CartItem",
    "CartValue",
    "CalculatedCartResult",
    "CalculationOptions",
    "CalculationSettings",
    "CalculationWarning",
    "WarningCode",
    "CartCalculator",
    "calculate_cart",
    "CashDiscountApplier",
    "DiscountResolver",
    "get_suitable_discount_by_quantity",
    "SellerCartService",
    "TaxResolver",
    "VolumeDiscountCalculator"
]
