"""
Checkout validation
Pre-submission checks for quotes and orders, reported rather than raised
"""

import logging
from typing import Any, Iterable, List, Optional

from storefront_pricing.schemas.cart import CartItem, CartValue
from storefront_pricing.schemas.validation import ValidationResult, ErrorVariant
from storefront_pricing.utils.helpers import to_decimal, format_currency, round_money
from storefront_pricing.utils.validators import validate_quantity

logger = logging.getLogger(__name__)

NEGATIVE_VALUE_MESSAGE = "Cart contains items with negative prices. Please remove them to proceed."
REPLACEMENT_MESSAGE = "Few products are unavailable, try replacing items"
UNKNOWN_PRICE_MESSAGE = "Cart contains product(s) with price(s) unknown, ask for quote instead"
OUT_OF_STOCK_MESSAGE = "Remove out of stock product(s) to place order"

__all__ = [
    "validate_quantity",
    "has_replacement_products",
    "has_out_of_stock_products",
    "has_all_prices",
    "check_minimum_value",
    "validate_request_quote",
    "validate_create_order",
]


def _lines(products: Iterable[Any]) -> List[CartItem]:
    return [p if isinstance(p, CartItem) else CartItem.model_validate(p) for p in products or []]


def _failure(message: str, variant: ErrorVariant = ErrorVariant.INFO) -> ValidationResult:
    logger.debug(f"Checkout validation failed: {message}")
    return ValidationResult(is_valid=False, error_message=message, error_variant=variant)


def has_replacement_products(products: Iterable[Any]) -> bool:
    return any(item.replacement for item in _lines(products))


def has_out_of_stock_products(products: Iterable[Any], future_stock: bool = False) -> bool:
    """Out-of-stock lines block an order unless future stock is allowed"""
    if future_stock:
        return False
    return any(item.is_out_of_stock for item in _lines(products))


def has_all_prices(products: Iterable[Any]) -> bool:
    return not any(item.show_price is False for item in _lines(products))


def check_minimum_value(
    minimum_value: Any,
    enabled: bool,
    cart_total: Any,
    currency: Optional[str] = None,
    is_order: bool = True
) -> ValidationResult:
    """
    Check the cart total against a minimum order or quote value

    Nothing is checked when the rule is disabled or either value is
    missing or zero.
    """
    minimum = to_decimal(minimum_value)
    total = to_decimal(cart_total)
    if not enabled or not minimum or not total:
        return ValidationResult()

    if minimum > total:
        value_type = "order" if is_order else "quote"
        formatted = format_currency(minimum, currency) if currency else str(round_money(minimum, 2))
        return _failure(f"Minimum {value_type} value {formatted}")

    return ValidationResult()


def validate_request_quote(
    products: Iterable[Any],
    cart_value: Optional[CartValue] = None,
    minimum_quote_value: Any = None,
    min_quote_value_enabled: bool = False,
    currency: Optional[str] = None
) -> ValidationResult:
    """
    Checks run before a quote request, first failure wins

    Order: negative line totals, replacement products, minimum quote value.
    """
    lines = _lines(products)

    if cart_value is not None and cart_value.has_products_with_negative_total_price:
        return _failure(NEGATIVE_VALUE_MESSAGE)

    if has_replacement_products(lines):
        return _failure(REPLACEMENT_MESSAGE)

    return check_minimum_value(
        minimum_quote_value,
        min_quote_value_enabled,
        cart_value.grand_total if cart_value is not None else None,
        currency,
        is_order=False
    )


def validate_create_order(
    products: Iterable[Any],
    cart_value: Optional[CartValue] = None,
    minimum_order_value: Any = None,
    min_order_value_enabled: bool = False,
    currency: Optional[str] = None,
    future_stock: bool = False
) -> ValidationResult:
    """
    Checks run before placing an order, first failure wins

    Order: negative line totals, replacement products, unknown prices,
    out-of-stock lines, minimum order value.
    """
    lines = _lines(products)

    if cart_value is not None and cart_value.has_products_with_negative_total_price:
        return _failure(NEGATIVE_VALUE_MESSAGE)

    if has_replacement_products(lines):
        return _failure(REPLACEMENT_MESSAGE)

    all_in_price_list = cart_value is None or cart_value.has_all_products_available_in_price_list
    if not has_all_prices(lines) or not all_in_price_list:
        return _failure(UNKNOWN_PRICE_MESSAGE)

    if has_out_of_stock_products(lines, future_stock):
        return _failure(OUT_OF_STOCK_MESSAGE)

    return check_minimum_value(
        minimum_order_value,
        min_order_value_enabled,
        cart_value.grand_total if cart_value is not None else None,
        currency,
        is_order=True
    )
