"""
Custom exception classes for the pricing engine
Precondition failures raise; data gaps become calculation warnings instead
"""

from typing import Any, Optional

class PricingException(Exception):
    """Base exception class for the pricing engine"""

    def __init__(self, detail: str, error_code: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        self.error_code = error_code

    def __str__(self) -> str:
        return self.detail

class InvalidInputException(PricingException):
    """Malformed or out-of-range calculation argument"""

    def __init__(self, detail: str, error_code: str = "INVALID_INPUT"):
        super().__init__(detail=detail, error_code=error_code)

class InvalidQuantityException(InvalidInputException):
    """Quantity must be strictly positive"""

    def __init__(self, quantity: Any, product_id: Any = None):
        if product_id is not None:
            detail = f"Quantity must be positive for product {product_id}, got {quantity}"
        else:
            detail = f"Quantity must be positive, got {quantity}"
        super().__init__(detail=detail, error_code="INVALID_QUANTITY")
        self.quantity = quantity
        self.product_id = product_id

class EmptyDiscountRangesException(InvalidInputException):
    """Discount resolution needs at least one range"""

    def __init__(self, detail: str = "Discount ranges must not be empty"):
        super().__init__(detail=detail, error_code="EMPTY_DISCOUNT_RANGES")

class InvalidPrecisionException(InvalidInputException):
    """Rounding precision must be zero or more decimal places"""

    def __init__(self, precision: Any):
        super().__init__(
            detail=f"Precision must be a non-negative integer, got {precision}",
            error_code="INVALID_PRECISION"
        )
        self.precision = precision
