"""
Checkout validation schemas
"""

from typing import Optional
import enum

from .base import BaseSchema


class ErrorVariant(str, enum.Enum):
    INFO = "info"
    ERROR = "error"
    WARNING = "warning"
    SUCCESS = "success"


class ValidationResult(BaseSchema):
    """Outcome of a checkout check; failures carry a user-facing message"""
    is_valid: bool = True
    error_message: Optional[str] = None
    error_variant: Optional[ErrorVariant] = None
