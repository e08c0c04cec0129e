"""Base schema shared by every pricing model"""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from decimal import Decimal

ZERO = Decimal("0")

class BaseSchema(BaseModel):
    """
    Base schema with common configuration

    Models are immutable; pipeline stages derive new ones with model_copy.
    Upstream payloads are camelCase, Python code uses snake_case; both validate.
    """

    class Config:
        frozen = True
        populate_by_name = True
        alias_generator = to_camel
        from_attributes = True
        extra = "ignore"
