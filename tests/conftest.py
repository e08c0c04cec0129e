"""Shared fixtures for the pricing tests."""
from decimal import Decimal

import pytest

from storefront_pricing.schemas.cart import CartItem, CalculationSettings
from storefront_pricing.schemas.tax import HsnDetails


@pytest.fixture
def calc_settings():
    """Explicit settings so tests do not depend on the environment."""
    return CalculationSettings(
        rounding_adjustment=False,
        item_wise_shipping_tax=False,
        shipping_tax_percentage=Decimal("0"),
        precision=2,
    )


@pytest.fixture
def igst_18():
    return HsnDetails.model_validate({
        "hsnCode": "8471",
        "interTax": {
            "totalTax": 18,
            "taxReqLs": [{"taxName": "IGST", "rate": 18, "compound": False}],
        },
        "intraTax": {
            "totalTax": 18,
            "taxReqLs": [
                {"taxName": "CGST", "rate": 9, "compound": False},
                {"taxName": "SGST", "rate": 9, "compound": False},
            ],
        },
    })


@pytest.fixture
def make_item():
    """Build a CartItem from camelCase keyword overrides."""
    def _make(**overrides):
        data = {"productId": 1, "quantity": 1, "unitListPrice": 100}
        data.update(overrides)
        return CartItem.model_validate(data)
    return _make
