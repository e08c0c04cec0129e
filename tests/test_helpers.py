"""
Unit tests for money helpers and configuration.
"""
import logging
from decimal import Decimal

import pytest

from storefront_pricing.core import monitoring
from storefront_pricing.core.config import Settings, get_settings
from storefront_pricing.core.exceptions import InvalidPrecisionException
from storefront_pricing.core.monitoring import CalculationContext, setup_logging
from storefront_pricing.schemas.cart import CalculationOptions
from storefront_pricing.utils.helpers import (
    apply_percentage_discount,
    format_currency,
    round_money,
    to_decimal,
)


class TestRounding:

    @pytest.mark.parametrize("value,precision,expected", [
        ("2.675", 2, "2.68"),
        ("2.665", 2, "2.67"),
        ("-2.675", 2, "-2.68"),
        ("0.5", 0, "1"),
        (1.005, 2, "1.01"),
    ])
    def test_half_up(self, value, precision, expected):
        assert round_money(value, precision) == Decimal(expected)

    def test_negative_precision(self):
        with pytest.raises(InvalidPrecisionException):
            round_money(1, -2)

    def test_to_decimal_defaults(self):
        assert to_decimal(None) == 0
        assert to_decimal("nonsense", default=Decimal("7")) == 7
        assert to_decimal(0.1) == Decimal("0.1")

    def test_percentage_discount(self):
        assert apply_percentage_discount(Decimal("99.99"), 15) == Decimal("84.99")


class TestFormatCurrency:

    @pytest.mark.parametrize("amount,currency,expected", [
        (Decimal("100000"), "INR", "₹1,00,000.00"),
        (Decimal("1234567.5"), "INR", "₹12,34,567.50"),
        (Decimal("999"), "INR", "₹999.00"),
        (Decimal("-1500"), "INR", "-₹1,500.00"),
        (Decimal("1234.5"), "USD", "$1,234.50"),
        (Decimal("1234.5"), "JPY", "JPY 1,234.50"),
    ])
    def test_formats(self, amount, currency, expected):
        assert format_currency(amount, currency) == expected


class TestConfig:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("PRICING_PRECISION", raising=False)
        settings = Settings(_env_file=None)
        assert settings.PRICING_PRECISION == 2
        assert settings.MAX_ORDER_QUANTITY == Decimal("9999999")

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("ROUNDING_ADJUSTMENT", "true")
        assert Settings(_env_file=None).ROUNDING_ADJUSTMENT is True

    def test_cached(self):
        assert get_settings() is get_settings()


class TestMisc:

    def test_volume_lookup_by_any_id_form(self):
        options = CalculationOptions(volume_discounts={"12": 5, 7: 3})
        assert options.volume_discount_for(12) == 5
        assert options.volume_discount_for("7") == 3
        assert options.volume_discount_for(99) is None

    def test_production_logging_quiets_services(self, monkeypatch):
        services_logger = logging.getLogger("storefront_pricing.services")
        previous = services_logger.level
        monkeypatch.setattr(monitoring.settings, "ENVIRONMENT", "production")
        try:
            setup_logging("debug")
            assert services_logger.level == logging.INFO
        finally:
            services_logger.setLevel(previous)

    def test_calculation_context_propagates_errors(self):
        with pytest.raises(ValueError):
            with CalculationContext("failing"):
                raise ValueError("boom")
