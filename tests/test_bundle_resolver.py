"""
Unit tests for storefront_pricing.services.bundle_resolver.
"""
from decimal import Decimal

import pytest

from storefront_pricing.schemas.cart import BundleProduct
from storefront_pricing.services.bundle_resolver import BundleResolver


@pytest.fixture
def bundle_item(make_item):
    return make_item(
        unitListPrice=500,
        bundleProducts=[
            {"productId": 11, "unitListPrice": 100, "bundleSelected": False},
            {"productId": 12, "unitListPrice": 50, "bundleSelected": True, "isBundleSelected_fe": True},
            {"productId": 13, "unitListPrice": 30, "bundleSelected": True},
        ],
    )


class TestBundleSelection:

    @pytest.mark.parametrize("flags,expected", [
        ({"bundleSelected": True, "isBundleSelected_fe": True}, True),
        ({"bundleSelected": True}, False),
        ({"isBundleSelected_fe": True}, False),
        ({"bundleSelected": True, "isBundleSelected_fe": False}, False),
        ({"bundleSelected": False}, False),
        ({}, False),
    ])
    def test_is_selected(self, flags, expected):
        assert BundleProduct.model_validate(flags).is_selected is expected


class TestBundleResolver:

    def test_deselected_children_leave_the_price(self, bundle_item):
        resolved = BundleResolver().resolve(bundle_item)
        assert resolved.unit_list_price == Decimal("370")
        assert resolved.initial_unit_list_price == Decimal("500")

    def test_resolving_twice_is_stable(self, bundle_item):
        resolver = BundleResolver()
        twice = resolver.resolve(resolver.resolve(bundle_item))
        assert twice.unit_list_price == Decimal("370")

    def test_plain_line_unchanged(self, make_item):
        item = make_item()
        assert BundleResolver().resolve(item) is item

    def test_count_selected(self, bundle_item, make_item):
        assert BundleResolver.count_selected([bundle_item, make_item()]) == 1
