"""
Unit tests for storefront_pricing.services.discount_resolver.

Covers tier selection, next-tier lookahead, gaps, overlaps and the
price-list driven basic discount stage.
"""
from decimal import Decimal

import pytest

from storefront_pricing.core.exceptions import (
    EmptyDiscountRangesException,
    InvalidInputException,
    InvalidQuantityException,
)
from storefront_pricing.services.discount_resolver import (
    DiscountResolver,
    get_suitable_discount_by_quantity,
)

TIERS = [
    {"min_qty": 1, "max_qty": 10, "Value": 5},
    {"min_qty": 11, "max_qty": 50, "Value": 10},
]
GAPPED = [
    {"min_qty": 1, "max_qty": 10, "Value": 5},
    {"min_qty": 51, "max_qty": 100, "Value": 15},
]


@pytest.fixture
def resolver():
    return DiscountResolver()


class TestResolve:
    """Tier selection for a quantity."""

    @pytest.mark.parametrize("q1,q2", [(1, 10), (2, 7), (11, 50), (12, 49)])
    def test_same_range_gives_same_discount(self, resolver, q1, q2):
        first = resolver.resolve(q1, TIERS).suitable_discount
        second = resolver.resolve(q2, TIERS).suitable_discount
        assert first == second

    def test_next_tier_lookahead(self, resolver):
        result = resolver.resolve(8, TIERS)
        assert result.suitable_discount.value == 5
        assert result.next_suitable_discount.min_qty == 11
        assert result.quantity_to_next_tier(Decimal("8")) == 3

    def test_gap_has_no_discount(self, resolver):
        result = resolver.resolve(25, GAPPED)
        assert result.suitable_discount is None
        assert result.discount_percentage == 0
        assert result.next_suitable_discount.min_qty == 51

    def test_top_tier_has_no_next(self, resolver):
        result = resolver.resolve(30, TIERS)
        assert result.suitable_discount.value == 10
        assert result.next_suitable_discount is None

    def test_overlap_picks_highest_value(self, resolver):
        ranges = [
            {"min_qty": 1, "max_qty": 100, "Value": 5},
            {"min_qty": 10, "max_qty": 20, "Value": 12},
            {"min_qty": 15, "max_qty": 30, "Value": 8},
        ]
        assert resolver.resolve(16, ranges).suitable_discount.value == 12

    def test_equal_values_first_encountered_wins(self, resolver):
        ranges = [
            {"min_qty": 5, "max_qty": 20, "Value": 10, "DiscountId": "late-start"},
            {"min_qty": 1, "max_qty": 20, "Value": 10, "DiscountId": "early-start"},
        ]
        assert resolver.resolve(10, ranges).suitable_discount.discount_id == "late-start"

    def test_next_tier_is_smallest_min_qty_not_first(self, resolver):
        ranges = [
            {"min_qty": 1, "max_qty": 5, "Value": 2},
            {"min_qty": 50, "max_qty": 100, "Value": 20},
            {"min_qty": 10, "max_qty": 49, "Value": 10},
        ]
        assert resolver.resolve(3, ranges).next_suitable_discount.min_qty == 10

    def test_fractional_quantity(self, resolver):
        result = resolver.resolve("10.5", TIERS)
        assert result.suitable_discount is None
        assert result.next_suitable_discount.min_qty == 11

    def test_shortcut_function(self):
        assert get_suitable_discount_by_quantity(12, TIERS).suitable_discount.value == 10


class TestResolveErrors:
    """Precondition failures raise."""

    @pytest.mark.parametrize("quantity", [0, -1, "-0.5", None, "abc"])
    def test_non_positive_quantity(self, resolver, quantity):
        with pytest.raises(InvalidQuantityException) as exc_info:
            resolver.resolve(quantity, TIERS)
        assert exc_info.value.error_code == "INVALID_QUANTITY"

    def test_empty_ranges(self, resolver):
        with pytest.raises(EmptyDiscountRangesException):
            resolver.resolve(5, [])

    def test_errors_share_invalid_input_base(self, resolver):
        with pytest.raises(InvalidInputException):
            resolver.resolve(5, None)


class TestBasicDiscount:
    """apply_price_list followed by apply_basic_discount."""

    def test_range_discount_on_list_price(self, resolver, make_item):
        item = make_item(quantity=2, disc_prd_related_obj={"discounts": TIERS})
        priced = resolver.apply_basic_discount(resolver.apply_price_list(item))

        assert priced.discount_percentage == 5
        assert priced.unit_price == Decimal("95.00")
        assert priced.discounted_price == Decimal("95.00")
        assert priced.discount == Decimal("5.00")
        assert priced.total_lp == Decimal("200.00")
        assert priced.basic_discounted_price == Decimal("10.00")
        assert priced.next_suitable_discount.min_qty == 11

    def test_master_price_override_adds_to_range(self, resolver, make_item):
        item = make_item(
            quantity=1,
            disc_prd_related_obj={
                "MasterPrice": 200,
                "BasePrice": 180,
                "isOveridePricelist": False,
                "discounts": [{"min_qty": 1, "max_qty": 10, "Value": 5}],
            },
        )
        priced = resolver.apply_basic_discount(resolver.apply_price_list(item))

        assert priced.unit_list_price == 200
        assert priced.discount_percentage == 15
        assert priced.unit_price == Decimal("170.00")

    def test_base_price_without_override(self, resolver, make_item):
        item = make_item(disc_prd_related_obj={"BasePrice": 80, "isOveridePricelist": True})
        priced = resolver.apply_basic_discount(resolver.apply_price_list(item))

        assert priced.unit_list_price == 80
        assert priced.discount_percentage == 0
        assert priced.unit_price == Decimal("80.00")

    def test_not_in_price_list_is_unpriced(self, resolver, make_item):
        item = make_item(disc_prd_related_obj={"BasePrice": 80, "isProductAvailableInPriceList": False})
        priced = resolver.apply_basic_discount(resolver.apply_price_list(item))

        assert priced.price_not_available is True
        assert priced.unit_price == 0
        assert priced.is_product_available_in_price_list is False

    def test_hidden_price_is_unpriced(self, resolver, make_item):
        priced = resolver.apply_basic_discount(make_item(showPrice=False))
        assert priced.price_not_available is True
        assert priced.total_lp == 0

    def test_no_price_at_all_is_unpriced(self, resolver, make_item):
        priced = resolver.apply_basic_discount(make_item(unitListPrice=None))
        assert priced.price_not_available is True

    def test_check_moq_flag(self, resolver, make_item):
        priced = resolver.apply_basic_discount(make_item(quantity=2, minOrderQuantity=5))
        assert priced.check_moq is True

    def test_cant_combine_flag_copied_from_tier(self, resolver, make_item):
        item = make_item(disc_prd_related_obj={"discounts": [
            {"min_qty": 1, "max_qty": 10, "Value": 5, "CantCombineWithOtherDisCounts": True},
        ]})
        priced = resolver.apply_basic_discount(item)
        assert priced.cant_combine_with_other_discounts is True

    def test_input_item_is_not_modified(self, resolver, make_item):
        item = make_item(disc_prd_related_obj={"discounts": TIERS})
        resolver.apply_basic_discount(item)
        assert item.unit_price is None
        assert item.discount_percentage is None
