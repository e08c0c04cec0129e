"""
Unit tests for storefront_pricing.services.cash_discount.
"""
from decimal import Decimal

import pytest

from storefront_pricing.core.exceptions import InvalidInputException
from storefront_pricing.services.cash_discount import CashDiscountApplier


@pytest.fixture
def applier():
    return CashDiscountApplier()


@pytest.fixture
def priced_items(make_item):
    return [
        make_item(productId=1, unitPrice="100"),
        make_item(productId=2, unitPrice="49.99", quantity=3),
        make_item(productId=3, unitPrice="0.35", quantity=7),
    ]


class TestApplyRemove:

    def test_round_trip_restores_unit_price(self, applier, priced_items):
        restored = applier.remove(applier.apply(applier.apply(priced_items, 5), 5))
        for before, after in zip(priced_items, restored):
            assert after.unit_price == before.unit_price
            assert after.cashdiscount_value == 0

    def test_snapshot_is_written_once(self, applier, make_item):
        applied = applier.apply([make_item(unitPrice="100")], 5)
        changed = [applied[0].model_copy(update={"unit_price": Decimal("95")})]
        again = applier.apply(changed, 5)
        assert again[0].original_unit_price == Decimal("100")
        assert applier.remove(again)[0].unit_price == Decimal("100")

    def test_remove_without_apply_is_noop(self, applier, priced_items):
        removed = applier.remove(priced_items)
        assert [i.unit_price for i in removed] == [i.unit_price for i in priced_items]

    def test_apply_does_not_touch_input(self, applier, priced_items):
        applier.apply(priced_items, 5)
        assert all(item.original_unit_price is None for item in priced_items)
        assert all(item.cashdiscount_value == 0 for item in priced_items)

    @pytest.mark.parametrize("value", [-1, "abc", None])
    def test_invalid_value(self, applier, priced_items, value):
        with pytest.raises(InvalidInputException):
            applier.apply(priced_items, value)


class TestPriceLine:

    def test_discount_taken_from_basic_price(self, applier, make_item):
        item = make_item(quantity=2, discountedPrice="90", cashdiscountValue=2)
        priced = applier.price_line(item)
        assert priced.unit_price == Decimal("88.20")
        assert priced.cash_discounted_price == Decimal("3.60")
        assert priced.original_unit_price == Decimal("90")

    def test_volume_price_is_the_base_when_present(self, applier, make_item):
        item = make_item(quantity=2, discountedPrice="90", unitVolumePrice="85.50", cashdiscountValue=2)
        priced = applier.price_line(item)
        assert priced.unit_price == Decimal("83.79")
        assert priced.cash_discounted_price == Decimal("3.42")

    def test_no_discount_resets_to_base(self, applier, make_item):
        item = make_item(discountedPrice="90", unitPrice="70")
        assert applier.price_line(item).unit_price == Decimal("90")

    def test_unpriced_line_untouched(self, applier, make_item):
        item = make_item(priceNotAvailable=True, unitPrice="0", cashdiscountValue=5)
        priced = applier.price_line(item)
        assert priced.unit_price == 0
        assert priced.cash_discounted_price == 0
