"""
Bundle resolution
Collapses deselected bundle children out of the parent line's list price
"""

import logging
from typing import List

from storefront_pricing.schemas.base import ZERO
from storefront_pricing.schemas.cart import CartItem

logger = logging.getLogger(__name__)


class BundleResolver:
    """Adjusts bundle lines before they are priced"""

    def resolve(self, item: CartItem) -> CartItem:
        """
        Subtract every deselected child's list price from the bundle line

        The pre-bundle list price is kept in initial_unit_list_price so a
        recalculation starts from the full bundle again.
        """
        if not item.bundle_products:
            return item

        base_price = item.initial_unit_list_price
        if base_price is None:
            base_price = item.unit_list_price
        if base_price is None:
            return item

        deselected = sum(
            (bp.unit_list_price for bp in item.bundle_products if not bp.is_selected),
            ZERO
        )
        if deselected:
            logger.debug(f"Bundle {item.product_id}: {deselected} removed for deselected products")

        return item.model_copy(update={
            "initial_unit_list_price": base_price,
            "unit_list_price": base_price - deselected,
        })

    def resolve_all(self, items: List[CartItem]) -> List[CartItem]:
        return [self.resolve(item) for item in items]

    @staticmethod
    def count_selected(items: List[CartItem]) -> int:
        return sum(len(item.selected_bundle_products) for item in items)
