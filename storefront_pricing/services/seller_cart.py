"""
Multi-seller cart service
Splits a cart per seller and prices each seller's cart independently
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from storefront_pricing.schemas.base import ZERO
from storefront_pricing.schemas.cart import (
    CartItem,
    CalculationOptions,
    CalculationSettings
)
from storefront_pricing.schemas.discount import PriceListDiscountData
from storefront_pricing.schemas.seller import (
    SellerInfo,
    SellerCart,
    PricingMatch,
    OverallCartSummary
)
from storefront_pricing.services.cart_calculator import CartCalculator

logger = logging.getLogger(__name__)

NO_SELLER_PRICING = "no-seller-id"


class SellerCartService:
    """Seller grouping, per-seller pricing and the combined summary"""

    def __init__(self, calculator: Optional[CartCalculator] = None):
        self.calculator = calculator or CartCalculator()

    def group_by_seller(self, items: Iterable[Any]) -> Dict[str, SellerCart]:
        """
        Group cart lines by seller id, then vendor id

        Lines with neither land under "no-seller". Seller details come
        from the first line of each group. Groups keep first-seen order.
        """
        groups: Dict[str, List[CartItem]] = {}
        for item in items or []:
            line = item if isinstance(item, CartItem) else CartItem.model_validate(item)
            groups.setdefault(line.seller_key, []).append(line)

        seller_carts = {}
        for key, lines in groups.items():
            first = lines[0]
            seller = SellerInfo(
                id=key,
                seller_id=first.seller_id,
                name=first.seller_name or first.vendor_name or "Unknown Seller",
                location=first.seller_location or first.vendor_location or "Location not specified",
            )
            seller_carts[key] = SellerCart(
                seller=seller,
                items=lines,
                item_count=len(lines),
                total_quantity=sum((line.quantity for line in lines), ZERO),
            )

        logger.debug(f"Grouped cart into {len(seller_carts)} seller carts")
        return seller_carts

    def calculate_all(
        self,
        seller_carts: Mapping[str, SellerCart],
        is_inter: bool = True,
        tax_exemption: bool = False,
        calculation_settings: Optional[CalculationSettings] = None,
        options: Optional[CalculationOptions] = None,
        seller_options: Optional[Mapping[str, CalculationOptions]] = None
    ) -> Dict[str, SellerCart]:
        """
        Price every seller cart on its own

        Args:
            seller_carts: Output of group_by_seller
            is_inter: Inter-state sale
            tax_exemption: Buyer is tax exempt
            calculation_settings: Shared calculation switches
            options: Options used for sellers without their own entry
            seller_options: Per-seller options (volume discounts, insurance)

        Returns:
            Seller carts with pricing filled in and items replaced by the priced lines
        """
        seller_options = seller_options or {}
        priced = {}

        for key, seller_cart in seller_carts.items():
            result = self.calculator.calculate(
                seller_cart.items,
                is_inter,
                tax_exemption,
                calculation_settings,
                seller_options.get(key, options)
            )
            priced[key] = seller_cart.model_copy(update={
                "items": result.products,
                "pricing": result,
            })

        return priced

    def overall_summary(self, seller_carts: Mapping[str, SellerCart]) -> OverallCartSummary:
        """Totals across priced seller carts; unpriced carts count as sellers only"""
        summary = OverallCartSummary(total_sellers=len(seller_carts))
        total_items = 0
        total_value = ZERO
        total_tax = ZERO
        grand_total = ZERO

        for seller_cart in seller_carts.values():
            if seller_cart.pricing is None:
                continue
            cart_value = seller_cart.pricing.cart_value
            total_items += cart_value.total_items
            total_value += cart_value.total_value
            total_tax += cart_value.total_tax
            grand_total += cart_value.grand_total

        return summary.model_copy(update={
            "total_items": total_items,
            "total_value": total_value,
            "total_tax": total_tax,
            "grand_total": grand_total,
        })

    @staticmethod
    def find_best_pricing_match(
        item: CartItem,
        seller_pricing: Mapping[str, List[Any]]
    ) -> Optional[PricingMatch]:
        """
        Pick the price-list record for a line

        Seller-specific records (by seller id, then vendor id) win over the
        shared "no-seller-id" records. Records match on ProductVariantId.
        """
        identifiers = [str(i) for i in (item.seller_id, item.vendor_id) if i]

        for identifier in identifiers:
            record = _find_record(seller_pricing.get(identifier), item.product_id)
            if record is not None:
                return PricingMatch(
                    pricing=record,
                    pricing_source="seller-specific",
                    matched_seller_id=identifier
                )

        record = _find_record(seller_pricing.get(NO_SELLER_PRICING), item.product_id)
        if record is not None:
            return PricingMatch(
                pricing=record,
                pricing_source=NO_SELLER_PRICING,
                matched_seller_id=NO_SELLER_PRICING
            )
        return None

    def attach_pricing(
        self,
        seller_carts: Mapping[str, SellerCart],
        seller_pricing: Mapping[str, List[Any]]
    ) -> Dict[str, SellerCart]:
        """Attach the best price-list record to every line that has one"""
        updated = {}
        for key, seller_cart in seller_carts.items():
            items = []
            for item in seller_cart.items:
                match = self.find_best_pricing_match(item, seller_pricing)
                if match is None:
                    logger.debug(f"No price-list record for product {item.product_id}")
                    items.append(item)
                else:
                    items.append(item.model_copy(update={"disc_prd_related_obj": match.pricing}))
            updated[key] = seller_cart.model_copy(update={"items": items})
        return updated


def _find_record(records: Optional[List[Any]], product_id: Any) -> Optional[PriceListDiscountData]:
    for record in records or []:
        data = record if isinstance(record, PriceListDiscountData) else PriceListDiscountData.model_validate(record)
        if str(data.product_variant_id) == str(product_id):
            return data
    return None
