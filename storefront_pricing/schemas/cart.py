"""
Cart schemas for calculation input and output
"""

from pydantic import Field
from typing import Optional, List, Dict, Any, Union
from decimal import Decimal
import enum

from storefront_pricing.core.config import settings
from .base import BaseSchema, ZERO
from .discount import DiscountRange, PriceListDiscountData
from .tax import HsnDetails

ProductId = Union[int, str]


class BundleProduct(BaseSchema):
    """Child product of a bundle line"""
    product_id: Optional[ProductId] = None
    unit_list_price: Decimal = ZERO
    bundle_selected: Optional[bool] = None
    is_bundle_selected_fe: Optional[bool] = Field(None, alias="isBundleSelected_fe")

    @property
    def is_selected(self) -> bool:
        """Selected only when both flags are true; a missing flag means deselected"""
        return bool(self.bundle_selected) and bool(self.is_bundle_selected_fe)


class InventoryResponse(BaseSchema):
    """Stock information attached by the inventory lookup"""
    in_stock: Optional[bool] = None
    available_quantity: Optional[Decimal] = None


class CartItem(BaseSchema):
    """One line of a cart, quote or order"""

    # Identity
    product_id: ProductId
    item_no: Optional[ProductId] = None
    line_no: Optional[ProductId] = None
    seller_id: Optional[ProductId] = None
    seller_name: Optional[str] = None
    seller_location: Optional[str] = None
    vendor_id: Optional[ProductId] = None
    vendor_name: Optional[str] = None
    vendor_location: Optional[str] = None

    # Quantity
    quantity: Decimal
    min_order_quantity: Optional[Decimal] = None
    packaging_quantity: Optional[Decimal] = None
    check_moq: bool = False

    # Pricing
    unit_list_price: Optional[Decimal] = None
    initial_unit_list_price: Optional[Decimal] = None
    unit_price: Optional[Decimal] = None
    original_unit_price: Optional[Decimal] = None
    discounted_price: Optional[Decimal] = None
    total_price: Decimal = ZERO
    total_lp: Decimal = Field(ZERO, alias="totalLP")
    list_price_public: Optional[bool] = None

    # Discount
    discount: Optional[Decimal] = None
    discount_percentage: Optional[Decimal] = None
    basic_discounted_price: Decimal = ZERO
    cashdiscount_value: Decimal = Field(ZERO, alias="cashdiscountValue")
    cash_discounted_price: Decimal = ZERO
    disc_prd_related_obj: Optional[PriceListDiscountData] = Field(None, alias="disc_prd_related_obj")
    discount_details: Optional[DiscountRange] = None
    next_suitable_discount: Optional[DiscountRange] = None
    cant_combine_with_other_discounts: Optional[bool] = Field(
        None, alias="CantCombineWithOtherDisCounts"
    )

    # Volume discount
    volume_discount: Decimal = ZERO
    applied_discount: Optional[Decimal] = None
    volume_discount_applied: bool = False
    unit_volume_price: Optional[Decimal] = None

    # Tax
    hsn_details: Optional[HsnDetails] = None
    hsn_code: Optional[ProductId] = None
    tax_inclusive: bool = False
    tax: Decimal = ZERO
    total_tax: Decimal = ZERO
    tax_breakup: Dict[str, Decimal] = Field(default_factory=dict)
    item_taxable_amount: Decimal = ZERO

    # Packaging/forwarding and shipping
    pf_item_value: Decimal = ZERO
    pf_rate: Decimal = ZERO
    shipping_charges: Decimal = ZERO
    shipping_total: Decimal = ZERO
    shipping_tax: Decimal = ZERO

    # Bundle
    bundle_products: List[BundleProduct] = Field(default_factory=list)

    # Availability
    price_not_available: bool = False
    show_price: Optional[bool] = None
    is_product_available_in_price_list: Optional[bool] = None
    inventory_response: Optional[InventoryResponse] = None
    replacement: bool = False

    @property
    def seller_key(self) -> str:
        """Grouping key for multi-seller carts"""
        key = self.seller_id or self.vendor_id
        return str(key) if key else "no-seller"

    @property
    def is_out_of_stock(self) -> bool:
        return self.inventory_response is not None and self.inventory_response.in_stock is False

    @property
    def selected_bundle_products(self) -> List[BundleProduct]:
        return [bp for bp in self.bundle_products if bp.is_selected]


class CalculationSettings(BaseSchema):
    """Per-call calculation switches; defaults come from the environment"""
    rounding_adjustment: bool = Field(default_factory=lambda: settings.ROUNDING_ADJUSTMENT)
    item_wise_shipping_tax: bool = Field(default_factory=lambda: settings.ITEM_WISE_SHIPPING_TAX)
    shipping_tax_percentage: Decimal = Field(default_factory=lambda: settings.SHIPPING_TAX_PERCENTAGE)
    precision: int = Field(default_factory=lambda: settings.PRICING_PRECISION)


class CalculationOptions(BaseSchema):
    """Optional pipeline stages and cart-level charges"""
    apply_volume_discount: bool = False
    volume_discounts: Dict[ProductId, Decimal] = Field(default_factory=dict)
    insurance_charges: Decimal = ZERO

    def volume_discount_for(self, product_id: Any) -> Optional[Decimal]:
        """Look up by product id whether the mapping is keyed by int or str"""
        candidates = [product_id, str(product_id)]
        if isinstance(product_id, str) and product_id.isdigit():
            candidates.append(int(product_id))
        for key in candidates:
            if key in self.volume_discounts:
                return self.volume_discounts[key]
        return None


class WarningCode(str, enum.Enum):
    """Data-completeness problems reported instead of raised"""
    PRICE_NOT_AVAILABLE = "price_not_available"
    OUT_OF_STOCK = "out_of_stock"
    TAX_RULE_MISSING = "tax_rule_missing"


class CalculationWarning(BaseSchema):
    code: WarningCode
    message: str
    product_id: Optional[ProductId] = None


class VolumeDiscountDetails(BaseSchema):
    """Cart-level outcome of applying volume discounts"""
    sub_total: Decimal = ZERO
    sub_total_volume: Decimal = ZERO
    volume_discount_applied: Decimal = ZERO
    overall_tax: Decimal = ZERO
    taxable_amount: Decimal = ZERO
    pf_rate: Decimal = ZERO
    total_shipping: Decimal = ZERO
    shipping_tax: Decimal = ZERO
    insurance_charges: Decimal = ZERO
    calculated_total: Decimal = ZERO
    rounding_adjustment: Decimal = ZERO
    grand_total: Decimal = ZERO
    tax_totals: Dict[str, Decimal] = Field(default_factory=dict)


class VolumeDiscountResult(BaseSchema):
    products: List[CartItem] = Field(default_factory=list)
    details: VolumeDiscountDetails = Field(default_factory=VolumeDiscountDetails)


class CartValue(BaseSchema):
    """Aggregated cart totals"""
    total_items: int = 0
    total_value: Decimal = ZERO
    total_tax: Decimal = ZERO
    taxable_amount: Decimal = ZERO
    calculated_total: Decimal = ZERO
    rounding_adjustment: Decimal = ZERO
    grand_total: Decimal = ZERO
    total_shipping: Decimal = ZERO
    shipping_tax: Decimal = ZERO
    pf_rate: Decimal = ZERO
    insurance_charges: Decimal = ZERO
    total_lp: Decimal = Field(ZERO, alias="totalLP")
    total_basic_discount: Decimal = ZERO
    total_cash_discount: Decimal = ZERO
    cash_discount_value: Decimal = ZERO
    hide_list_price_public: bool = False
    has_products_with_negative_total_price: bool = False
    has_all_products_available_in_price_list: bool = True
    tax_totals: Dict[str, Decimal] = Field(default_factory=dict)


class CalculationMetadata(BaseSchema):
    total_products: int = 0
    total_bundle_products: int = 0
    is_inter: bool = True
    tax_exemption: bool = False
    precision: int = 2
    volume_discount_applied: bool = False
    volume_discount_details: Optional[VolumeDiscountDetails] = None


class CalculatedCartResult(BaseSchema):
    """Everything a display component or submission builder needs"""
    products: List[CartItem] = Field(default_factory=list)
    cart_value: CartValue = Field(default_factory=CartValue)
    metadata: CalculationMetadata = Field(default_factory=CalculationMetadata)
    warnings: List[CalculationWarning] = Field(default_factory=list)
