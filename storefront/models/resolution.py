"""Variant resolution results"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from .product import Product, ProductVariant


class Pricing(BaseModel):
    """Prices to display for a product or resolved variant"""
    current_price: Decimal
    compare_at_price: Optional[Decimal] = None
    discount_percent: Optional[int] = None

    @property
    def on_sale(self) -> bool:
        return self.compare_at_price is not None


class ProductView(BaseModel):
    """Everything a product card needs to render the current selection"""
    product: Product
    selection: dict[str, str]
    variant: Optional[ProductVariant] = None
    available_values: dict[str, list[str]] = Field(default_factory=dict)
    pricing: Pricing
    in_stock: bool
    can_add_to_cart: bool
    image: Optional[str] = None
    formatted_price: Optional[str] = None
    formatted_compare_at_price: Optional[str] = None


class ResolveRequest(BaseModel):
    """Request to resolve a selection against a product"""
    selection: dict[str, str] = Field(default_factory=dict)
    quantity: int = 1
