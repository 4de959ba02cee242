# Storefront Models

from .product import Product, ProductOption, ProductVariant, ProductSearchResponse
from .cart import (
    CartLine,
    CartLineRecord,
    AddToCartRequest,
    UpdateCartItemRequest,
    CartSnapshot,
    CartResponse,
)
from .resolution import Pricing, ProductView, ResolveRequest

__all__ = [
    "Product",
    "ProductOption",
    "ProductVariant",
    "ProductSearchResponse",
    "CartLine",
    "CartLineRecord",
    "AddToCartRequest",
    "UpdateCartItemRequest",
    "CartSnapshot",
    "CartResponse",
    "Pricing",
    "ProductView",
    "ResolveRequest",
]
