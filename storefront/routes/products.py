"""Product API routes"""

from typing import Optional
from fastapi import APIRouter, HTTPException, Query

from ..core.config import settings
from ..database.products import catalog_db
from ..models.product import Product, ProductSearchResponse
from ..models.resolution import ProductView, ResolveRequest
from ..services import variant_resolver

router = APIRouter(prefix="/api/products", tags=["Products"])


def _get_product_or_404(product_id: str) -> Product:
    product = catalog_db.get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.get("", response_model=ProductSearchResponse)
async def search_products(
    query: Optional[str] = Query(None, description="Search query"),
    in_stock_only: bool = Query(False, description="Only show purchasable items"),
    featured_only: bool = Query(False, description="Only show featured items"),
    limit: int = Query(20, ge=1, le=100, description="Max results"),
    offset: int = Query(0, ge=0, description="Offset for pagination"),
):
    """Search products in the catalog"""
    products, total = catalog_db.search_products(
        query=query,
        in_stock_only=in_stock_only,
        featured_only=featured_only,
        limit=limit,
        offset=offset,
    )

    return ProductSearchResponse(
        products=products,
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/{product_id}", response_model=Product)
async def get_product(product_id: str):
    """Get a product by ID"""
    return _get_product_or_404(product_id)


@router.get("/{product_id}/view", response_model=ProductView)
async def get_default_view(product_id: str):
    """
    Initial product card state.

    Pre-selects the options of the product's first variant.
    """
    product = _get_product_or_404(product_id)
    return variant_resolver.resolve(
        product,
        variant_resolver.default_selection(product),
        currency_symbol=settings.currency_symbol,
    )


@router.post("/{product_id}/resolve", response_model=ProductView)
async def resolve_selection(product_id: str, request: ResolveRequest):
    """
    Resolve the shopper's option selection.

    Incomplete or sold-out selections are not errors: the response simply
    has no variant, or has ``can_add_to_cart`` set to false.
    """
    product = _get_product_or_404(product_id)
    return variant_resolver.resolve(
        product,
        request.selection,
        quantity=request.quantity,
        currency_symbol=settings.currency_symbol,
    )
