"""Cart API routes"""

import logging
from fastapi import APIRouter, HTTPException

from ..core.config import settings
from ..core.exceptions import InvalidQuantityError
from ..core.money import format_money
from ..core.session import ShopperSession, session_manager
from ..database.products import catalog_db
from ..models.cart import (
    AddToCartRequest,
    UpdateCartItemRequest,
    CartSnapshot,
    CartResponse,
)
from ..services import variant_resolver

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cart", tags=["Cart"])


def _get_session_or_404(session_id: str) -> ShopperSession:
    session = session_manager.get_session(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Cart not found")
    session.touch()
    return session


def _snapshot(session: ShopperSession) -> CartSnapshot:
    cart = session.cart
    total_amount = cart.get_total_amount()
    return CartSnapshot(
        session_id=session.session_id,
        lines=list(cart.lines),
        total_items=cart.get_total_items(),
        total_amount=total_amount,
        formatted_total=format_money(total_amount, settings.currency_symbol),
        badge=cart.badge_label(),
        currency=settings.currency,
    )


@router.post("", response_model=CartResponse)
async def create_cart():
    """Start a shopper session with an empty cart"""
    removed = session_manager.cleanup_old_sessions(settings.session_max_age_hours)
    if removed:
        logger.info(f"Released {removed} idle sessions")

    session = session_manager.create_session()
    return CartResponse(cart=_snapshot(session), message="Cart created")


@router.get("/{session_id}", response_model=CartResponse)
async def get_cart(session_id: str):
    """Get cart by session ID"""
    session = _get_session_or_404(session_id)
    return CartResponse(cart=_snapshot(session))


@router.post("/{session_id}/items", response_model=CartResponse)
async def add_to_cart(session_id: str, request: AddToCartRequest):
    """Add the variant matching the selection to the cart"""
    session = _get_session_or_404(session_id)

    product = catalog_db.get_product(request.product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    if request.quantity < 1:
        raise HTTPException(status_code=400, detail=str(InvalidQuantityError(request.quantity)))

    variant = variant_resolver.match_variant(product, request.selection)
    if variant is None:
        raise HTTPException(status_code=409, detail="Select an option")

    if not variant_resolver.can_add_to_cart(product, variant, request.quantity):
        raise HTTPException(status_code=409, detail="Sold out")

    unit_price = variant_resolver.pricing(product, variant).current_price

    line = session.cart.add_line(product.id, variant.id, unit_price, request.quantity)

    logger.info(
        f"Session {session_id}: added {request.quantity}x {product.id}/{variant.id}, "
        f"line quantity {line.quantity}"
    )

    return CartResponse(
        cart=_snapshot(session),
        message=f"Added {request.quantity}x {product.title} to cart",
    )


@router.put("/{session_id}/items/{product_id}/{variant_id}", response_model=CartResponse)
async def update_cart_item(
    session_id: str,
    product_id: str,
    variant_id: str,
    request: UpdateCartItemRequest,
):
    """Update line quantity; zero or less removes the line"""
    session = _get_session_or_404(session_id)
    session.cart.update_quantity(product_id, variant_id, request.quantity)
    return CartResponse(cart=_snapshot(session), message="Cart updated")


@router.delete("/{session_id}/items/{product_id}/{variant_id}", response_model=CartResponse)
async def remove_from_cart(session_id: str, product_id: str, variant_id: str):
    """Remove a line from the cart"""
    session = _get_session_or_404(session_id)
    session.cart.remove_line(product_id, variant_id)
    return CartResponse(cart=_snapshot(session), message="Item removed")


@router.delete("/{session_id}", response_model=CartResponse)
async def clear_cart(session_id: str):
    """Clear all items from cart"""
    session = _get_session_or_404(session_id)
    session.cart.clear()
    return CartResponse(cart=_snapshot(session), message="Cart cleared")
