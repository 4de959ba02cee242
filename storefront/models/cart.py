"""Cart models"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class CartLine(BaseModel):
    """One variant in the cart"""
    product_id: str
    variant_id: str
    unit_price: Decimal = Field(ge=0)
    quantity: int = Field(gt=0)

    class Config:
        frozen = True

    @property
    def key(self) -> tuple[str, str]:
        return (self.product_id, self.variant_id)


class CartLineRecord(BaseModel):
    """Persisted form of a cart line"""
    product_id: str = Field(alias="productId", min_length=1)
    variant_id: str = Field(alias="variantId", min_length=1)
    unit_price: Decimal = Field(alias="unitPrice", ge=0)
    quantity: int = Field(strict=True)

    class Config:
        populate_by_name = True

    @classmethod
    def from_line(cls, line: CartLine) -> "CartLineRecord":
        return cls(
            product_id=line.product_id,
            variant_id=line.variant_id,
            unit_price=line.unit_price,
            quantity=line.quantity,
        )


class AddToCartRequest(BaseModel):
    """Request to add the variant matching a selection to the cart"""
    product_id: str
    selection: dict[str, str] = Field(default_factory=dict)
    # Validated by the cart itself so that the rejection is reported uniformly
    quantity: int = 1


class UpdateCartItemRequest(BaseModel):
    """Request to update cart line quantity; zero or less removes the line"""
    quantity: int


class CartSnapshot(BaseModel):
    """Read-only view of a session's cart"""
    session_id: str
    lines: list[CartLine] = []
    total_items: int = 0
    total_amount: Decimal = Decimal("0.00")
    formatted_total: str
    badge: str = ""
    currency: str = "USD"


class CartResponse(BaseModel):
    """Cart API response"""
    cart: CartSnapshot
    message: Optional[str] = None
