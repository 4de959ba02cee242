"""Storefront error types"""


class StorefrontError(Exception):
    """Base class for storefront errors"""


class CatalogIntegrityError(StorefrontError, ValueError):
    """A product's options and variants contradict each other.

    Raised when the catalog is loaded, never while resolving a selection.
    """

    def __init__(self, product_id: str, problems: list[str]):
        self.product_id = product_id
        self.problems = problems
        super().__init__(f"Product {product_id!r} failed integrity checks: {'; '.join(problems)}")


class InvalidQuantityError(StorefrontError, ValueError):
    """Quantity passed to the cart is not a positive integer"""

    def __init__(self, quantity):
        self.quantity = quantity
        super().__init__(f"Quantity must be a positive integer, got {quantity!r}")
