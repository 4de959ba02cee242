# Services

from . import variant_resolver
from .cart_store import CartStore

__all__ = ["variant_resolver", "CartStore"]
