# Core modules

from .config import settings, get_settings, Settings
from .exceptions import StorefrontError, CatalogIntegrityError, InvalidQuantityError

__all__ = [
    "settings",
    "get_settings",
    "Settings",
    "StorefrontError",
    "CatalogIntegrityError",
    "InvalidQuantityError",
]
