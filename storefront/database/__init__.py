# Database modules

from .products import catalog_db, CatalogDatabase
from .carts import CartStorage, MemoryCartStorage, FileCartStorage, build_cart_storage

__all__ = [
    "catalog_db",
    "CatalogDatabase",
    "CartStorage",
    "MemoryCartStorage",
    "FileCartStorage",
    "build_cart_storage",
]
