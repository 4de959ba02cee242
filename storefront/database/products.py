"""Product catalog database"""

import json
import logging
from typing import Any, Iterable, Optional

from pydantic import ValidationError

from ..core.config import settings
from ..core.exceptions import CatalogIntegrityError
from ..models.product import Product

logger = logging.getLogger(__name__)

# Demo catalog, used when no catalog file is configured
DEMO_PRODUCTS: list[dict[str, Any]] = [
    {
        "id": "prod-001",
        "title": "Suede Trucker Jacket",
        "slug": "suede-trucker-jacket",
        "description": "1970s suede trucker jacket with snap front and chest pockets.",
        "price": "40.00",
        "featured": True,
        "images": ["/static/images/suede-jacket.jpg"],
        "tags": ["Vintage", "Very Good"],
        "options": [{"name": "Size", "values": ["S", "M"]}],
        "variants": [
            {"id": "var-001-s", "options": {"Size": "S"}, "price": "40.00", "stock_quantity": 0},
            {
                "id": "var-001-m",
                "options": {"Size": "M"},
                "price": "40.00",
                "compare_at_price": "60.00",
                "stock_quantity": 5,
            },
        ],
    },
    {
        "id": "prod-002",
        "title": "Levi's 501 Selvedge Jeans",
        "slug": "levis-501-selvedge",
        "description": "Button fly 501s in rigid selvedge denim. Light fading on the thighs.",
        "price": "85.00",
        "compare_at_price": "110.00",
        "images": ["/static/images/levis-501.jpg"],
        "tags": ["Levi's", "Excellent"],
        "options": [
            {"name": "Size", "values": ["30", "32", "34"]},
            {
                "name": "Color",
                "values": ["Indigo", "Black"],
                "swatches": {"Indigo": "#3f4f75", "Black": "#1b1b1b"},
            },
        ],
        "variants": [
            {
                "id": "var-002-30-ind",
                "options": {"Size": "30", "Color": "Indigo"},
                "price": "85.00",
                "compare_at_price": "110.00",
                "stock_quantity": 2,
                "image": "/static/images/levis-501-indigo.jpg",
            },
            {
                "id": "var-002-32-ind",
                "options": {"Size": "32", "Color": "Indigo"},
                "price": "85.00",
                "compare_at_price": "110.00",
                "stock_quantity": 0,
                "image": "/static/images/levis-501-indigo.jpg",
            },
            {
                "id": "var-002-32-blk",
                "options": {"Size": "32", "Color": "Black"},
                "price": "90.00",
                "stock_quantity": 1,
                "image": "/static/images/levis-501-black.jpg",
            },
            {
                "id": "var-002-34-blk",
                "options": {"Size": "34", "Color": "Black"},
                "price": "90.00",
                "available": False,
                "image": "/static/images/levis-501-black.jpg",
            },
        ],
    },
    {
        "id": "prod-003",
        "title": "Hermès Silk Scarf",
        "slug": "hermes-silk-scarf",
        "description": "Hand-rolled 90cm silk carré, original box included.",
        "price": "245.00",
        "compare_at_price": "320.00",
        "featured": True,
        "images": ["/static/images/silk-scarf.jpg"],
        "tags": ["Designer", "Excellent"],
        "stock_quantity": 1,
    },
    {
        "id": "prod-004",
        "title": "Western Leather Belt",
        "slug": "western-leather-belt",
        "description": "Tooled leather belt with a brass buckle.",
        "price": "28.50",
        "images": ["/static/images/leather-belt.jpg"],
        "tags": ["Vintage", "Good"],
        "in_stock": False,
    },
]


class CatalogDatabase:
    """In-memory product catalog"""

    def __init__(self, records: Optional[Iterable[dict[str, Any]]] = None):
        self.products: dict[str, Product] = {}
        if records is not None:
            self.load_products(records)

    def add_product(self, record: dict[str, Any]) -> Product:
        """
        Validate and register one product.

        Raises:
            CatalogIntegrityError: the record is malformed or its variants
                contradict its options
        """
        product_id = "<missing id>"
        if isinstance(record, dict):
            product_id = str(record.get("id", product_id))

        try:
            product = Product.model_validate(record)
        except ValidationError as e:
            problems = [error["msg"] for error in e.errors()]
            logger.error(f"Rejecting product {product_id}: {'; '.join(problems)}")
            raise CatalogIntegrityError(product_id, problems) from e

        self.products[product.id] = product
        return product

    def load_products(self, records: Iterable[dict[str, Any]]) -> list[CatalogIntegrityError]:
        """
        Load a batch of product records.

        Products failing validation are left out of the catalog.

        Returns:
            One error per rejected product
        """
        errors = []
        for record in records:
            try:
                self.add_product(record)
            except CatalogIntegrityError as e:
                errors.append(e)

        logger.info(f"Catalog loaded: {len(self.products)} products, {len(errors)} rejected")
        return errors

    def load_file(self, path: str) -> list[CatalogIntegrityError]:
        """Load products from a JSON file holding a list of product records"""
        with open(path, "r", encoding="utf-8") as f:
            records = json.load(f)
        return self.load_products(records)

    def get_product(self, product_id: str) -> Optional[Product]:
        """Get a product by ID"""
        return self.products.get(product_id)

    def get_product_by_slug(self, slug: str) -> Optional[Product]:
        return next((p for p in self.products.values() if p.slug == slug), None)

    def search_products(
        self,
        query: Optional[str] = None,
        in_stock_only: bool = False,
        featured_only: bool = False,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Product], int]:
        """
        Search products with filters.

        Returns:
            Tuple of (matching products, total count)
        """
        results = list(self.products.values())

        # Filter by search query
        if query:
            query_lower = query.lower()
            results = [
                p for p in results
                if query_lower in p.title.lower()
                or (p.description and query_lower in p.description.lower())
            ]

        if featured_only:
            results = [p for p in results if p.featured]

        # Filter by stock
        if in_stock_only:
            results = [p for p in results if _has_stock(p)]

        # Get total before pagination
        total = len(results)

        # Apply pagination
        results = results[offset : offset + limit]

        return results, total

    def get_all_products(self) -> list[Product]:
        """Get all products"""
        return list(self.products.values())


def _has_stock(product: Product) -> bool:
    if product.has_variants:
        return any(v.in_stock for v in product.variants)
    if product.options:
        return False
    return product.in_stock and (product.stock_quantity is None or product.stock_quantity > 0)


def build_catalog(settings) -> CatalogDatabase:
    """Create the catalog from the configured file, or the demo catalog"""
    catalog = CatalogDatabase()
    path = settings.get_catalog_path()
    if path:
        logger.info(f"Loading catalog from {path}")
        catalog.load_file(path)
    else:
        catalog.load_products(DEMO_PRODUCTS)
    return catalog


# Singleton instance
catalog_db = build_catalog(settings)
