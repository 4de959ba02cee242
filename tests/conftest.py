"""Shared test fixtures"""

import pytest
from fastapi.testclient import TestClient

from storefront.database.carts import MemoryCartStorage
from storefront.main import app
from storefront.models.product import Product
from storefront.services.cart_store import CartStore


@pytest.fixture
def jacket() -> Product:
    """Size S is sold out, size M is discounted from 60 to 40"""
    return Product.model_validate({
        "id": "jacket",
        "title": "Jacket",
        "price": "40",
        "options": [{"name": "Size", "values": ["S", "M"]}],
        "variants": [
            {"id": "jacket-s", "options": {"Size": "S"}, "price": "40", "stock_quantity": 0},
            {
                "id": "jacket-m",
                "options": {"Size": "M"},
                "price": "40",
                "compare_at_price": "60",
                "stock_quantity": 5,
            },
        ],
    })


@pytest.fixture
def jeans() -> Product:
    """Two options with a sparse, partly sold-out variant grid"""
    return Product.model_validate({
        "id": "jeans",
        "title": "Jeans",
        "price": "85",
        "compare_at_price": "110",
        "images": ["jeans.jpg"],
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
                "id": "30-ind",
                "options": {"Size": "30", "Color": "Indigo"},
                "price": "85",
                "stock_quantity": 2,
                "image": "jeans-indigo.jpg",
            },
            {"id": "32-ind", "options": {"Size": "32", "Color": "Indigo"}, "price": "85", "stock_quantity": 0},
            {"id": "32-blk", "options": {"Size": "32", "Color": "Black"}, "price": "90", "stock_quantity": 1},
            {"id": "34-blk", "options": {"Size": "34", "Color": "Black"}, "price": "90", "available": False},
        ],
    })


@pytest.fixture
def scarf() -> Product:
    """Product without options or variants"""
    return Product.model_validate({
        "id": "scarf",
        "title": "Silk Scarf",
        "price": "245",
        "compare_at_price": "320",
        "images": ["scarf.jpg"],
    })


@pytest.fixture
def storage() -> MemoryCartStorage:
    return MemoryCartStorage()


@pytest.fixture
def cart() -> CartStore:
    return CartStore("test-session")


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client
