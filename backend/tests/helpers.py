from __future__ import annotations

from fastapi.testclient import TestClient

from backend.products.models import Product
from backend.store.memory_store import InMemoryStore

KAMPALA_CENTRAL = (0.3476, 32.5825)
MANGO_TANGO = "3f1c2a10-8d5e-4b7a-9c11-0a1b2c3d4e01"
GREEN_REVITALIZER = "3f1c2a10-8d5e-4b7a-9c11-0a1b2c3d4e02"
BANANA_CREAM = "3f1c2a10-8d5e-4b7a-9c11-0a1b2c3d4e07"


def make_product(
    product_id: str,
    name: str,
    ingredients: list[str],
    health_benefits: list[str] | None = None,
    price: float = 10000,
) -> Product:
    return Product(
        id=product_id,
        name=name,
        price_per_litre=price,
        ingredients=ingredients,
        health_benefits=health_benefits or [],
    )


def make_store(
    products: list[Product] | None = None,
    outlets: list[dict] | None = None,
) -> InMemoryStore:
    if outlets is None:
        outlets = [{
            "id": "outlet-1",
            "name": "Test Outlet",
            "address": "1 Test Road",
            "lat": KAMPALA_CENTRAL[0],
            "lng": KAMPALA_CENTRAL[1],
            "phone": "+256700000000",
            "is_active": True,
        }]
    return InMemoryStore({
        "products": [p.model_dump() for p in (products or [])],
        "outlets": outlets,
    })


def login(c: TestClient, email: str = "user@fruitygulp.ug", password: str = "user123"):
    return c.post("/auth/login", json={"email": email, "password": password})
