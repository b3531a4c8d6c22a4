from __future__ import annotations

import pytest

from backend.errors import InvalidInput, NotFound
from backend.products.catalog import (
    get_product,
    list_categories,
    list_featured,
    list_products,
    paginate,
    search_products,
)
from backend.tests.helpers import BANANA_CREAM, MANGO_TANGO


def test_paginate_slices_and_describes_page():
    rows = [{"id": str(i)} for i in range(45)]
    page_rows, pagination = paginate(rows, 3, 20)
    assert [r["id"] for r in page_rows] == [str(i) for i in range(40, 45)]
    assert pagination.total_pages == 3
    assert pagination.total_items == 45
    assert pagination.has_next_page is False
    assert pagination.has_prev_page is True


def test_paginate_empty():
    page_rows, pagination = paginate([], 1, 20)
    assert page_rows == []
    assert pagination.total_pages == 0
    assert pagination.has_next_page is False


def test_list_products_hides_unavailable(seed_store):
    products, pagination = list_products(seed_store)
    assert pagination.total_items == 6
    assert BANANA_CREAM not in [p.id for p in products]
    # Newest first by default
    assert products[0].name == "Immunity Boost"


def test_list_products_by_category_and_price(seed_store):
    products, _ = list_products(seed_store, category="juice", sort="price", order="asc")
    assert [p.name for p in products] == [
        "Citrus Sunrise", "Mango Tango", "Pineapple Paradise", "Green Revitalizer",
    ]


def test_list_products_search_filter(seed_store):
    products, _ = list_products(seed_store, search="tropical")
    assert {p.name for p in products} == {"Mango Tango", "Pineapple Paradise"}


def test_get_product(seed_store):
    product = get_product(seed_store, MANGO_TANGO)
    assert product.ingredients == ["mango", "passion fruit", "ginger", "water"]
    assert product.nutritional_info["calories_per_100ml"] == 120
    assert product.allergens == []


def test_get_unavailable_product(seed_store):
    with pytest.raises(NotFound):
        get_product(seed_store, BANANA_CREAM)


def test_featured_newest_first(seed_store):
    names = [p.name for p in list_featured(seed_store, limit=2)]
    assert names == ["Immunity Boost", "Pineapple Paradise"]


def test_search_matches_ingredients(seed_store):
    products, _ = search_products(seed_store, "Ginger")
    assert [p.name for p in products] == ["Immunity Boost", "Mango Tango"]


def test_search_skips_unavailable(seed_store):
    products, _ = search_products(seed_store, "banana")
    assert [p.name for p in products] == ["Berry Blast"]


@pytest.mark.parametrize("query", ["", "a", " b "])
def test_search_needs_two_characters(seed_store, query):
    with pytest.raises(InvalidInput):
        search_products(seed_store, query)


def test_categories(seed_store):
    assert list_categories(seed_store) == ["juice", "smoothie", "wellness"]


# ── API ──────────────────────────────────────────────────────────────────


def test_products_endpoint(client):
    resp = client.get("/products", params={"limit": 4})
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert len(body["data"]) == 4
    assert body["pagination"]["total_pages"] == 2
    assert body["pagination"]["has_next_page"] is True


def test_products_endpoint_rejects_bad_sort(client):
    resp = client.get("/products", params={"sort": "calories"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "invalid_input"


def test_product_detail_endpoint(client):
    resp = client.get(f"/products/{MANGO_TANGO}")
    assert resp.status_code == 200
    assert resp.json()["data"]["name"] == "Mango Tango"

    resp = client.get(f"/products/{BANANA_CREAM}")
    assert resp.status_code == 404
    assert resp.json() == {
        "success": False,
        "message": "Product not found",
        "error": "not_found",
    }


def test_search_endpoint(client):
    resp = client.get("/products/search", params={"q": "lime"})
    body = resp.json()
    assert body["search_query"] == "lime"
    assert [p["name"] for p in body["data"]] == ["Citrus Sunrise", "Pineapple Paradise"]

    resp = client.get("/products/search", params={"q": "x"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Search query must be at least 2 characters long"


def test_category_endpoint(client):
    resp = client.get("/products/category/smoothie")
    assert [p["name"] for p in resp.json()["data"]] == ["Berry Blast"]


def test_featured_and_categories_endpoints(client):
    assert len(client.get("/products/featured").json()["data"]) == 6
    assert client.get("/products/categories").json()["data"] == ["juice", "smoothie", "wellness"]
