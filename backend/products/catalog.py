from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Any, Callable

from ..errors import InvalidInput, NotFound, StoreUnavailable
from ..store.base import Row, Store, StoreError
from .models import Pagination, Product

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)

SORT_KEYS: dict[str, Callable[[Row], Any]] = {
    "name": lambda p: p["name"].lower(),
    "price": lambda p: p["price_per_litre"],
    "created_at": lambda p: p.get("created_at") or _EPOCH,
}


def paginate(rows: list[Row], page: int, limit: int) -> tuple[list[Row], Pagination]:
    """Slice ``rows`` to one page and describe where that page sits."""
    total = len(rows)
    start = (page - 1) * limit
    total_pages = math.ceil(total / limit) if limit else 0
    return rows[start:start + limit], Pagination(
        current_page=page,
        total_pages=total_pages,
        total_items=total,
        items_per_page=limit,
        has_next_page=page < total_pages,
        has_prev_page=page > 1,
    )


def _available(store: Store, predicate=None, **filters: Any) -> list[Row]:
    try:
        return store.fetch_all("products", predicate, is_available=True, **filters)
    except StoreError as exc:
        logger.error("Get products failed: %s", exc)
        raise StoreUnavailable("Failed to fetch products") from exc


def list_products(
    store: Store,
    page: int = 1,
    limit: int = 20,
    category: str | None = None,
    search: str | None = None,
    sort: str = "created_at",
    order: str = "desc",
) -> tuple[list[Product], Pagination]:
    filters = {"category": category} if category else {}

    predicate = None
    if search:
        needle = search.strip().lower()

        def predicate(p: Row) -> bool:
            return needle in p["name"].lower() or needle in (p.get("description") or "").lower()

    rows = _available(store, predicate, **filters)
    rows.sort(key=SORT_KEYS.get(sort, SORT_KEYS["created_at"]), reverse=order == "desc")

    page_rows, pagination = paginate(rows, page, limit)
    return [Product(**r) for r in page_rows], pagination


def get_product(store: Store, product_id: str) -> Product:
    try:
        row = store.fetch_by_id("products", product_id, is_available=True)
    except StoreError as exc:
        logger.error("Get product %s failed: %s", product_id, exc)
        raise StoreUnavailable("Failed to fetch product") from exc
    if row is None:
        raise NotFound("Product not found")
    return Product(**row)


def list_featured(store: Store, limit: int = 6) -> list[Product]:
    rows = _available(store)
    rows.sort(key=SORT_KEYS["created_at"], reverse=True)
    return [Product(**r) for r in rows[:limit]]


def search_products(
    store: Store, query: str, page: int = 1, limit: int = 20,
) -> tuple[list[Product], Pagination]:
    """Match name or description by substring, or an ingredient exactly."""
    if not query or len(query.strip()) < 2:
        raise InvalidInput("Search query must be at least 2 characters long")

    needle = query.strip().lower()

    def predicate(p: Row) -> bool:
        return (
            needle in p["name"].lower()
            or needle in (p.get("description") or "").lower()
            or needle in (i.lower() for i in p.get("ingredients", []))
        )

    rows = _available(store, predicate)
    rows.sort(key=SORT_KEYS["name"])

    page_rows, pagination = paginate(rows, page, limit)
    return [Product(**r) for r in page_rows], pagination


def list_categories(store: Store) -> list[str]:
    return sorted({r.get("category") or "juice" for r in _available(store)})
