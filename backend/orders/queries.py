from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from ..errors import NotFound, StoreUnavailable
from ..products.catalog import paginate
from ..products.models import Pagination
from ..store.base import Row, Store, StoreError
from .models import Order, OrderStatus

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _outlet_info(store: Store, outlet_id: str | None) -> dict[str, Any] | None:
    if not outlet_id:
        return None
    outlet = store.fetch_by_id("outlets", outlet_id)
    if outlet is None:
        return None
    return {"name": outlet["name"], "address": outlet["address"], "phone": outlet.get("phone")}


def _join(store: Store, header: Row) -> Order:
    items = store.fetch_all("order_items", order_id=header["id"])
    for item in items:
        item["products"] = store.fetch_by_id("products", item["product_id"])
    header["order_items"] = items
    header["outlets"] = _outlet_info(store, header.get("outlet_id"))
    return Order(**header)


def fetch_order_detail(store: Store, order_id: str, user_id: str | None = None) -> Order | None:
    """Header joined with its items, their products and the outlet summary.

    Store failures propagate as ``StoreError``.
    """
    filters = {"user_id": user_id} if user_id else {}
    header = store.fetch_by_id("orders", order_id, **filters)
    if header is None:
        return None
    return _join(store, header)


def get_order(store: Store, user_id: str, order_id: str) -> Order:
    try:
        order = fetch_order_detail(store, order_id, user_id=user_id)
    except StoreError as exc:
        logger.error("Get order %s failed: %s", order_id, exc)
        raise StoreUnavailable("Failed to fetch order") from exc
    if order is None:
        raise NotFound("Order not found")
    return order


def list_orders(
    store: Store,
    user_id: str,
    page: int = 1,
    limit: int = 20,
    status: OrderStatus | None = None,
) -> tuple[list[Order], Pagination]:
    filters: dict[str, Any] = {"user_id": user_id}
    if status is not None:
        filters["status"] = OrderStatus(status).value

    try:
        headers = store.fetch_all("orders", **filters)
        headers.sort(key=lambda o: o.get("created_at") or _EPOCH, reverse=True)
        page_rows, pagination = paginate(headers, page, limit)
        orders = [_join(store, h) for h in page_rows]
    except StoreError as exc:
        logger.error("Get user orders failed: %s", exc)
        raise StoreUnavailable("Failed to fetch orders") from exc
    return orders, pagination
