from __future__ import annotations

import logging
import math
from datetime import datetime, timezone

from ..errors import InvalidStateTransition, NotFound, StoreUnavailable
from ..store.base import Store, StoreError
from .models import OrderStatus, OrderTracking
from .queries import fetch_order_detail

logger = logging.getLogger(__name__)

STATUS_PROGRESS: dict[OrderStatus, int] = {
    OrderStatus.pending: 10,
    OrderStatus.confirmed: 25,
    OrderStatus.preparing: 50,
    OrderStatus.out_for_delivery: 75,
    OrderStatus.delivered: 100,
    OrderStatus.cancelled: 0,
}

STATUS_MESSAGES: dict[OrderStatus, str] = {
    OrderStatus.pending: "Order received and being processed",
    OrderStatus.confirmed: "Order confirmed and being prepared",
    OrderStatus.preparing: "Your fresh juices are being prepared",
    OrderStatus.out_for_delivery: "Order is on the way to you",
    OrderStatus.delivered: "Order has been delivered successfully",
    OrderStatus.cancelled: "Order has been cancelled",
}

CANCELLABLE = frozenset({OrderStatus.pending, OrderStatus.confirmed})
_FINISHED = frozenset({OrderStatus.delivered, OrderStatus.cancelled})


def minutes_remaining(estimated: datetime, now: datetime) -> int:
    return max(0, math.floor((estimated - now).total_seconds() / 60))


def get_order_status(
    store: Store, user_id: str, order_id: str, now: datetime | None = None,
) -> OrderTracking:
    now = now or datetime.now(timezone.utc)
    try:
        order = fetch_order_detail(store, order_id, user_id=user_id)
    except StoreError as exc:
        logger.error("Get order status %s failed: %s", order_id, exc)
        raise StoreUnavailable("Failed to fetch order status") from exc
    if order is None:
        raise NotFound("Order not found")

    remaining = None
    if order.estimated_delivery_time and order.status not in _FINISHED:
        remaining = minutes_remaining(order.estimated_delivery_time, now)

    return OrderTracking(
        order_id=order.id,
        status=order.status,
        status_message=STATUS_MESSAGES.get(order.status, "Order status unknown"),
        progress_percentage=STATUS_PROGRESS.get(order.status, 0),
        estimated_delivery_time=order.estimated_delivery_time,
        time_remaining=f"{remaining} minutes" if remaining is not None else None,
        time_remaining_minutes=remaining,
        rider_info=order.rider_info,
        outlet=order.outlets,
        created_at=order.created_at,
    )


def cancel_order(
    store: Store, user_id: str, order_id: str, now: datetime | None = None,
) -> None:
    """Move a pending or confirmed order to cancelled."""
    try:
        order = store.fetch_by_id("orders", order_id, user_id=user_id)
    except StoreError as exc:
        logger.error("Get order %s failed: %s", order_id, exc)
        raise StoreUnavailable("Failed to fetch order") from exc
    if order is None:
        raise NotFound("Order not found")

    if order.get("status") not in {s.value for s in CANCELLABLE}:
        raise InvalidStateTransition()

    try:
        updated = store.update("orders", order_id, {
            "status": OrderStatus.cancelled.value,
            "updated_at": now or datetime.now(timezone.utc),
        })
    except StoreError as exc:
        logger.error("Cancel order %s failed: %s", order_id, exc)
        raise StoreUnavailable("Failed to cancel order") from exc
    if updated is None:
        raise NotFound("Order not found")
    logger.info("Cancelled order %s", order_id)
