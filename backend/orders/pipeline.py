"""
Order pricing and assembly.

``create_order`` runs a strictly sequential chain against the store:

1. resolve the nearest active outlet for the delivery coordinate;
2. derive the delivery fee and the estimated delivery time from its distance;
3. price every line item against the product's current price;
4. write the order header;
5. write the line items, deleting the header again if this write fails;
6. re-read the joined order for the response (best effort).

Nothing is written before step 4, so every rejection up to there leaves the
store untouched.  The store offers no multi-row transaction, which is why
step 5 carries its own compensating delete: an order header is never left
behind without its items.
"""
from __future__ import annotations

import logging
import random
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from decimal import Decimal

from ..delivery.fees import (
    calculate_delivery_fee,
    calculate_estimated_delivery_time,
    format_currency,
)
from ..errors import (
    NoOutletAvailable,
    NotFound,
    OrderCreationFailed,
    OrderItemsCreationFailed,
    ProductUnavailable,
    StoreUnavailable,
)
from ..products.models import to_money
from ..store.base import Store, StoreError
from ..store.geo import resolve_nearest_outlet
from .models import CreateOrderRequest, Order, OrderItemIn, OrderStatus, ReorderRequest
from .queries import fetch_order_detail
from .riders import assign_rider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PricedItem:
    product_id: str
    quantity_litres: float
    unit_price: Decimal
    subtotal: Decimal


def price_items(store: Store, items: list[OrderItemIn]) -> tuple[list[PricedItem], Decimal]:
    """Price each item at the product's current price; return items and their sum."""
    priced: list[PricedItem] = []
    items_total = Decimal("0.00")
    for item in items:
        try:
            product = store.fetch_by_id("products", item.product_id, is_available=True)
        except StoreError as exc:
            logger.error("Get product %s failed: %s", item.product_id, exc)
            raise StoreUnavailable("Failed to fetch products") from exc
        if product is None:
            raise ProductUnavailable(item.product_id)

        unit_price = to_money(product["price_per_litre"])
        subtotal = to_money(unit_price * Decimal(str(item.quantity_litres)))
        items_total += subtotal
        priced.append(PricedItem(
            product_id=item.product_id,
            quantity_litres=item.quantity_litres,
            unit_price=unit_price,
            subtotal=subtotal,
        ))
    return priced, items_total


def create_order(
    store: Store,
    user_id: str,
    request: CreateOrderRequest,
    rng: random.Random | None = None,
    now: datetime | None = None,
) -> Order:
    now = now or datetime.now(timezone.utc)

    try:
        nearest = resolve_nearest_outlet(store, request.delivery_lat, request.delivery_lng)
    except StoreError as exc:
        logger.error("Nearest outlet lookup failed: %s", exc)
        raise StoreUnavailable("Failed to find nearest outlet") from exc
    if nearest is None:
        raise NoOutletAvailable()

    delivery_fee = to_money(calculate_delivery_fee(nearest.distance_km))
    estimated_delivery_time = calculate_estimated_delivery_time(nearest.distance_km, now)

    priced, items_total = price_items(store, request.items)
    total_amount = items_total + delivery_fee

    header = {
        "user_id": user_id,
        "outlet_id": nearest.outlet_id,
        "total_amount": total_amount,
        "delivery_fee": delivery_fee,
        "payment_method": request.payment_method.value,
        "payment_status": "pending",
        "delivery_address": request.delivery_address.model_dump(),
        "delivery_lat": request.delivery_lat,
        "delivery_lng": request.delivery_lng,
        "estimated_delivery_time": estimated_delivery_time,
        "rider_info": assign_rider(rng),
        "notes": request.notes,
        "status": OrderStatus.pending.value,
        "created_at": now,
        "updated_at": now,
    }
    try:
        order = store.insert("orders", [header])[0]
    except StoreError as exc:
        logger.error("Create order failed: %s", exc)
        raise OrderCreationFailed() from exc

    try:
        store.insert("order_items", [
            {**asdict(item), "order_id": order["id"], "created_at": now} for item in priced
        ])
    except StoreError as exc:
        logger.error("Create order items failed for order %s: %s", order["id"], exc)
        try:
            store.delete("orders", order["id"])
        except StoreError:
            logger.error("Rollback of order %s failed", order["id"], exc_info=True)
        else:
            logger.warning("Rolled back order %s after item write failure", order["id"])
        raise OrderItemsCreationFailed() from exc

    logger.info(
        "Created order %s for user %s from outlet %s: %s (fee %s)",
        order["id"],
        user_id,
        nearest.name,
        format_currency(total_amount),
        format_currency(delivery_fee),
    )

    try:
        complete = fetch_order_detail(store, order["id"])
    except StoreError:
        logger.warning("Fetch complete order %s failed, returning header", order["id"], exc_info=True)
        complete = None
    return complete or Order(**order)


def reorder(
    store: Store,
    user_id: str,
    order_id: str,
    overrides: ReorderRequest | None = None,
    rng: random.Random | None = None,
    now: datetime | None = None,
) -> Order:
    """Place a fresh order with a previous order's items, priced at today's prices."""
    overrides = overrides or ReorderRequest()
    try:
        original = fetch_order_detail(store, order_id, user_id=user_id)
    except StoreError as exc:
        logger.error("Get original order %s failed: %s", order_id, exc)
        raise StoreUnavailable("Failed to reorder") from exc
    if original is None:
        raise NotFound("Original order not found")

    def pick(override, fallback):
        return override if override is not None else fallback

    request = CreateOrderRequest(
        items=[
            OrderItemIn(product_id=i.product_id, quantity_litres=i.quantity_litres)
            for i in original.order_items
        ],
        delivery_address=pick(overrides.delivery_address, original.delivery_address),
        delivery_lat=pick(overrides.delivery_lat, original.delivery_lat),
        delivery_lng=pick(overrides.delivery_lng, original.delivery_lng),
        payment_method=pick(overrides.payment_method, original.payment_method),
    )
    return create_order(store, user_id, request, rng=rng, now=now)
