from __future__ import annotations

import logging
import math

from ..errors import InvalidInput, NoOutletAvailable, NotFound, StoreUnavailable
from ..store.base import Store, StoreError
from ..store.geo import NearestOutlet, resolve_nearest_outlet
from .config import DEFAULT_DELIVERY_CONFIG, DeliveryConfig
from .fees import calculate_delivery_fee, estimate_delivery_minutes, is_valid_coordinate
from .models import (
    DeliveryAvailabilityData,
    DeliveryFeeData,
    NearestOutletOut,
    Outlet,
    OutletSummary,
)

logger = logging.getLogger(__name__)


def _resolve(store: Store, lat: float, lng: float) -> NearestOutlet | None:
    if not is_valid_coordinate(lat, lng):
        raise InvalidInput("Invalid coordinates provided")
    try:
        return resolve_nearest_outlet(store, lat, lng)
    except StoreError as exc:
        logger.error("Nearest outlet lookup failed: %s", exc)
        raise StoreUnavailable("Failed to find nearest outlet") from exc


def get_delivery_fee(
    store: Store,
    lat: float,
    lng: float,
    config: DeliveryConfig = DEFAULT_DELIVERY_CONFIG,
) -> DeliveryFeeData:
    nearest = _resolve(store, lat, lng)
    if nearest is None:
        raise NoOutletAvailable()

    return DeliveryFeeData(
        nearest_outlet=NearestOutletOut(
            id=nearest.outlet_id,
            name=nearest.name,
            address=nearest.address,
            distance_km=f"{nearest.distance_km:.2f}",
        ),
        delivery_fee=calculate_delivery_fee(nearest.distance_km, config),
        estimated_delivery_minutes=math.ceil(
            estimate_delivery_minutes(nearest.distance_km, config)
        ),
        delivery_available=nearest.distance_km <= config.max_distance_km,
    )


def check_delivery_availability(
    store: Store,
    lat: float,
    lng: float,
    config: DeliveryConfig = DEFAULT_DELIVERY_CONFIG,
) -> DeliveryAvailabilityData:
    nearest = _resolve(store, lat, lng)

    if nearest is None:
        return DeliveryAvailabilityData(
            delivery_available=False,
            distance_km=None,
            max_delivery_distance=config.max_distance_km,
            nearest_outlet=None,
            message="No outlets found in your area",
        )

    available = nearest.distance_km <= config.max_distance_km
    return DeliveryAvailabilityData(
        delivery_available=available,
        distance_km=f"{nearest.distance_km:.2f}",
        max_delivery_distance=config.max_distance_km,
        nearest_outlet=OutletSummary(
            id=nearest.outlet_id, name=nearest.name, address=nearest.address,
        ),
        message=(
            "Delivery available in your area"
            if available
            else "Location is outside our delivery area"
        ),
    )


def list_outlets(store: Store) -> list[Outlet]:
    try:
        rows = store.fetch_all("outlets", is_active=True)
    except StoreError as exc:
        logger.error("Get outlets failed: %s", exc)
        raise StoreUnavailable("Failed to fetch outlets") from exc
    return [Outlet(**row) for row in sorted(rows, key=lambda r: r["name"])]


def get_outlet(store: Store, outlet_id: str) -> Outlet:
    try:
        row = store.fetch_by_id("outlets", outlet_id, is_active=True)
    except StoreError as exc:
        logger.error("Get outlet %s failed: %s", outlet_id, exc)
        raise StoreUnavailable("Failed to fetch outlet") from exc
    if row is None:
        raise NotFound("Outlet not found")
    return Outlet(**row)
