from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone

from .config import DEFAULT_DELIVERY_CONFIG, DeliveryConfig


def calculate_delivery_fee(
    distance_km: float, config: DeliveryConfig = DEFAULT_DELIVERY_CONFIG,
) -> int:
    """Base fee plus a per-km charge, with any started km billed in full."""
    return config.base_fee + config.per_km_fee * math.ceil(distance_km)


def estimate_delivery_minutes(
    distance_km: float, config: DeliveryConfig = DEFAULT_DELIVERY_CONFIG,
) -> float:
    return config.base_minutes + config.per_km_minutes * distance_km


def calculate_estimated_delivery_time(
    distance_km: float,
    now: datetime | None = None,
    config: DeliveryConfig = DEFAULT_DELIVERY_CONFIG,
) -> datetime:
    start = now or datetime.now(timezone.utc)
    return start + timedelta(minutes=estimate_delivery_minutes(distance_km, config))


def is_valid_coordinate(lat: float, lng: float) -> bool:
    return -90 <= lat <= 90 and -180 <= lng <= 180


def format_currency(amount: float, config: DeliveryConfig = DEFAULT_DELIVERY_CONFIG) -> str:
    return f"{config.currency} {amount:,.0f}"
