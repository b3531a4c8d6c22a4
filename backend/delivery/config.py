from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DeliveryConfig:
    base_fee: int = 2000
    per_km_fee: int = 2000
    base_minutes: float = 30.0
    per_km_minutes: float = 10.0
    max_distance_km: float = 20.0
    currency: str = "UGX"


DEFAULT_DELIVERY_CONFIG = DeliveryConfig()
