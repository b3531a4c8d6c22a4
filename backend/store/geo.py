from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .base import Store

EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True)
class NearestOutlet:
    outlet_id: str
    name: str
    address: str
    distance_km: float


def haversine_km(
    lat: float, lng: float, lats: np.ndarray, lngs: np.ndarray,
) -> np.ndarray:
    """Great-circle distance in km from one point to each of ``lats``/``lngs``."""
    lat1 = np.radians(lat)
    lat2 = np.radians(lats)
    d_lat = lat2 - lat1
    d_lng = np.radians(lngs) - np.radians(lng)

    a = np.sin(d_lat / 2) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin(d_lng / 2) ** 2
    return 2 * EARTH_RADIUS_KM * np.arctan2(np.sqrt(a), np.sqrt(1 - a))


def resolve_nearest_outlet(store: Store, lat: float, lng: float) -> NearestOutlet | None:
    """Return the closest active outlet, or ``None`` when there are none.

    Store failures propagate as ``StoreError``.
    """
    outlets = store.fetch_all("outlets", is_active=True)
    if not outlets:
        return None

    distances = haversine_km(
        lat,
        lng,
        np.array([float(o["lat"]) for o in outlets]),
        np.array([float(o["lng"]) for o in outlets]),
    )
    idx = int(np.argmin(distances))
    outlet = outlets[idx]
    return NearestOutlet(
        outlet_id=outlet["id"],
        name=outlet["name"],
        address=outlet["address"],
        distance_km=float(distances[idx]),
    )
