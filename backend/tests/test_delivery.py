from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from backend.delivery.config import DeliveryConfig
from backend.delivery.fees import (
    calculate_delivery_fee,
    calculate_estimated_delivery_time,
    estimate_delivery_minutes,
    format_currency,
    is_valid_coordinate,
)
from backend.delivery.service import check_delivery_availability, get_delivery_fee
from backend.errors import InvalidInput, NoOutletAvailable
from backend.store.geo import NearestOutlet
from backend.tests.helpers import KAMPALA_CENTRAL, make_store

NOW = datetime(2025, 9, 17, 12, 0, tzinfo=timezone.utc)


# ── Fees ─────────────────────────────────────────────────────────────────


@pytest.mark.parametrize("distance, fee", [
    (0, 2000),
    (0.1, 4000),
    (1.0, 4000),
    (1.01, 6000),
    (2.0, 6000),
    (3.0, 8000),
])
def test_fee_bills_every_started_km(distance, fee):
    assert calculate_delivery_fee(distance) == fee


def test_fee_never_decreases_with_distance():
    fees = [calculate_delivery_fee(d / 10) for d in range(0, 200)]
    assert fees == sorted(fees)


def test_fee_uses_config():
    config = DeliveryConfig(base_fee=1000, per_km_fee=500)
    assert calculate_delivery_fee(2.5, config) == 2500


def test_delivery_minutes():
    assert estimate_delivery_minutes(0) == 30
    assert estimate_delivery_minutes(2.5) == 55


def test_estimated_delivery_time_from_injected_clock():
    assert calculate_estimated_delivery_time(3.0, NOW) == NOW + timedelta(minutes=60)


def test_coordinate_bounds():
    assert is_valid_coordinate(0.3476, 32.5825)
    assert is_valid_coordinate(-90, 180)
    assert not is_valid_coordinate(91, 0)
    assert not is_valid_coordinate(0, -181)


def test_format_currency():
    assert format_currency(27500) == "UGX 27,500"


# ── Service ──────────────────────────────────────────────────────────────


def test_fee_quote_at_outlet(seed_store):
    data = get_delivery_fee(seed_store, *KAMPALA_CENTRAL)
    assert data.nearest_outlet.name == "Fruity Gulp Kampala Central"
    assert data.nearest_outlet.distance_km == "0.00"
    assert data.delivery_fee == 2000
    assert data.estimated_delivery_minutes == 30
    assert data.delivery_available is True


def test_fee_quote_skips_inactive_outlets(seed_store):
    # Right next to the inactive Entebbe outlet
    data = get_delivery_fee(seed_store, 0.0512, 32.4637)
    assert data.nearest_outlet.name != "Fruity Gulp Entebbe"
    assert data.delivery_available is False


def test_fee_quote_without_outlets():
    store = make_store(outlets=[])
    with pytest.raises(NoOutletAvailable):
        get_delivery_fee(store, *KAMPALA_CENTRAL)


def test_fee_quote_rejects_bad_coordinates(seed_store):
    with pytest.raises(InvalidInput):
        get_delivery_fee(seed_store, 100, 0)


def test_availability_nearby(seed_store):
    data = check_delivery_availability(seed_store, 0.34, 32.59)
    assert data.delivery_available is True
    assert data.message == "Delivery available in your area"
    assert data.max_delivery_distance == 20


def test_availability_far_away(seed_store):
    # Mbarara
    data = check_delivery_availability(seed_store, -0.6072, 30.6545)
    assert data.delivery_available is False
    assert data.message == "Location is outside our delivery area"
    assert float(data.distance_km) > 20
    assert data.nearest_outlet is not None


def test_availability_without_outlets():
    data = check_delivery_availability(make_store(outlets=[]), *KAMPALA_CENTRAL)
    assert data.delivery_available is False
    assert data.distance_km is None
    assert data.nearest_outlet is None
    assert data.message == "No outlets found in your area"


@pytest.mark.parametrize("distance, available, message", [
    (20.0, True, "Delivery available in your area"),
    (20.01, False, "Location is outside our delivery area"),
])
def test_max_distance_is_inclusive(seed_store, distance, available, message):
    outlet = NearestOutlet("o1", "Edge Outlet", "Plot 1, Edge Road", distance)
    with patch("backend.delivery.service.resolve_nearest_outlet", return_value=outlet):
        quote = get_delivery_fee(seed_store, *KAMPALA_CENTRAL)
        data = check_delivery_availability(seed_store, *KAMPALA_CENTRAL)
    assert quote.delivery_available is available
    assert data.delivery_available is available
    assert data.message == message


# ── API ──────────────────────────────────────────────────────────────────


def test_fee_endpoint(client):
    # Garden City Mall is about 2.5 km from Kampala Central
    resp = client.get("/delivery/fee", params={"lat": 0.3354, "lng": 32.6014})
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["nearest_outlet"]["name"] == "Fruity Gulp Garden City"
    assert data["delivery_fee"] == 2000


def test_fee_endpoint_rejects_invalid_latitude(client):
    resp = client.get("/delivery/fee", params={"lat": 95, "lng": 32.6})
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["errors"][0]["field"] == "lat"


def test_fee_endpoint_requires_coordinates(client):
    resp = client.get("/delivery/fee")
    assert resp.status_code == 400


def test_fee_endpoint_without_outlets(client, seed_store):
    for outlet in seed_store.fetch_all("outlets"):
        seed_store.update("outlets", outlet["id"], {"is_active": False})
    resp = client.get("/delivery/fee", params={"lat": 0.3476, "lng": 32.5825})
    assert resp.status_code == 404
    assert resp.json()["error"] == "no_outlet_available"


def test_availability_endpoint(client):
    resp = client.get("/delivery/availability", params={"lat": 0.3476, "lng": 32.5825})
    assert resp.status_code == 200
    assert resp.json()["data"]["delivery_available"] is True


def test_outlets_endpoint_lists_active_only(client):
    resp = client.get("/delivery/outlets")
    assert resp.status_code == 200
    names = [o["name"] for o in resp.json()["data"]]
    assert len(names) == 3
    assert "Fruity Gulp Entebbe" not in names
    assert names == sorted(names)


def test_outlet_detail(client):
    outlet_id = "9a7e5b20-1c2d-4e3f-8a9b-0c1d2e3f4a01"
    resp = client.get(f"/delivery/outlets/{outlet_id}")
    assert resp.status_code == 200
    assert resp.json()["data"]["phone"] == "+256700123456"

    resp = client.get("/delivery/outlets/9a7e5b20-1c2d-4e3f-8a9b-0c1d2e3f4a04")
    assert resp.status_code == 404
