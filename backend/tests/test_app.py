from __future__ import annotations

from dataclasses import replace

from fastapi.testclient import TestClient

from backend.app import RATE_LIMITED_MESSAGE, app, build_limiter
from backend.config import DEFAULT_SERVER_CONFIG, ServerConfig

client = TestClient(app)


# ── CORS ─────────────────────────────────────────────────────────────────


def test_preflight_from_allowed_origin():
    resp = client.options("/products", headers={
        "Origin": "http://localhost:3000",
        "Access-Control-Request-Method": "GET",
        "Access-Control-Request-Headers": "Content-Type",
    })
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "http://localhost:3000"
    assert resp.headers["access-control-allow-credentials"] == "true"
    allowed = resp.headers["access-control-allow-methods"]
    for method in ("GET", "POST", "PUT", "DELETE"):
        assert method in allowed
    assert "content-type" in resp.headers["access-control-allow-headers"].lower()


def test_preflight_from_unknown_origin_rejected():
    resp = client.options("/products", headers={
        "Origin": "http://evil.example",
        "Access-Control-Request-Method": "GET",
    })
    assert resp.status_code == 400
    assert "access-control-allow-origin" not in resp.headers


def test_simple_request_echoes_allowed_origin():
    resp = client.get("/health", headers={"Origin": "http://localhost:8080"})
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "http://localhost:8080"


# ── Rate limiting ────────────────────────────────────────────────────────


def test_rate_limit_string():
    assert ServerConfig(rate_limit_window_ms=900000, rate_limit_max_requests=100).rate_limit == "100 per 900 second"
    config = ServerConfig(rate_limit_window_ms=60000, rate_limit_max_requests=5)
    assert config.rate_limit == "5 per 60 second"


def test_sub_second_window_rounds_up_to_one_second():
    assert ServerConfig(rate_limit_window_ms=10, rate_limit_max_requests=1).rate_limit == "1 per 1 second"


def test_requests_over_the_limit_get_429():
    config = replace(DEFAULT_SERVER_CONFIG, rate_limit_max_requests=2, rate_limit_enabled=True)
    original = app.state.limiter
    app.state.limiter = build_limiter(config)
    try:
        c = TestClient(app)
        assert c.get("/health").status_code == 200
        assert c.get("/health").status_code == 200
        resp = c.get("/health")
    finally:
        app.state.limiter = original
    assert resp.status_code == 429
    assert resp.json() == {
        "success": False,
        "message": RATE_LIMITED_MESSAGE,
        "error": "rate_limited",
    }


def test_limiter_disabled_by_config():
    config = replace(DEFAULT_SERVER_CONFIG, rate_limit_max_requests=1, rate_limit_enabled=False)
    original = app.state.limiter
    app.state.limiter = build_limiter(config)
    try:
        c = TestClient(app)
        codes = [c.get("/health").status_code for _ in range(3)]
    finally:
        app.state.limiter = original
    assert codes == [200, 200, 200]
