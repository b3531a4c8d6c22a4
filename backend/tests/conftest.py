from __future__ import annotations

import random

import pytest
from fastapi.testclient import TestClient

from backend.app import app, get_rng
from backend.store.data_store import get_store, load_seed_store
from backend.store.memory_store import InMemoryStore

# Suites share one client address; rate limiting has its own tests
app.state.limiter.enabled = False


@pytest.fixture
def seed_store() -> InMemoryStore:
    return load_seed_store()


@pytest.fixture
def client(seed_store):
    app.dependency_overrides[get_store] = lambda: seed_store
    app.dependency_overrides[get_rng] = lambda: random.Random(42)
    yield TestClient(app)
    app.dependency_overrides.clear()
