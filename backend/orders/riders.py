from __future__ import annotations

import random
from typing import Any

# Demo roster; real dispatch is handled outside this service
DEMO_RIDERS: tuple[dict[str, Any], ...] = (
    {"name": "Kato", "phone": "+256700123456", "rating": 4.8},
    {"name": "Nakato", "phone": "+256700123457", "rating": 4.9},
    {"name": "Ssemakula", "phone": "+256700123458", "rating": 4.7},
    {"name": "Namukasa", "phone": "+256700123459", "rating": 4.6},
    {"name": "Mukasa", "phone": "+256700123460", "rating": 4.8},
)


def assign_rider(rng: random.Random | None = None) -> dict[str, Any]:
    """Pick a demo rider at random."""
    return dict((rng or random).choice(DEMO_RIDERS))
