from __future__ import annotations

import logging
import random
import time

from ..errors import StoreUnavailable
from ..products.models import Product
from ..store.base import Store, StoreError
from .engine import recommend
from .models import (
    RecommendationRequest,
    RecommendationResponse,
    SymptomInfo,
    SymptomMapping,
)

logger = logging.getLogger(__name__)

SCORED_MESSAGE = "Recommendations generated successfully"
FALLBACK_MESSAGE = "No specific matches found. Here are some general recommendations."


def get_recommendations(
    request: RecommendationRequest,
    store: Store,
    rng: random.Random | None = None,
    user_id: str | None = None,
) -> RecommendationResponse:
    start_time = time.time()
    wanted = {s.casefold() for s in request.symptoms}

    try:
        mappings = store.fetch_all(
            "symptoms_ingredients", lambda row: row["symptom"].casefold() in wanted,
        )
    except StoreError as exc:
        logger.error("Get symptom mappings failed: %s", exc)
        raise StoreUnavailable("Failed to fetch symptom mappings") from exc

    try:
        products = store.fetch_all("products", is_available=True)
    except StoreError as exc:
        logger.error("Get products failed: %s", exc)
        raise StoreUnavailable("Failed to fetch products") from exc

    outcome = recommend(
        request.symptoms,
        request.allergies,
        [Product(**p) for p in products],
        [SymptomMapping(**m) for m in mappings],
        rng=rng,
    )

    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    logger.info(
        "Recommended %d of %d products for user=%s symptoms=%s (fallback=%s, %.1f ms)",
        len(outcome.data.recommendations),
        len(products),
        user_id or "anonymous",
        request.symptoms,
        outcome.is_fallback,
        elapsed_ms,
    )

    return RecommendationResponse(
        message=FALLBACK_MESSAGE if outcome.is_fallback else SCORED_MESSAGE,
        data=outcome.data,
    )


def list_available_symptoms(store: Store) -> list[SymptomInfo]:
    try:
        rows = store.fetch_all("symptoms_ingredients")
    except StoreError as exc:
        logger.error("Get available symptoms failed: %s", exc)
        raise StoreUnavailable("Failed to fetch available symptoms") from exc
    rows.sort(key=lambda r: r["symptom"])
    return [SymptomInfo(symptom=r["symptom"], description=r.get("description")) for r in rows]


def list_health_benefits(store: Store) -> list[str]:
    try:
        products = store.fetch_all("products", is_available=True)
    except StoreError as exc:
        logger.error("Get health benefits failed: %s", exc)
        raise StoreUnavailable("Failed to fetch health benefits") from exc
    return sorted({b for p in products for b in p.get("health_benefits", [])})
