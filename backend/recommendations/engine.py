"""
Rule-based scoring of catalog products against reported symptoms.

Scoring per product, starting from 0:

* every ingredient on the avoid list (symptom avoids + allergies): -10, and
  the product is flagged so it can never be recommended;
* every ingredient on the recommended list: +5;
* every (health benefit, symptom) pair where either text contains the
  other, case-insensitively: +3.

Flagged products and products scoring <= 0 are dropped, the rest are ranked
by score (ties keep catalog order) and the top three are returned.  When no
product qualifies, up to three conflict-free products are sampled at random
instead.  The sample is not ranked.
"""
from __future__ import annotations

import random
from dataclasses import dataclass

from ..errors import InvalidInput
from ..products.models import Product
from .models import RecommendationData, RecommendationItem, SymptomMapping

MAX_RECOMMENDATIONS = 3
AVOIDED_INGREDIENT_PENALTY = 10
RECOMMENDED_INGREDIENT_BONUS = 5
HEALTH_BENEFIT_BONUS = 3

DEFAULT_REASON = "Nutritious and refreshing choice"
FALLBACK_REASONS = ("General wellness support", "No conflicting ingredients")


@dataclass(frozen=True)
class RecommendationOutcome:
    data: RecommendationData
    is_fallback: bool


def _overlaps(benefit: str, symptom: str) -> bool:
    return benefit in symptom or symptom in benefit


def _collect_ingredients(
    symptoms: list[str],
    allergies: list[str],
    symptom_map: list[SymptomMapping],
) -> tuple[set[str], set[str], list[SymptomMapping]]:
    """Return (recommended, avoided, matched mappings), all case-folded."""
    wanted = {s.casefold() for s in symptoms}
    matched = [m for m in symptom_map if m.symptom.casefold() in wanted]

    recommended: set[str] = set()
    avoided: set[str] = set()
    for mapping in matched:
        recommended.update(i.casefold() for i in mapping.recommended_ingredients)
        avoided.update(i.casefold() for i in mapping.avoid_ingredients)

    # Allergies are avoided whether or not any symptom matched
    avoided.update(a.casefold() for a in allergies)
    return recommended, avoided, matched


def _build_reasons(
    matched_ingredients: list[str],
    health_benefits: list[str],
    symptoms_folded: list[str],
) -> list[str]:
    reasons: list[str] = []
    if matched_ingredients:
        reasons.append(f"Contains beneficial ingredients: {', '.join(matched_ingredients)}")

    relevant = [
        b for b in health_benefits
        if any(_overlaps(b.casefold(), s) for s in symptoms_folded)
    ]
    if relevant:
        reasons.append(f"Supports: {', '.join(relevant)}")

    if not reasons:
        reasons.append(DEFAULT_REASON)
    return reasons


def score_product(
    product: Product,
    recommended: set[str],
    avoided: set[str],
    symptoms: list[str],
) -> RecommendationItem:
    symptoms_folded = [s.casefold() for s in symptoms]
    score = 0
    matched: list[str] = []
    has_avoided = False

    for ingredient in product.ingredients:
        folded = ingredient.casefold()
        if folded in avoided:
            has_avoided = True
            score -= AVOIDED_INGREDIENT_PENALTY
        if folded in recommended:
            score += RECOMMENDED_INGREDIENT_BONUS
            matched.append(ingredient)

    for benefit in product.health_benefits:
        folded = benefit.casefold()
        for symptom in symptoms_folded:
            if _overlaps(folded, symptom):
                score += HEALTH_BENEFIT_BONUS

    return RecommendationItem(
        **product.model_dump(),
        recommendation_score=score,
        matched_ingredients=matched,
        has_avoided_ingredients=has_avoided,
        recommendation_reasons=_build_reasons(matched, product.health_benefits, symptoms_folded),
    )


def _fallback(
    catalog: list[Product], avoided: set[str], rng: random.Random,
) -> list[RecommendationItem]:
    eligible = [
        p for p in catalog
        if not any(i.casefold() in avoided for i in p.ingredients)
    ]
    picked = rng.sample(eligible, min(MAX_RECOMMENDATIONS, len(eligible)))
    return [
        RecommendationItem(
            **p.model_dump(),
            recommendation_score=1,
            matched_ingredients=[],
            has_avoided_ingredients=False,
            recommendation_reasons=list(FALLBACK_REASONS),
        )
        for p in picked
    ]


def recommend(
    symptoms: list[str],
    allergies: list[str],
    catalog: list[Product],
    symptom_map: list[SymptomMapping],
    rng: random.Random | None = None,
) -> RecommendationOutcome:
    """Rank ``catalog`` (available products only) for the given symptoms."""
    if not isinstance(symptoms, (list, tuple)) or not symptoms:
        raise InvalidInput("At least one symptom is required")
    allergies = list(allergies or [])
    rng = rng or random.Random()

    recommended, avoided, matched_mappings = _collect_ingredients(
        list(symptoms), allergies, symptom_map,
    )

    scored = [score_product(p, recommended, avoided, list(symptoms)) for p in catalog]
    qualifying = [
        item for item in scored
        if not item.has_avoided_ingredients and item.recommendation_score > 0
    ]
    qualifying.sort(key=lambda item: item.recommendation_score, reverse=True)
    top = qualifying[:MAX_RECOMMENDATIONS]

    if not top:
        return RecommendationOutcome(
            data=RecommendationData(
                recommendations=_fallback(catalog, avoided, rng),
                symptoms_analyzed=list(symptoms),
                allergies_considered=allergies,
                total_products_analyzed=len(catalog),
            ),
            is_fallback=True,
        )

    return RecommendationOutcome(
        data=RecommendationData(
            recommendations=top,
            symptoms_analyzed=list(symptoms),
            allergies_considered=allergies,
            total_products_analyzed=len(catalog),
            symptom_mappings_found=len(matched_mappings),
        ),
        is_fallback=False,
    )
