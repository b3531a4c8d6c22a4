from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, Field, SerializerFunctionWrapHandler, model_serializer

from ..products.models import Product

NonEmptyStr = Annotated[str, Field(min_length=1)]


class RecommendationRequest(BaseModel):
    symptoms: list[NonEmptyStr] = Field(..., min_length=1, description='e.g. ["flu", "fatigue"]')
    allergies: list[NonEmptyStr] = Field(default_factory=list)


class SymptomMapping(BaseModel):
    id: str | None = None
    symptom: str
    recommended_ingredients: list[str] = Field(default_factory=list)
    avoid_ingredients: list[str] = Field(default_factory=list)
    description: str | None = None


class RecommendationItem(Product):
    recommendation_score: int
    matched_ingredients: list[str] = Field(default_factory=list)
    has_avoided_ingredients: bool = False
    recommendation_reasons: list[str] = Field(default_factory=list)


class RecommendationData(BaseModel):
    recommendations: list[RecommendationItem]
    symptoms_analyzed: list[str]
    allergies_considered: list[str]
    total_products_analyzed: int
    symptom_mappings_found: int | None = None

    @model_serializer(mode="wrap")
    def _omit_mapping_count_on_fallback(
        self, handler: SerializerFunctionWrapHandler,
    ) -> dict[str, Any]:
        data = handler(self)
        if data.get("symptom_mappings_found") is None:
            data.pop("symptom_mappings_found", None)
        return data


class RecommendationResponse(BaseModel):
    success: bool = True
    message: str
    data: RecommendationData


class SymptomInfo(BaseModel):
    symptom: str
    description: str | None = None


class SymptomListResponse(BaseModel):
    success: bool = True
    data: list[SymptomInfo]


class HealthBenefitListResponse(BaseModel):
    success: bool = True
    data: list[str]
