from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated, Any

from pydantic import BaseModel, Field, PlainSerializer

CENT = Decimal("0.01")

# Exact to the cent in Python, a plain JSON number on the wire
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


def to_money(value: Any) -> Decimal:
    """Round to the cent, reading floats by their decimal spelling."""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


class Product(BaseModel):
    id: str
    name: str
    description: str | None = None
    category: str = "juice"
    price_per_litre: Money = Field(..., ge=0)
    ingredients: list[str] = Field(default_factory=list)
    health_benefits: list[str] = Field(default_factory=list)
    allergens: list[str] = Field(default_factory=list)
    nutritional_info: dict[str, float] = Field(default_factory=dict)
    image_url: str | None = None
    is_available: bool = True
    created_at: datetime | None = None


class Pagination(BaseModel):
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int
    has_next_page: bool | None = None
    has_prev_page: bool | None = None


class ProductListResponse(BaseModel):
    success: bool = True
    data: list[Product]
    pagination: Pagination | None = None
    search_query: str | None = None


class ProductResponse(BaseModel):
    success: bool = True
    data: Product


class CategoryListResponse(BaseModel):
    success: bool = True
    data: list[str]
