from __future__ import annotations

import logging
from typing import Any

import pandas as pd

from ..products.models import to_money
from .config import DEFAULT_STORE_CONFIG, StoreConfig
from .memory_store import InMemoryStore

logger = logging.getLogger(__name__)

# Multi-valued columns are stored ";"-separated in the seed CSVs
_LIST_COLUMNS: dict[str, list[str]] = {
    "products": ["ingredients", "health_benefits", "allergens"],
    "symptoms_ingredients": ["recommended_ingredients", "avoid_ingredients"],
}
_NUTRITION_COLUMNS = [
    "calories_per_100ml",
    "sugar_per_100ml",
    "protein_per_100ml",
    "fat_per_100ml",
]
_OPTIONAL_TEXT_COLUMNS = ["description", "image_url", "phone"]

_store: InMemoryStore | None = None


def _split(value: str) -> list[str]:
    return [part.strip() for part in str(value).split(";") if part.strip()]


def _records(df: pd.DataFrame, table: str) -> list[dict[str, Any]]:
    for column in _LIST_COLUMNS.get(table, []):
        df[column] = df[column].apply(_split)

    if "created_at" in df.columns:
        df["created_at"] = pd.to_datetime(df["created_at"], utc=True)

    records = df.to_dict(orient="records")
    for record in records:
        for column in _OPTIONAL_TEXT_COLUMNS:
            if record.get(column) == "":
                record[column] = None
        if "created_at" in record:
            record["created_at"] = record["created_at"].to_pydatetime()
    return records


def _load_products(config: StoreConfig) -> list[dict[str, Any]]:
    df = pd.read_csv(
        config.products_path,
        keep_default_na=False,
        converters={"price_per_litre": to_money},
    )

    # Fold the flat nutrition columns into a single dict per product
    df["nutritional_info"] = df[_NUTRITION_COLUMNS].to_dict(orient="records")
    df = df.drop(columns=_NUTRITION_COLUMNS)

    return _records(df, "products")


def _load_outlets(config: StoreConfig) -> list[dict[str, Any]]:
    df = pd.read_csv(config.outlets_path, keep_default_na=False, dtype={"phone": str})
    df["lat"] = df["lat"].astype(float)
    df["lng"] = df["lng"].astype(float)
    return _records(df, "outlets")


def _load_symptoms(config: StoreConfig) -> list[dict[str, Any]]:
    df = pd.read_csv(config.symptoms_path, keep_default_na=False)
    df["symptom"] = df["symptom"].str.strip().str.casefold()
    return _records(df, "symptoms_ingredients")


def load_seed_store(config: StoreConfig = DEFAULT_STORE_CONFIG) -> InMemoryStore:
    """Build a fresh store populated from the seed CSVs."""
    tables = {
        "products": _load_products(config),
        "outlets": _load_outlets(config),
        "symptoms_ingredients": _load_symptoms(config),
    }
    logger.info(
        "Seeded store with %d products, %d outlets, %d symptom mappings",
        len(tables["products"]),
        len(tables["outlets"]),
        len(tables["symptoms_ingredients"]),
    )
    return InMemoryStore(tables)


def get_store() -> InMemoryStore:
    """Return the process-wide store, seeding it on first call."""
    global _store
    if _store is None:
        _store = load_seed_store()
    return _store


def reset_store() -> None:
    global _store
    _store = None
