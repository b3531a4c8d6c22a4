from __future__ import annotations

import copy
import threading
import uuid
from datetime import datetime, timezone
from typing import Any

from .base import Predicate, Row, StoreError

TABLES = ("products", "outlets", "symptoms_ingredients", "orders", "order_items")


class InMemoryStore:
    """Thread-safe in-process implementation of the table client.

    Rows go in and come out as deep copies so callers can never mutate
    stored state behind the store's back.
    """

    def __init__(self, tables: dict[str, list[Row]] | None = None) -> None:
        self._lock = threading.Lock()
        self._tables: dict[str, list[Row]] = {name: [] for name in TABLES}
        for name, rows in (tables or {}).items():
            self._tables[name] = [copy.deepcopy(r) for r in rows]

    def _table(self, table: str) -> list[Row]:
        try:
            return self._tables[table]
        except KeyError:
            raise StoreError(f"Unknown table: {table}") from None

    @staticmethod
    def _matches(row: Row, predicate: Predicate | None, filters: dict[str, Any]) -> bool:
        for column, expected in filters.items():
            if row.get(column) != expected:
                return False
        return predicate is None or predicate(row)

    def fetch_by_id(self, table: str, row_id: str, **filters: Any) -> Row | None:
        with self._lock:
            for row in self._table(table):
                if row.get("id") == row_id and self._matches(row, None, filters):
                    return copy.deepcopy(row)
        return None

    def fetch_all(
        self, table: str, predicate: Predicate | None = None, **filters: Any,
    ) -> list[Row]:
        with self._lock:
            return [
                copy.deepcopy(row)
                for row in self._table(table)
                if self._matches(row, predicate, filters)
            ]

    def insert(self, table: str, rows: list[Row]) -> list[Row]:
        now = datetime.now(timezone.utc)
        created: list[Row] = []
        with self._lock:
            target = self._table(table)
            for row in rows:
                stored = copy.deepcopy(row)
                stored.setdefault("id", str(uuid.uuid4()))
                stored.setdefault("created_at", now)
                target.append(stored)
                created.append(copy.deepcopy(stored))
        return created

    def update(self, table: str, row_id: str, changes: Row) -> Row | None:
        with self._lock:
            for row in self._table(table):
                if row.get("id") == row_id:
                    row.update(copy.deepcopy(changes))
                    return copy.deepcopy(row)
        return None

    def delete(self, table: str, row_id: str) -> bool:
        with self._lock:
            target = self._table(table)
            for i, row in enumerate(target):
                if row.get("id") == row_id:
                    del target[i]
                    return True
        return False
