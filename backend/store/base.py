from __future__ import annotations

from typing import Any, Callable, Protocol

Row = dict[str, Any]
Predicate = Callable[[Row], bool]


class StoreError(Exception):
    """Raised by a store implementation when a call cannot be served."""


class Store(Protocol):
    """Generic table client.

    Every method either returns its result or raises :class:`StoreError`.
    Keyword ``filters`` are equality matches on column values; ``predicate``
    covers anything richer (case-insensitive lookups, substring search).
    """

    def fetch_by_id(self, table: str, row_id: str, **filters: Any) -> Row | None: ...

    def fetch_all(
        self, table: str, predicate: Predicate | None = None, **filters: Any,
    ) -> list[Row]: ...

    def insert(self, table: str, rows: list[Row]) -> list[Row]: ...

    def update(self, table: str, row_id: str, changes: Row) -> Row | None: ...

    def delete(self, table: str, row_id: str) -> bool: ...
