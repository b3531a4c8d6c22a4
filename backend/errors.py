"""
Error taxonomy shared by every service.

Each error carries the HTTP status it maps to and a short ``kind`` tag that
ends up in the ``error`` field of the JSON error envelope, so callers can tell
a business-rule rejection apart from a store failure without parsing text.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class FruityGulpError(Exception):
    status_code: int = 500
    kind: str = "internal_error"
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, **details: Any) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class InvalidInput(FruityGulpError):
    status_code = 400
    kind = "invalid_input"
    default_message = "Validation error"


class NotFound(FruityGulpError):
    status_code = 404
    kind = "not_found"
    default_message = "Resource not found"


class NoOutletAvailable(FruityGulpError):
    status_code = 404
    kind = "no_outlet_available"
    default_message = "No outlets available in your area"


class ProductUnavailable(FruityGulpError):
    status_code = 400
    kind = "product_unavailable"

    def __init__(self, product_id: str) -> None:
        super().__init__(
            f"Product {product_id} not found or unavailable", product_id=product_id,
        )
        self.product_id = product_id


class OrderCreationFailed(FruityGulpError):
    status_code = 500
    kind = "order_creation_failed"
    default_message = "Failed to create order"


class OrderItemsCreationFailed(FruityGulpError):
    status_code = 500
    kind = "order_items_creation_failed"
    default_message = "Failed to create order items"


class InvalidStateTransition(FruityGulpError):
    status_code = 400
    kind = "invalid_state_transition"
    default_message = "Order cannot be cancelled at this stage"


class StoreUnavailable(FruityGulpError):
    status_code = 503
    kind = "store_unavailable"
    default_message = "Data store is unavailable"


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    error: str
    errors: list[dict[str, str]] | None = None
    product_id: str | None = None
