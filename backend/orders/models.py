from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from ..products.models import Money, Pagination, Product


class OrderStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    preparing = "preparing"
    out_for_delivery = "out_for_delivery"
    delivered = "delivered"
    cancelled = "cancelled"


class PaymentMethod(str, Enum):
    cash = "cash"
    mobile_money = "mobile_money"
    card = "card"


class OrderItemIn(BaseModel):
    product_id: str = Field(..., min_length=1)
    quantity_litres: float = Field(..., gt=0, le=10)


class DeliveryAddress(BaseModel):
    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    district: str = Field(..., min_length=1)


class CreateOrderRequest(BaseModel):
    items: list[OrderItemIn] = Field(..., min_length=1)
    delivery_address: DeliveryAddress
    delivery_lat: float = Field(..., ge=-90, le=90)
    delivery_lng: float = Field(..., ge=-180, le=180)
    payment_method: PaymentMethod = PaymentMethod.cash
    notes: str | None = Field(default=None, max_length=500)


class ReorderRequest(BaseModel):
    delivery_address: DeliveryAddress | None = None
    delivery_lat: float | None = Field(default=None, ge=-90, le=90)
    delivery_lng: float | None = Field(default=None, ge=-180, le=180)
    payment_method: PaymentMethod | None = None


class RiderInfo(BaseModel):
    name: str
    phone: str
    rating: float


class OutletInfo(BaseModel):
    name: str
    address: str
    phone: str | None = None


class OrderItemOut(BaseModel):
    id: str
    order_id: str
    product_id: str
    quantity_litres: float
    unit_price: Money
    subtotal: Money
    created_at: datetime | None = None
    products: Product | None = None


class Order(BaseModel):
    id: str
    user_id: str
    outlet_id: str
    total_amount: Money
    delivery_fee: Money
    status: OrderStatus = OrderStatus.pending
    payment_method: PaymentMethod = PaymentMethod.cash
    payment_status: str = "pending"
    delivery_address: DeliveryAddress | None = None
    delivery_lat: float | None = None
    delivery_lng: float | None = None
    estimated_delivery_time: datetime | None = None
    rider_info: RiderInfo | None = None
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    order_items: list[OrderItemOut] = Field(default_factory=list)
    outlets: OutletInfo | None = None


class OrderTracking(BaseModel):
    order_id: str
    status: OrderStatus
    status_message: str
    progress_percentage: int
    estimated_delivery_time: datetime | None = None
    time_remaining: str | None = None
    time_remaining_minutes: int | None = None
    rider_info: RiderInfo | None = None
    outlet: OutletInfo | None = None
    created_at: datetime | None = None


class OrderResponse(BaseModel):
    success: bool = True
    message: str | None = None
    data: Order


class OrderListResponse(BaseModel):
    success: bool = True
    data: list[Order]
    pagination: Pagination


class OrderTrackingResponse(BaseModel):
    success: bool = True
    data: OrderTracking


class MessageResponse(BaseModel):
    success: bool = True
    message: str
