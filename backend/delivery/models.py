from __future__ import annotations

from pydantic import BaseModel, Field


class Outlet(BaseModel):
    id: str
    name: str
    address: str
    lat: float
    lng: float
    phone: str | None = None
    is_active: bool = True


class OutletSummary(BaseModel):
    id: str
    name: str
    address: str


class NearestOutletOut(OutletSummary):
    distance_km: str = Field(..., description="Distance rounded to 2 decimals")


class DeliveryFeeData(BaseModel):
    nearest_outlet: NearestOutletOut
    delivery_fee: int
    estimated_delivery_minutes: int
    delivery_available: bool


class DeliveryAvailabilityData(BaseModel):
    delivery_available: bool
    distance_km: str | None
    max_delivery_distance: float
    nearest_outlet: OutletSummary | None
    message: str


class DeliveryFeeResponse(BaseModel):
    success: bool = True
    data: DeliveryFeeData


class DeliveryAvailabilityResponse(BaseModel):
    success: bool = True
    data: DeliveryAvailabilityData


class OutletListResponse(BaseModel):
    success: bool = True
    data: list[Outlet]


class OutletResponse(BaseModel):
    success: bool = True
    data: Outlet
