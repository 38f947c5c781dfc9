"""Trip planning request/response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class StopRequest(BaseModel):
    id: Optional[str] = None
    address: str = Field(..., min_length=1)
    lat: Optional[float] = None
    lng: Optional[float] = None
    duration_minutes: int = Field(..., ge=1)


class PreferencesRequest(BaseModel):
    cost_weight: float = Field(..., ge=0.0, le=1.0)
    time_weight: float = Field(..., ge=0.0, le=1.0)


class TripPlanRequest(BaseModel):
    stops: List[StopRequest] = Field(..., min_length=2)
    start_time: datetime = Field(..., description="RFC 3339 instant, e.g. '2024-01-15T14:30:00-08:00'.")
    timezone: Optional[str] = Field(default=None, description="IANA timezone for meter rates.")
    preferences: Optional[PreferencesRequest] = None


class StopModel(BaseModel):
    address: str
    lat: float
    lng: float
    duration_minutes: int
    arrival_time: datetime
    departure_time: datetime


class ParkingMeterModel(BaseModel):
    meter_id: str
    lat: float
    lng: float
    meter_type: str
    local_area: str
    credit_card: bool
    rate_mf_9a_6p: float
    rate_mf_6p_10: float


class RouteSegmentModel(BaseModel):
    from_stop: StopModel
    to_stop: StopModel
    parking_meter: ParkingMeterModel
    travel_time_minutes: int
    parking_cost: float
    walking_time_minutes: int


class TripPlanModel(BaseModel):
    type: Literal["cheapest", "fastest", "hybrid"]
    total_cost: float
    total_time_minutes: int
    route: List[RouteSegmentModel]
    metadata: dict


class TripPlanResponse(BaseModel):
    plans: List[TripPlanModel]
    metadata: dict


class MeterInfoModel(ParkingMeterModel):
    distance_km: float
    active_rate: float
    active_time_limit_hours: int


class ParkingInfoResponse(BaseModel):
    lat: float
    lng: float
    radius_km: float
    at: datetime
    meters: List[MeterInfoModel]
