"""Nearby parking lookup with the rate active at a given instant."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from ..config import settings
from ..data.parking_repository import VancouverParkingRepository
from ..schemas.trips import MeterInfoModel, ParkingInfoResponse
from .geospatial import haversine_km
from .outputs.plan_formatter import meter_fields
from .pricing.calculator import PricingCalculator


def describe_nearby_parking(
    lat: float,
    lng: float,
    radius_km: Optional[float] = None,
    at: Optional[datetime] = None,
) -> ParkingInfoResponse:
    radius = radius_km or settings.parking_search_radius_km
    calculator = PricingCalculator()
    instant = calculator.localize(at or datetime.now(timezone.utc))

    meters = VancouverParkingRepository().nearby_meters(lat, lng, radius)
    items = []
    for meter in meters[: settings.max_meters_per_stop]:
        active = calculator.rate_at(meter.schedule, instant)
        items.append(
            MeterInfoModel(
                **meter_fields(meter),
                distance_km=haversine_km(lat, lng, meter.lat, meter.lng),
                active_rate=active.rate,
                active_time_limit_hours=active.max_stay_hours,
            )
        )
    return ParkingInfoResponse(lat=lat, lng=lng, radius_km=radius, at=instant, meters=items)
