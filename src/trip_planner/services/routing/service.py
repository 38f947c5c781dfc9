"""Trip planning orchestration service."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional, Sequence

from ...config import settings
from ...data.parking_repository import VancouverParkingRepository
from ...errors import ConfigurationError
from ...models.domain import ParkingMeter, Preferences, Stop
from ...schemas.trips import PreferencesRequest, TripPlanRequest, TripPlanResponse
from ..geospatial import haversine_km
from ..maps.google_client import GoogleMapsClient
from ..outputs.plan_formatter import plans_to_models
from ..pricing.calculator import resolve_timezone
from .base import MapsProvider, ParkingDataProvider
from .planner import TripPlanner

logger = logging.getLogger(__name__)


def validate_preferences(preferences: Optional[PreferencesRequest]) -> Preferences:
    if preferences is None:
        return Preferences(cost_weight=settings.default_cost_weight, time_weight=settings.default_time_weight)
    total_weight = preferences.cost_weight + preferences.time_weight
    if total_weight < settings.min_weight_sum or total_weight > settings.max_weight_sum:
        raise ValueError("cost_weight and time_weight must sum to approximately 1.0")
    return Preferences(cost_weight=preferences.cost_weight, time_weight=preferences.time_weight)


def _resolve_timezone_name(name: Optional[str]) -> str:
    timezone_name = name or settings.default_timezone
    try:
        resolve_timezone(timezone_name)
    except ConfigurationError as exc:
        raise ValueError(str(exc)) from exc
    return timezone_name


def _build_stops(payload: TripPlanRequest) -> list[Stop]:
    stops: list[Stop] = []
    seen: set[str] = set()
    for index, item in enumerate(payload.stops):
        stop_id = (item.id or "").strip() or f"stop_{index + 1}"
        if stop_id in seen:
            raise ValueError(f"Duplicate stop id '{stop_id}'.")
        seen.add(stop_id)
        has_coordinates = item.lat is not None and item.lng is not None and not (item.lat == 0 and item.lng == 0)
        stops.append(
            Stop(
                stop_id=stop_id,
                address=item.address,
                duration_minutes=item.duration_minutes,
                lat=item.lat if has_coordinates else None,
                lng=item.lng if has_coordinates else None,
            )
        )
    return stops


def _resolve_coordinates(stops: Sequence[Stop], maps: MapsProvider) -> None:
    """Geocode stops lacking coordinates. Failures are fatal for the request."""
    for stop in stops:
        if stop.resolved:
            continue
        location = maps.geocode(stop.address)
        stop.lat, stop.lng = location.lat, location.lng
        logger.info(f"Geocoded '{stop.address}' to ({location.lat:.6f}, {location.lng:.6f})")


def _fetch_parking_options(
    stops: Sequence[Stop],
    parking: ParkingDataProvider,
) -> dict[str, list[ParkingMeter]]:
    """Nearby meters per stop, trimmed to the closest ``max_meters_per_stop``."""
    options: dict[str, list[ParkingMeter]] = {}
    for stop in stops[1:]:
        meters = list(parking.nearby_meters(stop.lat, stop.lng, settings.parking_search_radius_km))
        meters.sort(key=lambda meter: haversine_km(stop.lat, stop.lng, meter.lat, meter.lng))
        if len(meters) > settings.max_meters_per_stop:
            logger.info(f"Limiting {len(meters)} meters to closest {settings.max_meters_per_stop} for stop {stop.stop_id}")
            meters = meters[: settings.max_meters_per_stop]
        options[stop.stop_id] = meters
    return options


def plan_trip(payload: TripPlanRequest, *, request_id: Optional[str] = None) -> TripPlanResponse:
    preferences = validate_preferences(payload.preferences)
    timezone_name = _resolve_timezone_name(payload.timezone)
    stops = _build_stops(payload)
    logger.info(f"Planning trip with {len(stops)} stops starting {payload.start_time.isoformat()}")

    maps = GoogleMapsClient()
    parking = VancouverParkingRepository()

    _resolve_coordinates(stops, maps)
    parking_options = _fetch_parking_options(stops, parking)

    planner = TripPlanner(maps, timezone=timezone_name, logger=logger)
    plans = planner.plan(stops, parking_options, payload.start_time, preferences)

    metadata = {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "stops_count": len(stops),
        "timezone": timezone_name,
        "optimization_weights": {
            "cost": preferences.cost_weight,
            "time": preferences.time_weight,
        },
        "exhaustive_search": planner.enumerator.is_exhaustive(stops),
    }
    if request_id:
        metadata["request_id"] = request_id

    return TripPlanResponse(plans=plans_to_models(plans), metadata=metadata)
