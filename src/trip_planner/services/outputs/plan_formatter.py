"""Serializers from planning results to the wire schemas."""

from __future__ import annotations

from typing import Sequence

from ...models.domain import ParkingMeter, Period, WeekdayBucket
from ...schemas.trips import ParkingMeterModel, RouteSegmentModel, StopModel, TripPlanModel
from ..routing.models import RouteSegment, StopVisit, TripPlan


def visit_to_model(visit: StopVisit) -> StopModel:
    return StopModel(
        address=visit.stop.address,
        lat=visit.stop.lat,
        lng=visit.stop.lng,
        duration_minutes=visit.stop.duration_minutes,
        arrival_time=visit.arrival_time,
        departure_time=visit.departure_time,
    )


def meter_fields(meter: ParkingMeter) -> dict:
    return {
        "meter_id": meter.meter_id,
        "lat": meter.lat,
        "lng": meter.lng,
        "meter_type": meter.meter_type,
        "local_area": meter.local_area,
        "credit_card": meter.credit_card,
        "rate_mf_9a_6p": meter.schedule.rate(WeekdayBucket.MON_FRI, Period.DAY),
        "rate_mf_6p_10": meter.schedule.rate(WeekdayBucket.MON_FRI, Period.EVENING),
    }


def segment_to_model(segment: RouteSegment) -> RouteSegmentModel:
    return RouteSegmentModel(
        from_stop=visit_to_model(segment.from_stop),
        to_stop=visit_to_model(segment.to_stop),
        parking_meter=ParkingMeterModel(**meter_fields(segment.parking_meter)),
        travel_time_minutes=segment.travel_time_minutes,
        parking_cost=segment.parking_cost,
        walking_time_minutes=segment.walking_time_minutes,
    )


def plan_to_model(plan: TripPlan) -> TripPlanModel:
    return TripPlanModel(
        type=plan.plan_type.value,
        total_cost=plan.total_cost,
        total_time_minutes=plan.total_time_minutes,
        route=[segment_to_model(segment) for segment in plan.route],
        metadata=dict(plan.metadata),
    )


def plans_to_models(plans: Sequence[TripPlan]) -> list[TripPlanModel]:
    return [plan_to_model(plan) for plan in plans]
