"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List

from ...models.domain import ParkingMeter, Stop


class PlanType(str, Enum):
    CHEAPEST = "cheapest"
    FASTEST = "fastest"
    HYBRID = "hybrid"


@dataclass(frozen=True, slots=True)
class StopVisit:
    stop: Stop
    arrival_time: datetime
    departure_time: datetime


@dataclass(frozen=True, slots=True)
class RouteSegment:
    from_stop: StopVisit
    to_stop: StopVisit
    parking_meter: ParkingMeter
    travel_time_minutes: int
    parking_cost: float
    walking_time_minutes: int


@dataclass(frozen=True, slots=True)
class RouteCandidate:
    stops: tuple[Stop, ...]
    segments: tuple[RouteSegment, ...]
    total_cost: float
    total_time_minutes: int
    hybrid_score: float
    index: int = 0


@dataclass(slots=True)
class TripPlan:
    plan_type: PlanType
    total_cost: float
    total_time_minutes: int
    route: List[RouteSegment]
    metadata: dict = field(default_factory=dict)
