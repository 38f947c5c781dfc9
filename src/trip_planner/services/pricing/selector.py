"""Cheapest feasible meter selection for a single stop."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Sequence

from ...errors import NoFeasibleParking
from ...models.domain import ParkingMeter
from .calculator import PricingCalculator


class OptimalMeterSelector:
    """Picks the cheapest meter whose stay limit at arrival covers the visit.

    Costs are recomputed on every call. Ties keep the meter seen first.
    """

    def __init__(self, calculator: PricingCalculator, logger: logging.Logger | None = None) -> None:
        self.calculator = calculator
        self.logger = logger or logging.getLogger(__name__)

    def feasible(self, meters: Sequence[ParkingMeter], arrival: datetime, duration_minutes: int) -> list[ParkingMeter]:
        return [
            meter
            for meter in meters
            if self.calculator.rate_at(meter.schedule, arrival).allows(duration_minutes)
        ]

    def select(
        self,
        meters: Sequence[ParkingMeter],
        arrival: datetime,
        duration_minutes: int,
        *,
        stop_id: str = "",
    ) -> tuple[ParkingMeter, float]:
        best_meter: ParkingMeter | None = None
        best_cost = float("inf")
        for meter in self.feasible(meters, arrival, duration_minutes):
            cost = self.calculator.cost(meter.schedule, arrival, duration_minutes)
            if cost < best_cost:
                best_meter = meter
                best_cost = cost

        if best_meter is None:
            self.logger.debug(
                "No feasible meter among %d for stop %s at %s", len(meters), stop_id, arrival.isoformat()
            )
            raise NoFeasibleParking(stop_id, duration_minutes)
        return best_meter, best_cost
