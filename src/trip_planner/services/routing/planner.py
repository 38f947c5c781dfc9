"""Planning core: enumerate orderings, evaluate them in parallel, pick plans."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from datetime import datetime
from typing import Mapping, Sequence

from ...config import settings
from ...models.domain import ParkingMeter, Preferences, Stop
from ..pricing.calculator import PricingCalculator
from ..pricing.selector import OptimalMeterSelector
from .base import MapsProvider
from .deadline import Deadline
from .enumerator import RouteEnumerator
from .evaluator import RouteEvaluator
from .models import RouteCandidate, TripPlan
from .selector import PlanSelector


class TripPlanner:
    """Stateless across requests; every call to :meth:`plan` builds its own evaluator and deadline."""

    def __init__(
        self,
        maps: MapsProvider,
        *,
        timezone: str | None = None,
        max_exhaustive_stops: int | None = None,
        max_workers: int | None = None,
        deadline_seconds: float | None = None,
        walking_speed_kmh: float | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.logger = logger or logging.getLogger(__name__)
        self.maps = maps
        self.calculator = PricingCalculator(timezone, logger=self.logger)
        self.meter_selector = OptimalMeterSelector(self.calculator, logger=self.logger)
        self.enumerator = RouteEnumerator(max_exhaustive_stops, logger=self.logger)
        self.plan_selector = PlanSelector(logger=self.logger)
        self.max_workers = max_workers or settings.max_parallel_evaluations
        self.deadline_seconds = deadline_seconds or settings.planning_deadline_seconds
        self.walking_speed_kmh = walking_speed_kmh or settings.walking_speed_kmh

    def plan(
        self,
        stops: Sequence[Stop],
        parking_options: Mapping[str, Sequence[ParkingMeter]],
        start_time: datetime,
        preferences: Preferences,
    ) -> list[TripPlan]:
        if len(stops) < 2:
            raise ValueError("At least 2 stops are required.")

        evaluator = RouteEvaluator(
            self.maps,
            self.meter_selector,
            parking_options=parking_options,
            start_time=self.calculator.localize(start_time),
            preferences=preferences,
            walking_speed_kmh=self.walking_speed_kmh,
            logger=self.logger,
        )
        candidates = self.evaluate_all(stops, evaluator, Deadline(self.deadline_seconds))
        return self.plan_selector.select(candidates)

    def evaluate_all(
        self,
        stops: Sequence[Stop],
        evaluator: RouteEvaluator,
        deadline: Deadline,
    ) -> list[RouteCandidate]:
        """Evaluate every ordering and return survivors in generation order."""
        orderings = list(self.enumerator.orderings(stops))
        self.logger.info(
            "Evaluating %d ordering(s) for %d stops with up to %d workers",
            len(orderings),
            len(stops),
            self.max_workers,
        )

        # One slot per ordering keeps generation order independent of completion order.
        slots: list[RouteCandidate | None] = [None] * len(orderings)
        executor = ThreadPoolExecutor(max_workers=max(1, min(self.max_workers, len(orderings))))
        try:
            future_to_index = {
                executor.submit(evaluator.evaluate, ordering, index=index, deadline=deadline): index
                for index, ordering in enumerate(orderings)
            }
            done, not_done = wait(future_to_index, timeout=deadline.remaining())
            if not_done:
                self.logger.warning(
                    "Planning deadline reached with %d of %d ordering(s) unfinished; discarding them",
                    len(not_done),
                    len(orderings),
                )
            for future in done:
                slots[future_to_index[future]] = future.result()
        finally:
            deadline.cancel()
            executor.shutdown(wait=False, cancel_futures=True)

        candidates = [candidate for candidate in slots if candidate is not None]
        self.logger.info("%d of %d ordering(s) produced a feasible route", len(candidates), len(orderings))
        return candidates
