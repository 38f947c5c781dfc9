"""Scores one stop ordering end-to-end."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Mapping, Sequence

from ...config import settings
from ...errors import CollaboratorError, DeadlineExceeded, NoFeasibleParking
from ...models.domain import ParkingMeter, Preferences, Stop
from ..geospatial import walking_minutes
from ..pricing.calculator import add_elapsed_minutes
from ..pricing.selector import OptimalMeterSelector
from .base import MapsProvider
from .deadline import Deadline
from .models import RouteCandidate, RouteSegment, StopVisit


def hybrid_score(total_cost: float, total_time_minutes: int, preferences: Preferences) -> float:
    """Weighted cost plus weighted time in hours. Lower is better."""
    return preferences.cost_weight * total_cost + preferences.time_weight * (total_time_minutes / 60.0)


class RouteEvaluator:
    """Walks an ordering with a running clock, parking each stop independently.

    For every consecutive pair the clock advances by the drive time, the
    cheapest feasible meter is chosen at that instant, then the clock moves
    past the walk and the visit. Any collaborator failure, unparkable stop or
    expired deadline discards only the ordering being evaluated.
    """

    def __init__(
        self,
        maps: MapsProvider,
        meter_selector: OptimalMeterSelector,
        *,
        parking_options: Mapping[str, Sequence[ParkingMeter]],
        start_time: datetime,
        preferences: Preferences,
        walking_speed_kmh: float | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.maps = maps
        self.meter_selector = meter_selector
        self.parking_options = parking_options
        self.start_time = start_time
        self.preferences = preferences
        self.walking_speed_kmh = walking_speed_kmh or settings.walking_speed_kmh
        self.logger = logger or logging.getLogger(__name__)

    def evaluate(
        self,
        ordering: Sequence[Stop],
        *,
        index: int = 0,
        deadline: Deadline | None = None,
    ) -> RouteCandidate | None:
        try:
            return self._build_candidate(ordering, index, deadline or Deadline.never())
        except (CollaboratorError, NoFeasibleParking, DeadlineExceeded) as exc:
            self.logger.debug(
                "Discarding ordering #%d [%s]: %s",
                index,
                " -> ".join(stop.stop_id for stop in ordering),
                exc,
            )
            return None

    def _build_candidate(self, ordering: Sequence[Stop], index: int, deadline: Deadline) -> RouteCandidate:
        clock = self.start_time
        previous = StopVisit(stop=ordering[0], arrival_time=clock, departure_time=clock)
        segments: list[RouteSegment] = []
        total_cost = 0.0
        total_time = 0

        for destination in ordering[1:]:
            deadline.check()
            travel_minutes = self.maps.travel_time(previous.stop.location, destination.location, clock)
            if travel_minutes < 0:
                raise CollaboratorError(
                    f"Negative travel time {travel_minutes} from '{previous.stop.stop_id}' to '{destination.stop_id}'."
                )
            clock = add_elapsed_minutes(clock, travel_minutes)

            meter, parking_cost = self.meter_selector.select(
                self.parking_options.get(destination.stop_id, ()),
                clock,
                destination.duration_minutes,
                stop_id=destination.stop_id,
            )
            walk_minutes = walking_minutes(meter.location, destination.location, self.walking_speed_kmh)

            arrival = add_elapsed_minutes(clock, walk_minutes)
            visit = StopVisit(
                stop=destination,
                arrival_time=arrival,
                departure_time=add_elapsed_minutes(arrival, destination.duration_minutes),
            )
            segments.append(
                RouteSegment(
                    from_stop=previous,
                    to_stop=visit,
                    parking_meter=meter,
                    travel_time_minutes=travel_minutes,
                    parking_cost=parking_cost,
                    walking_time_minutes=walk_minutes,
                )
            )
            total_cost += parking_cost
            total_time += travel_minutes + walk_minutes + destination.duration_minutes
            clock = visit.departure_time
            previous = visit

        return RouteCandidate(
            stops=tuple(ordering),
            segments=tuple(segments),
            total_cost=total_cost,
            total_time_minutes=total_time,
            hybrid_score=hybrid_score(total_cost, total_time, self.preferences),
            index=index,
        )
