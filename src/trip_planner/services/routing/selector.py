"""Multi-objective plan selection over evaluated candidates."""

from __future__ import annotations

import logging
from typing import Sequence

from ...errors import NoRouteFound
from .models import PlanType, RouteCandidate, TripPlan


class PlanSelector:
    """Extracts the cheapest, fastest and hybrid plans from a candidate set.

    Candidates are expected in generation order; their position is the final
    tie-break for every objective.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger(__name__)

    def select(self, candidates: Sequence[RouteCandidate]) -> list[TripPlan]:
        if not candidates:
            raise NoRouteFound("No valid routes could be found for the given stops.")

        ranked = list(enumerate(candidates))
        cheapest = min(ranked, key=lambda item: (item[1].total_cost, item[1].total_time_minutes, item[0]))[1]
        fastest = min(ranked, key=lambda item: (item[1].total_time_minutes, item[1].total_cost, item[0]))[1]
        hybrid = min(ranked, key=lambda item: (item[1].hybrid_score, item[0]))[1]

        self.logger.info(
            "Selected plans from %d candidates: cheapest=#%d fastest=#%d hybrid=#%d",
            len(candidates),
            cheapest.index,
            fastest.index,
            hybrid.index,
        )
        return [
            _to_plan(
                PlanType.CHEAPEST,
                cheapest,
                {
                    "optimization": "cost",
                    "savings": f"${fastest.total_cost - cheapest.total_cost:.2f} vs fastest",
                },
            ),
            _to_plan(
                PlanType.FASTEST,
                fastest,
                {
                    "optimization": "time",
                    "time_saved": f"{cheapest.total_time_minutes - fastest.total_time_minutes} minutes vs cheapest",
                },
            ),
            _to_plan(
                PlanType.HYBRID,
                hybrid,
                {
                    "optimization": "balanced",
                    "hybrid_score": hybrid.hybrid_score,
                },
            ),
        ]


def _to_plan(plan_type: PlanType, candidate: RouteCandidate, metadata: dict) -> TripPlan:
    return TripPlan(
        plan_type=plan_type,
        total_cost=candidate.total_cost,
        total_time_minutes=candidate.total_time_minutes,
        route=list(candidate.segments),
        metadata=metadata,
    )
