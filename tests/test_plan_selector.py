import pytest

from trip_planner.errors import NoRouteFound
from trip_planner.services.routing.models import PlanType, RouteCandidate
from trip_planner.services.routing.selector import PlanSelector


def _candidate(index: int, cost: float, minutes: int, score: float | None = None) -> RouteCandidate:
    return RouteCandidate(
        stops=(),
        segments=(),
        total_cost=cost,
        total_time_minutes=minutes,
        hybrid_score=score if score is not None else 0.5 * cost + 0.5 * minutes / 60,
        index=index,
    )


def _by_type(plans):
    return {plan.plan_type: plan for plan in plans}


def test_single_candidate_wins_every_objective():
    only = _candidate(0, 8.75, 180)

    plans = PlanSelector().select([only])

    assert [plan.plan_type for plan in plans] == [PlanType.CHEAPEST, PlanType.FASTEST, PlanType.HYBRID]
    for plan in plans:
        assert plan.total_cost == only.total_cost
        assert plan.total_time_minutes == only.total_time_minutes


def test_cheapest_and_fastest_are_minimal():
    candidates = [
        _candidate(0, 12.0, 120),
        _candidate(1, 4.0, 200),
        _candidate(2, 9.0, 90),
        _candidate(3, 6.5, 150),
    ]

    plans = _by_type(PlanSelector().select(candidates))

    assert all(plans[PlanType.CHEAPEST].total_cost <= c.total_cost for c in candidates)
    assert all(plans[PlanType.FASTEST].total_time_minutes <= c.total_time_minutes for c in candidates)
    assert plans[PlanType.CHEAPEST].metadata == {"optimization": "cost", "savings": "$5.00 vs fastest"}
    assert plans[PlanType.FASTEST].metadata == {"optimization": "time", "time_saved": "110 minutes vs cheapest"}


def test_cost_tie_broken_by_time_and_time_tie_by_cost():
    candidates = [
        _candidate(0, 5.0, 150),
        _candidate(1, 5.0, 100),
        _candidate(2, 9.0, 60),
        _candidate(3, 7.0, 60),
    ]

    plans = _by_type(PlanSelector().select(candidates))

    assert plans[PlanType.CHEAPEST].total_time_minutes == 100
    assert plans[PlanType.FASTEST].total_cost == 7.0


def test_hybrid_tie_broken_by_generation_order():
    candidates = [
        _candidate(0, 3.0, 200, score=4.0),
        _candidate(1, 2.0, 100, score=2.5),
        _candidate(2, 1.0, 120, score=2.5),
    ]

    plans = _by_type(PlanSelector().select(candidates))

    hybrid = plans[PlanType.HYBRID]
    assert hybrid.total_cost == 2.0
    assert hybrid.metadata == {"optimization": "balanced", "hybrid_score": 2.5}


def test_empty_candidate_set_raises():
    with pytest.raises(NoRouteFound):
        PlanSelector().select([])
