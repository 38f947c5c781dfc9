"""Exception hierarchy shared by the planning core and its adapters."""

from __future__ import annotations


class TripPlannerError(Exception):
    """Base class for all planner failures."""


class ConfigurationError(TripPlannerError):
    """Invalid rate schedule or timezone data. Aborts the whole run."""


class CollaboratorError(TripPlannerError):
    """A maps or parking-data provider could not answer."""


class NoFeasibleParking(TripPlannerError):
    """No meter near a stop can hold the requested stay."""

    def __init__(self, stop_id: str, duration_minutes: int) -> None:
        super().__init__(f"No feasible parking for stop '{stop_id}' ({duration_minutes} min).")
        self.stop_id = stop_id
        self.duration_minutes = duration_minutes


class NoRouteFound(TripPlannerError):
    """Every candidate ordering was discarded."""


class DeadlineExceeded(TripPlannerError):
    """The per-request planning deadline fired during an evaluation."""
