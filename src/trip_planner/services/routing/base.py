"""Contracts for the collaborators the planning core consumes."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from ...models.domain import Location, ParkingMeter


class MapsProvider(Protocol):
    """Drive times and geocoding. Failures raise ``CollaboratorError``."""

    def travel_time(self, origin: Location, destination: Location, departure: datetime) -> int:
        ...

    def geocode(self, address: str) -> Location:
        ...


class ParkingDataProvider(Protocol):
    """Meters around a point, closest first. Failures raise ``CollaboratorError``."""

    def nearby_meters(self, lat: float, lng: float, radius_km: float) -> Sequence[ParkingMeter]:
        ...
