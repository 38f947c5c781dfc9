"""Domain models for stops, parking meters and their rate schedules."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional

from ..errors import ConfigurationError


class WeekdayBucket(str, Enum):
    """Which rate column applies on a given calendar day."""

    MON_FRI = "mf"
    SATURDAY = "sa"
    SUNDAY = "su"


class Period(str, Enum):
    """Metered part of the day. Outside both periods parking is free."""

    DAY = "9a_6p"
    EVENING = "6p_10"


@dataclass(frozen=True, slots=True)
class RateCell:
    """Hourly rate and max-stay limit (hours, 0 = unlimited) for one bucket/period."""

    rate: float = 0.0
    max_stay_hours: int = 0

    @property
    def unlimited(self) -> bool:
        return self.max_stay_hours == 0

    def allows(self, duration_minutes: int) -> bool:
        return self.unlimited or duration_minutes <= self.max_stay_hours * 60


FREE_PARKING = RateCell()


@dataclass(frozen=True, slots=True)
class RateSchedule:
    """Six-cell table of hourly rates and stay limits governing a meter."""

    cells: Mapping[tuple[WeekdayBucket, Period], RateCell] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for (bucket, period), cell in self.cells.items():
            if cell.rate < 0:
                raise ConfigurationError(f"Negative rate {cell.rate} for {bucket.value}/{period.value}.")
            if cell.max_stay_hours < 0:
                raise ConfigurationError(
                    f"Negative time limit {cell.max_stay_hours} for {bucket.value}/{period.value}."
                )

    def cell(self, bucket: WeekdayBucket, period: Period) -> RateCell:
        return self.cells.get((bucket, period), FREE_PARKING)

    def rate(self, bucket: WeekdayBucket, period: Period) -> float:
        return self.cell(bucket, period).rate

    @classmethod
    def from_flat(cls, values: Mapping[str, float | int | None]) -> "RateSchedule":
        """Build a schedule from flat keys such as ``rate_mf_9a_6p`` and ``time_limit_sa_6p_10``.

        Missing keys mean a free, unrestricted cell.
        """
        cells: dict[tuple[WeekdayBucket, Period], RateCell] = {}
        for bucket in WeekdayBucket:
            for period in Period:
                suffix = f"{bucket.value}_{period.value}"
                cells[(bucket, period)] = RateCell(
                    rate=float(values.get(f"rate_{suffix}") or 0.0),
                    max_stay_hours=int(values.get(f"time_limit_{suffix}") or 0),
                )
        return cls(cells=cells)


@dataclass(frozen=True, slots=True)
class Location:
    lat: float
    lng: float


@dataclass(slots=True)
class Stop:
    """A destination the traveller wants to spend ``duration_minutes`` at."""

    stop_id: str
    address: str
    duration_minutes: int
    lat: Optional[float] = None
    lng: Optional[float] = None

    def __post_init__(self) -> None:
        if self.duration_minutes < 1:
            raise ValueError(f"Stop '{self.stop_id}' must last at least one minute.")

    @property
    def resolved(self) -> bool:
        return self.lat is not None and self.lng is not None

    @property
    def location(self) -> Location:
        if not self.resolved:
            raise ValueError(f"Stop '{self.stop_id}' has no coordinates yet.")
        return Location(lat=self.lat, lng=self.lng)


@dataclass(frozen=True, slots=True)
class ParkingMeter:
    """A priced, located parking option."""

    meter_id: str
    lat: float
    lng: float
    schedule: RateSchedule
    credit_card: bool = False
    meter_type: str = ""
    local_area: str = ""

    @property
    def location(self) -> Location:
        return Location(lat=self.lat, lng=self.lng)


@dataclass(frozen=True, slots=True)
class Preferences:
    cost_weight: float = 0.5
    time_weight: float = 0.5
