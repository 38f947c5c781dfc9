"""Time-dependent parking cost model.

Meters charge from 09:00 to 22:00 local time, split into a day period
(09:00-18:00) and an evening period (18:00-22:00). Each calendar day falls
into a Mon-Fri, Saturday or Sunday bucket with its own rates. Outside metered
hours parking is free and unrestricted.

Rates are looked up on local wall-clock time while elapsed time is measured
in absolute minutes, so a stay spanning a DST change is billed for the time
actually parked.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone as dt_timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ...config import settings
from ...errors import ConfigurationError
from ...models.domain import FREE_PARKING, Period, RateCell, RateSchedule, WeekdayBucket

DAY_START_HOUR = 9
EVENING_START_HOUR = 18
METER_END_HOUR = 22
BOUNDARY_HOURS = (DAY_START_HOUR, EVENING_START_HOUR, METER_END_HOUR)


def add_elapsed_minutes(instant: datetime, minutes: float) -> datetime:
    """Move ``instant`` forward by real elapsed minutes, keeping its timezone."""
    if instant.tzinfo is None:
        return instant + timedelta(minutes=minutes)
    shifted = instant.astimezone(dt_timezone.utc) + timedelta(minutes=minutes)
    return shifted.astimezone(instant.tzinfo)


def minutes_between(start: datetime, end: datetime) -> float:
    if start.tzinfo is None or end.tzinfo is None:
        return (end - start).total_seconds() / 60.0
    return (end.astimezone(dt_timezone.utc) - start.astimezone(dt_timezone.utc)).total_seconds() / 60.0


def resolve_timezone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigurationError(f"Unknown timezone '{name}'.") from exc


def weekday_bucket(instant: datetime) -> WeekdayBucket:
    weekday = instant.weekday()
    if weekday == 5:
        return WeekdayBucket.SATURDAY
    if weekday == 6:
        return WeekdayBucket.SUNDAY
    return WeekdayBucket.MON_FRI


def period_at(instant: datetime) -> Optional[Period]:
    """Return the metered period active at ``instant`` or None when meters are off."""
    hour = instant.hour
    if DAY_START_HOUR <= hour < EVENING_START_HOUR:
        return Period.DAY
    if EVENING_START_HOUR <= hour < METER_END_HOUR:
        return Period.EVENING
    return None


def is_meter_active(instant: datetime) -> bool:
    return period_at(instant) is not None


def next_boundary(instant: datetime) -> datetime:
    """First rate boundary strictly after ``instant`` (09:00, 18:00, 22:00 or next day 09:00)."""
    midnight = instant.replace(hour=0, minute=0, second=0, microsecond=0)
    for hour in BOUNDARY_HOURS:
        boundary = midnight.replace(hour=hour)
        if boundary > instant:
            return boundary
    return (midnight + timedelta(days=1)).replace(hour=DAY_START_HOUR)


class PricingCalculator:
    """Prices a stay at a meter given arrival instant and duration."""

    def __init__(self, timezone: str | None = None, logger: logging.Logger | None = None) -> None:
        self.timezone_name = timezone or settings.default_timezone
        self.tz = resolve_timezone(self.timezone_name)
        self.logger = logger or logging.getLogger(__name__)

    def localize(self, instant: datetime) -> datetime:
        if instant.tzinfo is None:
            return instant.replace(tzinfo=self.tz)
        return instant.astimezone(self.tz)

    def rate_at(self, schedule: RateSchedule, instant: datetime) -> RateCell:
        """Rate and limit active at ``instant``; free and unlimited outside metered hours."""
        local = self.localize(instant)
        period = period_at(local)
        if period is None:
            return FREE_PARKING
        return schedule.cell(weekday_bucket(local), period)

    def cost(self, schedule: RateSchedule, arrival: datetime, duration_minutes: float) -> float:
        if duration_minutes <= 0:
            return 0.0

        current = self.localize(arrival)
        remaining = float(duration_minutes)
        total = 0.0
        while remaining > 0:
            boundary = next_boundary(current)
            minutes_to_boundary = minutes_between(current, boundary)
            billed = min(remaining, minutes_to_boundary)
            period = period_at(current)
            if period is not None:
                total += schedule.rate(weekday_bucket(current), period) * billed / 60.0
            current = add_elapsed_minutes(current, billed)
            remaining -= billed

        self.logger.debug(
            "Priced %s min from %s at %.2f", duration_minutes, arrival.isoformat(), total
        )
        return total
