from datetime import datetime

import pytest

from trip_planner.errors import NoFeasibleParking
from trip_planner.models.domain import ParkingMeter, RateSchedule
from trip_planner.services.pricing.calculator import PricingCalculator
from trip_planner.services.pricing.selector import OptimalMeterSelector

MONDAY_10AM = datetime.fromisoformat("2024-01-15T10:00:00-08:00")


def _meter(meter_id: str, rate: float, limit_hours: int = 0) -> ParkingMeter:
    return ParkingMeter(
        meter_id=meter_id,
        lat=49.2827,
        lng=-123.1207,
        schedule=RateSchedule.from_flat({"rate_mf_9a_6p": rate, "time_limit_mf_9a_6p": limit_hours}),
    )


@pytest.fixture
def selector() -> OptimalMeterSelector:
    return OptimalMeterSelector(PricingCalculator("America/Vancouver"))


def test_chooses_cheaper_of_two_feasible_meters(selector):
    meters = [_meter("EXPENSIVE001", 5.00, 4), _meter("CHEAP001", 2.00, 4)]

    meter, cost = selector.select(meters, MONDAY_10AM, 120)

    assert meter.meter_id == "CHEAP001"
    assert cost == pytest.approx(4.00)


def test_excludes_meter_whose_limit_is_shorter_than_stay(selector):
    meters = [
        _meter("CHEAP001", 2.00, 4),
        _meter("EXPENSIVE001", 5.00, 4),
        _meter("SHORT_LIMIT001", 1.00, 1),
    ]

    meter, cost = selector.select(meters, MONDAY_10AM, 180)

    assert meter.meter_id == "CHEAP001"
    assert cost == pytest.approx(6.00)


def test_limit_equal_to_stay_is_feasible(selector):
    meter, _ = selector.select([_meter("EXACT001", 1.00, 2)], MONDAY_10AM, 120)

    assert meter.meter_id == "EXACT001"


def test_unlimited_meter_survives_long_stays(selector):
    meter, cost = selector.select([_meter("SHORT", 0.50, 1), _meter("OPEN", 3.00, 0)], MONDAY_10AM, 300)

    assert meter.meter_id == "OPEN"
    assert cost == pytest.approx(15.00)


def test_limit_is_read_at_arrival_period(selector):
    # Limits only apply while meters run; arriving at 07:00 leaves the stay unrestricted.
    early = datetime.fromisoformat("2024-01-15T07:00:00-08:00")

    meter, cost = selector.select([_meter("SHORT_LIMIT001", 1.00, 1)], early, 180)

    assert meter.meter_id == "SHORT_LIMIT001"
    assert cost == pytest.approx(1.00)


def test_ties_keep_first_meter(selector):
    meters = [_meter("FIRST", 2.00, 4), _meter("SECOND", 2.00, 4)]

    meter, _ = selector.select(meters, MONDAY_10AM, 60)

    assert meter.meter_id == "FIRST"


def test_raises_when_nothing_is_feasible(selector):
    with pytest.raises(NoFeasibleParking) as excinfo:
        selector.select([_meter("SHORT_LIMIT001", 1.00, 1)], MONDAY_10AM, 120, stop_id="stop_2")

    assert excinfo.value.stop_id == "stop_2"


def test_raises_on_empty_meter_list(selector):
    with pytest.raises(NoFeasibleParking):
        selector.select([], MONDAY_10AM, 60)
