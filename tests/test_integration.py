import pytest
from fastapi.testclient import TestClient

from trip_planner.errors import CollaboratorError
from trip_planner.main import create_app
from trip_planner.models.domain import Location, ParkingMeter, RateSchedule


def _meter(meter_id: str, lat: float, lng: float) -> ParkingMeter:
    return ParkingMeter(
        meter_id=meter_id,
        lat=lat,
        lng=lng,
        schedule=RateSchedule.from_flat(
            {"rate_mf_9a_6p": 3.50, "rate_mf_6p_10": 2.00, "time_limit_mf_9a_6p": 3, "time_limit_mf_6p_10": 4}
        ),
        credit_card=True,
        meter_type="Twin",
        local_area="Downtown",
    )


class DummyMaps:
    def __init__(self, *args, **kwargs):
        pass

    def travel_time(self, origin, destination, departure):
        return 15

    def geocode(self, address):
        return Location(49.2634, -123.1380)


class DummyParking:
    def __init__(self, *args, **kwargs):
        pass

    def nearby_meters(self, lat, lng, radius_km):
        return [_meter("M1", 49.2634, -123.1380)]


class FailingParking(DummyParking):
    def nearby_meters(self, lat, lng, radius_km):
        raise CollaboratorError("Service at https://opendata.test is not reachable")


@pytest.fixture
def api_client(monkeypatch: pytest.MonkeyPatch) -> TestClient:
    from trip_planner.services import parking as parking_service
    from trip_planner.services.routing import service as routing_service

    monkeypatch.setattr(routing_service, "GoogleMapsClient", DummyMaps)
    monkeypatch.setattr(routing_service, "VancouverParkingRepository", DummyParking)
    monkeypatch.setattr(parking_service, "VancouverParkingRepository", DummyParking)

    return TestClient(create_app())


def _payload(**overrides) -> dict:
    payload = {
        "stops": [
            {"address": "800 Robson St", "lat": 49.2827, "lng": -123.1207, "duration_minutes": 60},
            {"address": "1055 Canada Pl", "lat": 49.2634, "lng": -123.1380, "duration_minutes": 90},
        ],
        "start_time": "2024-01-15T14:30:00-08:00",
        "preferences": {"cost_weight": 0.5, "time_weight": 0.5},
    }
    payload.update(overrides)
    return payload


def test_health_endpoint(api_client: TestClient):
    response = api_client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_plan_trip_endpoint(api_client: TestClient):
    response = api_client.post("/api/v1/trips/plan", json=_payload(), headers={"X-Request-ID": "abc-123"})

    assert response.status_code == 200
    body = response.json()
    assert [plan["type"] for plan in body["plans"]] == ["cheapest", "fastest", "hybrid"]

    cheapest = body["plans"][0]
    assert cheapest["total_cost"] == pytest.approx(5.25)
    assert cheapest["total_time_minutes"] == 105
    assert cheapest["metadata"] == {"optimization": "cost", "savings": "$0.00 vs fastest"}

    segment = cheapest["route"][0]
    assert segment["parking_meter"]["meter_id"] == "M1"
    assert segment["parking_meter"]["rate_mf_9a_6p"] == pytest.approx(3.50)
    assert segment["from_stop"]["address"] == "800 Robson St"
    assert segment["travel_time_minutes"] == 15
    assert segment["walking_time_minutes"] == 0

    assert body["metadata"]["request_id"] == "abc-123"
    assert body["metadata"]["stops_count"] == 2


def test_plan_trip_rejects_single_stop(api_client: TestClient):
    payload = _payload(stops=[{"address": "800 Robson St", "duration_minutes": 60}])

    response = api_client.post("/api/v1/trips/plan", json=payload)

    assert response.status_code == 422


def test_plan_trip_rejects_unbalanced_weights(api_client: TestClient):
    response = api_client.post(
        "/api/v1/trips/plan", json=_payload(preferences={"cost_weight": 0.2, "time_weight": 0.2})
    )

    assert response.status_code == 400
    assert "sum to approximately 1.0" in response.json()["detail"]


def test_plan_trip_reports_missing_parking(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    from trip_planner.services.routing import service as routing_service

    class EmptyParking(DummyParking):
        def nearby_meters(self, lat, lng, radius_km):
            return []

    monkeypatch.setattr(routing_service, "VancouverParkingRepository", EmptyParking)

    response = api_client.post("/api/v1/trips/plan", json=_payload())

    assert response.status_code == 404


def test_plan_trip_maps_provider_failure_to_bad_gateway(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    from trip_planner.services.routing import service as routing_service

    monkeypatch.setattr(routing_service, "VancouverParkingRepository", FailingParking)

    response = api_client.post("/api/v1/trips/plan", json=_payload())

    assert response.status_code == 502


def test_parking_info_reports_active_rate(api_client: TestClient):
    response = api_client.get(
        "/api/v1/parking/info",
        params={"lat": 49.2634, "lng": -123.1380, "at": "2024-01-15T19:00:00-08:00"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["radius_km"] == pytest.approx(1.0)
    meter = body["meters"][0]
    assert meter["meter_id"] == "M1"
    assert meter["active_rate"] == pytest.approx(2.00)
    assert meter["active_time_limit_hours"] == 4
    assert meter["distance_km"] == pytest.approx(0.0)


def test_parking_info_validates_coordinates(api_client: TestClient):
    response = api_client.get("/api/v1/parking/info", params={"lat": 123.0, "lng": -123.1})

    assert response.status_code == 422


def test_parking_info_upstream_failure(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    from trip_planner.services import parking as parking_service

    monkeypatch.setattr(parking_service, "VancouverParkingRepository", FailingParking)

    response = api_client.get("/api/v1/parking/info", params={"lat": 49.2634, "lng": -123.1380})

    assert response.status_code == 502
