from datetime import datetime, timedelta, timezone

import httpx
import pytest

from trip_planner.errors import CollaboratorError, ConfigurationError
from trip_planner.models.domain import Location
from trip_planner.services.http_client import JsonHttpClient
from trip_planner.services.maps.google_client import GoogleMapsClient

ORIGIN = Location(49.2827, -123.1207)
DESTINATION = Location(49.2634, -123.1380)
PAST = datetime(2024, 1, 15, 14, 30, tzinfo=timezone.utc)


def _client(handler) -> GoogleMapsClient:
    http = JsonHttpClient(transport=httpx.MockTransport(handler), max_retries=1, backoff_seconds=0)
    return GoogleMapsClient("test-key", "https://maps.test/api", http=http)


def _matrix(element: dict) -> dict:
    return {"status": "OK", "rows": [{"elements": [element]}]}


def test_travel_time_prefers_traffic_duration():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return httpx.Response(
            200,
            json=_matrix(
                {"status": "OK", "duration": {"value": 900}, "duration_in_traffic": {"value": 1290}}
            ),
        )

    minutes = _client(handler).travel_time(ORIGIN, DESTINATION, PAST)

    assert minutes == 21
    assert seen["path"] == "/api/distancematrix/json"
    assert seen["params"]["origins"] == "49.282700,-123.120700"
    assert seen["params"]["mode"] == "driving"
    assert seen["params"]["key"] == "test-key"
    assert "departure_time" not in seen["params"]


def test_travel_time_sends_future_departure():
    seen = {}
    departure = datetime.now(timezone.utc) + timedelta(hours=2)

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json=_matrix({"status": "OK", "duration": {"value": 600}}))

    assert _client(handler).travel_time(ORIGIN, DESTINATION, departure) == 10
    assert seen["params"]["departure_time"] == str(int(departure.timestamp()))


@pytest.mark.parametrize(
    "payload",
    [
        {"status": "REQUEST_DENIED", "error_message": "The provided API key is invalid."},
        _matrix({"status": "ZERO_RESULTS"}),
        {"status": "OK", "rows": []},
        _matrix({"status": "OK"}),
    ],
)
def test_travel_time_failures_raise_collaborator_error(payload):
    client = _client(lambda request: httpx.Response(200, json=payload))

    with pytest.raises(CollaboratorError):
        client.travel_time(ORIGIN, DESTINATION, PAST)


def test_travel_time_retries_server_errors():
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        if calls["count"] == 1:
            return httpx.Response(500)
        return httpx.Response(200, json=_matrix({"status": "OK", "duration": {"value": 300}}))

    assert _client(handler).travel_time(ORIGIN, DESTINATION, PAST) == 5
    assert calls["count"] == 2


def test_client_error_is_not_retried():
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        return httpx.Response(403)

    with pytest.raises(CollaboratorError):
        _client(handler).travel_time(ORIGIN, DESTINATION, PAST)
    assert calls["count"] == 1


def test_geocode_returns_first_result():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["address"] == "800 Robson St, Vancouver"
        return httpx.Response(
            200,
            json={
                "status": "OK",
                "results": [
                    {"geometry": {"location": {"lat": 49.2820, "lng": -123.1210}}},
                    {"geometry": {"location": {"lat": 0.0, "lng": 0.0}}},
                ],
            },
        )

    assert _client(handler).geocode("800 Robson St, Vancouver") == Location(49.2820, -123.1210)


def test_geocode_without_results_fails():
    client = _client(lambda request: httpx.Response(200, json={"status": "ZERO_RESULTS", "results": []}))

    with pytest.raises(CollaboratorError):
        client.geocode("nowhere")


def test_missing_api_key_is_a_configuration_error(monkeypatch):
    from trip_planner.config import settings

    monkeypatch.setattr(settings, "google_maps_api_key", None)

    with pytest.raises(ConfigurationError):
        GoogleMapsClient()


def test_transport_protocol_error_becomes_collaborator_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.RemoteProtocolError("Server disconnected", request=request)

    with pytest.raises(CollaboratorError):
        _client(handler).travel_time(ORIGIN, DESTINATION, PAST)


@pytest.mark.parametrize(
    "payload",
    [
        ["not", "an", "object"],
        {"status": "OK", "rows": [{"elements": "oops"}]},
        _matrix({"status": "OK", "duration": {"value": "abc"}}),
        _matrix({"status": "OK", "duration": 600}),
    ],
)
def test_malformed_distance_matrix_becomes_collaborator_error(payload):
    client = _client(lambda request: httpx.Response(200, json=payload))

    with pytest.raises(CollaboratorError):
        client.travel_time(ORIGIN, DESTINATION, PAST)


def test_malformed_geocoding_result_becomes_collaborator_error():
    client = _client(lambda request: httpx.Response(200, json={"status": "OK", "results": [{"place_id": "x"}]}))

    with pytest.raises(CollaboratorError):
        client.geocode("800 Robson St, Vancouver")
