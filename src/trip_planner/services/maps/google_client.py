"""Google Maps adapter for drive times and geocoding."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

import httpx

from ...config import settings
from ...errors import CollaboratorError, ConfigurationError
from ...models.domain import Location
from ..http_client import JsonHttpClient


def _format_location(location: Location) -> str:
    return f"{location.lat:.6f},{location.lng:.6f}"


class GoogleMapsClient:
    """Implements ``MapsProvider`` on the Distance Matrix and Geocoding JSON APIs."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        *,
        http: JsonHttpClient | None = None,
        transport: httpx.BaseTransport | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.api_key = api_key or settings.google_maps_api_key
        if not self.api_key:
            raise ConfigurationError("Google Maps API key is not configured (TRIP_GOOGLE_MAPS_API_KEY).")
        self.base_url = (base_url or settings.google_maps_base_url).rstrip("/")
        self.http = http or JsonHttpClient(transport=transport)
        self.logger = logger or logging.getLogger(__name__)

    def _request(self, endpoint: str, params: dict) -> dict:
        data = self.http.get_json(f"{self.base_url}/{endpoint}/json", {**params, "key": self.api_key})
        if not isinstance(data, dict):
            raise CollaboratorError(f"Google Maps {endpoint} response is not a JSON object.")
        status = data.get("status")
        if status != "OK":
            message = data.get("error_message") or status
            raise CollaboratorError(f"Google Maps {endpoint} request failed: {message}")
        return data

    def travel_time(self, origin: Location, destination: Location, departure: datetime) -> int:
        """Driving time in whole minutes."""
        params = {
            "origins": _format_location(origin),
            "destinations": _format_location(destination),
            "mode": "driving",
            "units": "metric",
        }
        # The API rejects departure times in the past.
        if departure.tzinfo is not None and departure > datetime.now(timezone.utc):
            params["departure_time"] = int(departure.timestamp())

        data = self._request("distancematrix", params)
        try:
            minutes = _duration_minutes(data)
        except (KeyError, IndexError, TypeError, AttributeError, ValueError) as e:
            raise CollaboratorError(f"Malformed distance matrix response: {e!r}") from e
        self.logger.debug(
            "Drive %s -> %s: %d min", _format_location(origin), _format_location(destination), minutes
        )
        return minutes

    def geocode(self, address: str) -> Location:
        data = self._request("geocode", {"address": address})
        results = data.get("results") or []
        if not results:
            raise CollaboratorError(f"No results found for address: {address}")

        try:
            location = results[0]["geometry"]["location"]
            return Location(lat=float(location["lat"]), lng=float(location["lng"]))
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise CollaboratorError(f"Malformed geocoding result for '{address}': {e!r}") from e


def _duration_minutes(data: dict) -> int:
    rows = data.get("rows") or []
    if not rows or not rows[0].get("elements"):
        raise CollaboratorError("No route found.")

    element = rows[0]["elements"][0]
    if element.get("status") != "OK":
        raise CollaboratorError(f"Route calculation failed: {element.get('status')}")

    duration = element.get("duration_in_traffic") or element.get("duration")
    if not duration or "value" not in duration:
        raise CollaboratorError("Distance matrix element has no duration.")
    return int(float(duration["value"]) / 60)
