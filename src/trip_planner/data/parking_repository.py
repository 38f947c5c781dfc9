"""Parking meter records from the City of Vancouver open-data portal."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import httpx

from ..config import settings
from ..errors import CollaboratorError
from ..models.domain import ParkingMeter, RateSchedule
from ..services.geospatial import bounding_box, haversine_km
from ..services.http_client import JsonHttpClient

logger = logging.getLogger(__name__)

# Open-data column prefixes -> RateSchedule flat key prefixes.
_RATE_COLUMNS = {
    "r_mf_9a_6p": "rate_mf_9a_6p",
    "r_mf_6p_10": "rate_mf_6p_10",
    "r_sa_9a_6p": "rate_sa_9a_6p",
    "r_sa_6p_10": "rate_sa_6p_10",
    "r_su_9a_6p": "rate_su_9a_6p",
    "r_su_6p_10": "rate_su_6p_10",
}
_LIMIT_COLUMNS = {
    "t_mf_9a_6p": "time_limit_mf_9a_6p",
    "t_mf_6p_10": "time_limit_mf_6p_10",
    "t_sa_9a_6p": "time_limit_sa_9a_6p",
    "t_sa_6p_10": "time_limit_sa_6p_10",
    "t_su_9a_6p": "time_limit_su_9a_6p",
    "t_su_6p_10": "time_limit_su_6p_10",
}


def parse_rate(value: Optional[Any]) -> float:
    """Convert a rate such as ``"$3.50"`` to a float; blank or unparsable means free."""
    if value is None:
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip()
    if not text or text.lower() == "null":
        return 0.0
    try:
        return float(text.lstrip("$").replace(",", ""))
    except ValueError:
        logger.warning(f"Unable to parse parking rate '{value}', treating as free")
        return 0.0


def parse_time_limit(value: Optional[Any]) -> int:
    """Convert a limit such as ``"3 Hr"`` to hours; blank or unparsable means unlimited."""
    if value is None:
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    parts = str(value).split()
    if not parts or parts[0].lower() == "null":
        return 0
    try:
        return int(parts[0])
    except ValueError:
        logger.warning(f"Unable to parse time limit '{value}', treating as unlimited")
        return 0


def meter_from_record(record: Mapping[str, Any]) -> ParkingMeter:
    point = record["geo_point_2d"]
    flat: dict[str, float | int] = {}
    for column, key in _RATE_COLUMNS.items():
        flat[key] = parse_rate(record.get(column))
    for column, key in _LIMIT_COLUMNS.items():
        flat[key] = parse_time_limit(record.get(column))
    return ParkingMeter(
        meter_id=str(record.get("meterid") or ""),
        lat=float(point["lat"]),
        lng=float(point["lon"]),
        schedule=RateSchedule.from_flat(flat),
        credit_card=str(record.get("creditcard") or "").strip().lower() == "yes",
        meter_type=str(record.get("meterhead") or ""),
        local_area=str(record.get("geo_local_area") or ""),
    )


class VancouverParkingRepository:
    """Implements ``ParkingDataProvider`` against the open-data records API."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        page_limit: int | None = None,
        http: JsonHttpClient | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url or settings.parking_data_url
        self.page_limit = page_limit or settings.parking_page_limit
        self.http = http or JsonHttpClient(transport=transport)

    def nearby_meters(self, lat: float, lng: float, radius_km: float) -> list[ParkingMeter]:
        """Meters within ``radius_km`` of the point, closest first."""
        min_lat, min_lng, max_lat, max_lng = bounding_box(lat, lng, radius_km)
        params = {
            "where": f"in_bbox(geo_point_2d, {min_lat:.6f}, {min_lng:.6f}, {max_lat:.6f}, {max_lng:.6f})",
            "limit": self.page_limit,
            "select": "*",
        }
        data = self.http.get_json(self.base_url, params)
        if not isinstance(data, dict):
            raise CollaboratorError("Parking data response is not a JSON object.")

        located: list[tuple[float, ParkingMeter]] = []
        for record in data.get("results") or []:
            try:
                meter = meter_from_record(record)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed parking record {record.get('meterid', 'unknown')}: {e}")
                continue
            distance = haversine_km(lat, lng, meter.lat, meter.lng)
            if distance <= radius_km:
                located.append((distance, meter))

        located.sort(key=lambda item: item[0])
        logger.info(f"Found {len(located)} parking meters within {radius_km:.1f}km of ({lat:.6f}, {lng:.6f})")
        return [meter for _, meter in located]
