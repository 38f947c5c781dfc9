"""Geospatial helper functions."""

from __future__ import annotations

import math

from ..models.domain import Location

EARTH_RADIUS_KM = 6371.0
KM_PER_DEGREE_LAT = 111.32


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def distance_km(origin: Location, destination: Location) -> float:
    return haversine_km(origin.lat, origin.lng, destination.lat, destination.lng)


def walking_minutes(origin: Location, destination: Location, speed_kmh: float) -> int:
    """Straight-line walking time in whole minutes."""

    return int(distance_km(origin, destination) / speed_kmh * 60)


def bounding_box(lat: float, lng: float, radius_km: float) -> tuple[float, float, float, float]:
    """Return (min_lat, min_lng, max_lat, max_lng) enclosing a circle of ``radius_km``."""

    lat_delta = radius_km / KM_PER_DEGREE_LAT
    lng_delta = radius_km / (KM_PER_DEGREE_LAT * max(math.cos(math.radians(lat)), 1e-6))
    return lat - lat_delta, lng - lng_delta, lat + lat_delta, lng + lng_delta
