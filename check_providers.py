#!/usr/bin/env python3
"""Smoke-check connectivity to the Google Maps and parking open-data providers."""

import sys
from datetime import datetime, timezone
from pathlib import Path

# Add src to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root / "src"))

from trip_planner.config import settings
from trip_planner.data.parking_repository import VancouverParkingRepository
from trip_planner.errors import TripPlannerError
from trip_planner.models.domain import Location
from trip_planner.services.maps.google_client import GoogleMapsClient


def main():
    print("=" * 60)
    print("Provider Connection Test")
    print("=" * 60)
    print()

    print("1. Checking configuration...")
    if not settings.google_maps_api_key:
        print("   [ERROR] Google Maps API key is not configured")
        print("   Please set TRIP_GOOGLE_MAPS_API_KEY in your .env file")
        return 1
    print(f"   [OK] Maps base URL: {settings.google_maps_base_url}")
    print(f"   [OK] Parking data URL: {settings.parking_data_url}")
    print()

    print("2. Testing geocoding...")
    try:
        maps = GoogleMapsClient()
        origin = maps.geocode("800 Robson St, Vancouver, BC")
        print(f"   [OK] Geocoded to ({origin.lat:.6f}, {origin.lng:.6f})")
    except TripPlannerError as e:
        print(f"   [ERROR] Geocoding failed: {e}")
        return 1
    print()

    print("3. Testing drive time...")
    try:
        destination = Location(49.2888, -123.1111)  # Canada Place
        minutes = maps.travel_time(origin, destination, datetime.now(timezone.utc))
        print(f"   [OK] Drive time: {minutes} minutes")
    except TripPlannerError as e:
        print(f"   [ERROR] Distance matrix request failed: {e}")
        return 1
    print()

    print("4. Testing parking meter lookup...")
    try:
        meters = VancouverParkingRepository().nearby_meters(origin.lat, origin.lng, settings.parking_search_radius_km)
        print(f"   [OK] Found {len(meters)} meters within {settings.parking_search_radius_km}km")
        if meters:
            print(f"   [OK] Closest meter: {meters[0].meter_id} ({meters[0].local_area})")
    except TripPlannerError as e:
        print(f"   [ERROR] Parking data request failed: {e}")
        return 1
    print()

    print("=" * 60)
    print("[SUCCESS] Providers are reachable!")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
