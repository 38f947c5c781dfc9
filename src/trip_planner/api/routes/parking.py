"""Parking lookup endpoints."""

from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter, HTTPException, Query, status

from ...errors import CollaboratorError
from ...schemas.trips import ParkingInfoResponse
from ...services.parking import describe_nearby_parking

router = APIRouter(prefix="/parking", tags=["parking"])


@router.get("/info", response_model=ParkingInfoResponse, status_code=status.HTTP_200_OK)
def parking_info(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    radius_km: float | None = Query(default=None, gt=0, le=10),
    at: datetime | None = Query(default=None, description="Instant to report active rates for; defaults to now."),
) -> ParkingInfoResponse:
    """List meters near a point with the rate and limit active at ``at``."""
    try:
        return describe_nearby_parking(lat, lng, radius_km=radius_km, at=at)
    except CollaboratorError as exc:
        logging.warning(f"Parking data provider failed: {exc}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Failed to fetch parking meters: {exc}",
        ) from exc
