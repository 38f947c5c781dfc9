"""Trip planning endpoints."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Header, HTTPException, status

from ...errors import CollaboratorError, NoRouteFound
from ...schemas.trips import TripPlanRequest, TripPlanResponse
from ...services.routing.service import plan_trip

router = APIRouter(prefix="/trips", tags=["trips"])


@router.post("/plan", response_model=TripPlanResponse, status_code=status.HTTP_200_OK)
def plan(
    payload: TripPlanRequest,
    x_request_id: Optional[str] = Header(default=None),
) -> TripPlanResponse:
    try:
        return plan_trip(payload, request_id=x_request_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except NoRouteFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except CollaboratorError as exc:
        logging.warning(f"Upstream provider failed while planning trip: {exc}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Failed to reach maps or parking provider: {exc}",
        ) from exc
    except Exception as exc:
        logging.exception(f"Error planning trip: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to plan trip: {str(exc)}",
        ) from exc
