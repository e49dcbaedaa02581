"""API route handlers for the imsakiyah locator.

GET  /api/v1/locate    — coordinates → equran.id province and kabupaten/kota
GET  /api/v1/provinces — province reference list
GET  /api/v1/cities    — kabupaten/kota reference list of one province
POST /api/v1/schedule  — Ramadan schedule for a province and kabupaten/kota
"""

import logging
from dataclasses import asdict

from fastapi import APIRouter, HTTPException, Query

from imsakiyah.api.schemas import (
    FAILURE_MESSAGES,
    ErrorResponse,
    LocateResponse,
    NameListResponse,
    ScheduleRequest,
    ScheduleResponse,
)
from imsakiyah.core.errors import ScheduleApiError
from imsakiyah.core.types import ResolutionFailure, ResolvedLocation
from imsakiyah.pipeline.locate import default_location, resolve_coordinates
from imsakiyah.retrieval.equran import fetch_schedule, list_cities, list_provinces

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["imsakiyah"])


def _locate_response(outcome: ResolvedLocation | ResolutionFailure | None) -> LocateResponse:
    if isinstance(outcome, ResolvedLocation):
        coords = outcome.coordinates
        return LocateResponse(
            status="degraded" if outcome.degraded else "resolved",
            province=outcome.province,
            city=outcome.city,
            province_match=outcome.province_match.value,
            city_match=outcome.city_match.value,
            latitude=coords.latitude if coords else None,
            longitude=coords.longitude if coords else None,
        )

    fallback = default_location()
    return LocateResponse(
        status="failed",
        province=fallback.province,
        city=fallback.city,
        reason=outcome.reason.value if outcome else None,
        message=FAILURE_MESSAGES.get(outcome.reason) if outcome else None,
        default_applied=True,
    )


@router.get(
    "/locate",
    response_model=LocateResponse,
    responses={422: {"model": ErrorResponse, "description": "Invalid coordinates"}},
)
async def locate(
    lat: float = Query(..., ge=-90, le=90, description="Latitude (WGS84)"),
    lon: float = Query(..., ge=-180, le=180, description="Longitude (WGS84)"),
):
    """Resolve coordinates to the schedule API's province and kabupaten/kota.

    Resolution failures are not HTTP errors: the response carries the
    reason, a user-facing message, and the default location.
    """
    outcome = await resolve_coordinates(lat, lon)
    return _locate_response(outcome)


@router.get(
    "/provinces",
    response_model=NameListResponse,
    responses={502: {"model": ErrorResponse, "description": "Schedule API error"}},
)
async def provinces():
    try:
        return NameListResponse(data=await list_provinces())
    except ScheduleApiError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.get(
    "/cities",
    response_model=NameListResponse,
    responses={502: {"model": ErrorResponse, "description": "Schedule API error"}},
)
async def cities(province: str = Query(..., min_length=1, max_length=100)):
    try:
        return NameListResponse(data=await list_cities(province))
    except ScheduleApiError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.post(
    "/schedule",
    response_model=ScheduleResponse,
    responses={502: {"model": ErrorResponse, "description": "Schedule API error"}},
)
async def schedule(request: ScheduleRequest):
    """Full Ramadan imsakiyah schedule for one kabupaten/kota."""
    try:
        result = await fetch_schedule(request.province, request.city)
    except ScheduleApiError as e:
        logger.error("Schedule lookup failed for %s / %s: %s", request.province, request.city, e)
        raise HTTPException(status_code=502, detail=str(e))
    return ScheduleResponse(**asdict(result))
