"""Balloon, aircraft and proximity endpoints."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import ValidationError

from skytrack.config import settings
from skytrack.ingestors import (
    AircraftFeedError,
    AircraftFeedHTTPError,
    AircraftFeedTimeout,
    BalloonHistoryUnavailable,
)
from skytrack.models import (
    AircraftFeed,
    BalloonHistory,
    BoundingBox,
    ProximityRequest,
    ProximityResult,
    TrackingSnapshot,
)
from skytrack.services import TrackingService, find_nearest, get_tracking_service

router = APIRouter(prefix="/api/v1", tags=["tracking"])

logger = logging.getLogger("skytrack.api.tracking")


def _balloons_unavailable(exc: BalloonHistoryUnavailable) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail={"error": str(exc), "details": exc.errors},
    )


def _aircraft_error(exc: AircraftFeedError) -> HTTPException:
    if isinstance(exc, AircraftFeedHTTPError):
        status_code = exc.status_code
    elif isinstance(exc, AircraftFeedTimeout):
        status_code = status.HTTP_504_GATEWAY_TIMEOUT
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return HTTPException(
        status_code=status_code,
        detail={"error": str(exc), "details": exc.details, "attempts": exc.attempts},
    )


def _query_box(
    lamin: Optional[float],
    lomin: Optional[float],
    lamax: Optional[float],
    lomax: Optional[float],
) -> BoundingBox:
    values = (lamin, lomin, lamax, lomax)
    if all(value is None for value in values):
        return settings.region_bounds
    if any(value is None for value in values):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "lamin, lomin, lamax and lomax must be given together"},
        )
    try:
        return BoundingBox(min_lat=lamin, min_lon=lomin, max_lat=lamax, max_lon=lomax)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "Invalid bounding box", "details": str(exc)},
        ) from exc


@router.get(
    "/balloons",
    response_model=BalloonHistory,
    summary="Deduplicated balloon positions from the last 24 hours",
)
async def get_balloons(
    service: TrackingService = Depends(get_tracking_service),
) -> BalloonHistory:
    try:
        history = await service.balloon_aggregator.run()
    except BalloonHistoryUnavailable as exc:
        raise _balloons_unavailable(exc) from exc

    logger.info(
        "Balloon history served: balloons=%s failed_hours=%s",
        len(history.balloons),
        len(history.errors),
    )
    return history


@router.get(
    "/aircraft",
    response_model=AircraftFeed,
    summary="Airborne aircraft inside a bounding box",
)
async def get_aircraft(
    lamin: Optional[float] = Query(default=None, description="Minimum latitude"),
    lomin: Optional[float] = Query(default=None, description="Minimum longitude"),
    lamax: Optional[float] = Query(default=None, description="Maximum latitude"),
    lomax: Optional[float] = Query(default=None, description="Maximum longitude"),
    service: TrackingService = Depends(get_tracking_service),
) -> AircraftFeed:
    """Fetch aircraft for the given box, or for the configured region if none is given."""

    box = _query_box(lamin, lomin, lamax, lomax)
    try:
        return await service.aircraft_client.get_aircraft(box)
    except AircraftFeedError as exc:
        raise _aircraft_error(exc) from exc


@router.get(
    "/snapshot",
    response_model=TrackingSnapshot,
    summary="Balloons plus the aircraft around them",
)
async def get_snapshot(
    service: TrackingService = Depends(get_tracking_service),
) -> TrackingSnapshot:
    try:
        return await service.build_snapshot()
    except BalloonHistoryUnavailable as exc:
        raise _balloons_unavailable(exc) from exc


@router.post(
    "/proximity",
    response_model=ProximityResult,
    summary="Nearest aircraft to a selected balloon",
)
async def post_proximity(request: ProximityRequest) -> ProximityResult:
    return find_nearest(request.balloon, request.aircraft)


__all__ = ["router"]
