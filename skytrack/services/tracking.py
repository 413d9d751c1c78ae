"""Build a combined balloon and aircraft snapshot."""

from __future__ import annotations

import logging
from typing import Optional

from skytrack.config import settings
from skytrack.domain.geo import compute_bounds
from skytrack.ingestors import (
    AircraftFeedClient,
    AircraftFeedError,
    BalloonHistoryAggregator,
)
from skytrack.models.aircraft import AircraftRecord
from skytrack.models.geo import BoundingBox
from skytrack.models.tracking import ProximityResult, TrackingSnapshot
from skytrack.services.proximity import find_nearest

logger = logging.getLogger("skytrack.tracking")


class TrackingService:
    """Fetch balloons first, then the aircraft around them."""

    def __init__(
        self,
        balloon_aggregator: Optional[BalloonHistoryAggregator] = None,
        aircraft_client: Optional[AircraftFeedClient] = None,
        *,
        bounds_padding: float | None = None,
        fallback_region: Optional[BoundingBox] = None,
    ) -> None:
        self.balloon_aggregator = balloon_aggregator or BalloonHistoryAggregator()
        self.aircraft_client = aircraft_client or AircraftFeedClient()
        self.bounds_padding = (
            bounds_padding if bounds_padding is not None else settings.bounds_padding_deg
        )
        self.fallback_region = fallback_region or settings.region_box

    def aircraft_bounds(self, balloons) -> Optional[BoundingBox]:
        """Query box around ``balloons``, else the fallback region, else None."""

        bounds = compute_bounds(balloons, self.bounds_padding)
        if bounds is None and self.fallback_region is not None:
            logger.info("No balloon positions to bound; using the configured region")
            return self.fallback_region
        return bounds

    async def build_snapshot(self) -> TrackingSnapshot:
        """Run the balloon aggregation, then fetch aircraft around the result.

        ``BalloonHistoryUnavailable`` propagates. Aircraft feed failures are
        reported on the snapshot so the balloons remain usable.
        """

        history = await self.balloon_aggregator.run()

        bounds = self.aircraft_bounds(history.balloons)
        if bounds is None:
            logger.warning("Could not calculate bounds from balloon data; skipping aircraft")
            return TrackingSnapshot(history=history)

        aircraft: list[AircraftRecord] = []
        aircraft_error: str | None = None
        try:
            feed = await self.aircraft_client.get_aircraft(bounds)
            aircraft = feed.aircraft
        except AircraftFeedError as exc:
            logger.warning("Aircraft feed unavailable after %s attempts: %s", exc.attempts, exc)
            aircraft_error = str(exc)

        return TrackingSnapshot(
            history=history,
            aircraft=aircraft,
            aircraft_bounds=bounds,
            aircraft_error=aircraft_error,
        )

    @staticmethod
    def nearest_to(balloon_id: str, snapshot: TrackingSnapshot) -> ProximityResult:
        """Resolve a balloon selection against a snapshot; unknown ids find nothing."""

        balloon = next((b for b in snapshot.balloons if b.id == balloon_id), None)
        return find_nearest(balloon, snapshot.aircraft)


_default_service: TrackingService | None = None


def get_tracking_service() -> TrackingService:
    """Return the process-wide default service, creating it on first use."""

    global _default_service
    if _default_service is None:
        _default_service = TrackingService()
    return _default_service


__all__ = ["TrackingService", "get_tracking_service"]
