"""Models describing a combined balloon and aircraft view."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from skytrack.models.aircraft import AircraftRecord
from skytrack.models.balloon import BalloonHistory, BalloonRecord
from skytrack.models.geo import BoundingBox


class ProximityResult(BaseModel):
    """Nearest aircraft to a selected balloon."""

    nearest: Optional[AircraftRecord] = Field(
        default=None, description="Closest aircraft, if any"
    )
    distance_km: Optional[float] = Field(
        default=None, description="Great-circle distance to the closest aircraft"
    )


class ProximityRequest(BaseModel):
    """Selected balloon plus the aircraft set to search."""

    balloon: Optional[BalloonRecord] = None
    aircraft: list[AircraftRecord] = Field(default_factory=list)


class TrackingSnapshot(BaseModel):
    """Balloons, the aircraft around them, and fetch diagnostics."""

    history: BalloonHistory
    aircraft: list[AircraftRecord] = Field(default_factory=list)
    aircraft_bounds: Optional[BoundingBox] = Field(
        default=None, description="Box used for the aircraft query, if one was issued"
    )
    aircraft_error: Optional[str] = Field(
        default=None, description="Aircraft feed failure summary, if the feed failed"
    )

    @property
    def balloons(self) -> list[BalloonRecord]:
        return self.history.balloons


__all__ = ["ProximityRequest", "ProximityResult", "TrackingSnapshot"]
