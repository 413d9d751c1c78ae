"""Models for balloon positions gathered from the hourly history feed."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class BalloonRecord(BaseModel):
    """Normalized balloon position."""

    id: str = Field(..., description="Balloon identifier, unique within a run")
    lat: float = Field(..., ge=-90.0, le=90.0, description="Latitude in decimal degrees")
    lon: float = Field(..., ge=-180.0, le=180.0, description="Longitude in decimal degrees")
    alt: Optional[float] = Field(default=None, description="Altitude in meters")

    model_config = ConfigDict(frozen=True)


class BalloonHistory(BaseModel):
    """Result of one 24-hour aggregation run."""

    balloons: list[BalloonRecord] = Field(
        default_factory=list, description="Deduplicated balloons, truncated to the cap"
    )
    any_failed: bool = Field(
        default=False, description="True when at least one hourly fetch failed"
    )
    errors: list[str] = Field(
        default_factory=list, description="One entry per failed hourly fetch"
    )
    parse_failures: list[str] = Field(
        default_factory=list,
        description="Hours whose body was present but could not be decoded",
    )
    unique_count: int = Field(
        default=0, description="Number of unique balloons found before truncation"
    )


__all__ = ["BalloonHistory", "BalloonRecord"]
