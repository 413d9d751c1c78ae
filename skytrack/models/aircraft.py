"""Models for aircraft state ingested from the live ADS-B feed."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AircraftRecord(BaseModel):
    """Normalized representation of an airborne aircraft."""

    icao24: str = Field(..., description="ICAO 24-bit transponder address")
    callsign: str = Field(default="N/A", description="Trimmed callsign")
    origin_country: str = Field(default="", description="Country of registration")
    lat: float = Field(..., description="Latitude in decimal degrees")
    lon: float = Field(..., description="Longitude in decimal degrees")
    baro_altitude: Optional[float] = Field(
        default=None, description="Barometric altitude in meters"
    )

    model_config = ConfigDict(frozen=True, extra="ignore")


class AircraftFeed(BaseModel):
    """Aircraft returned by one feed query."""

    time: Optional[int] = Field(default=None, description="Feed timestamp (epoch seconds)")
    aircraft: list[AircraftRecord] = Field(default_factory=list)


__all__ = ["AircraftFeed", "AircraftRecord"]
