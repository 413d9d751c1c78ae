"""Geographic models shared by the ingestors and services."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class BoundingBox(BaseModel):
    """Rectangular latitude/longitude area in decimal degrees."""

    min_lat: float = Field(..., ge=-90.0, le=90.0, description="Southern edge")
    min_lon: float = Field(..., ge=-180.0, le=180.0, description="Western edge")
    max_lat: float = Field(..., ge=-90.0, le=90.0, description="Northern edge")
    max_lon: float = Field(..., ge=-180.0, le=180.0, description="Eastern edge")

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_order(self) -> "BoundingBox":
        if self.min_lat > self.max_lat:
            raise ValueError("min_lat must not exceed max_lat")
        if self.min_lon > self.max_lon:
            raise ValueError("min_lon must not exceed max_lon")
        return self

    def to_params(self) -> dict[str, float]:
        """Render as OpenSky query parameters."""

        return {
            "lamin": self.min_lat,
            "lomin": self.min_lon,
            "lamax": self.max_lat,
            "lomax": self.max_lon,
        }


__all__ = ["BoundingBox"]
