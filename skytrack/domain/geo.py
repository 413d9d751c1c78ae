"""Great-circle distance and bounding-box helpers."""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any, Iterable

from skytrack.models.geo import BoundingBox

EARTH_RADIUS_KM = 6371.0


def haversine_km(a_lat: float, a_lon: float, b_lat: float, b_lon: float) -> float:
    """Great-circle distance between two points in kilometers.

    The haversine term is clamped to [0, 1] so rounding error near the poles
    or for antipodal points cannot push ``sqrt`` outside its domain.
    """

    phi1 = math.radians(a_lat)
    phi2 = math.radians(b_lat)
    d_phi = math.radians(b_lat - a_lat)
    d_lambda = math.radians(b_lon - a_lon)

    h = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    h = min(1.0, max(0.0, h))
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def is_within_region(lat: float, lon: float, box: BoundingBox) -> bool:
    """Inclusive containment test."""

    return box.min_lat <= lat <= box.max_lat and box.min_lon <= lon <= box.max_lon


def _coords(point: Any) -> tuple[Any, Any]:
    if isinstance(point, Mapping):
        return point.get("lat"), point.get("lon")
    return getattr(point, "lat", None), getattr(point, "lon", None)


def compute_bounds(points: Iterable[Any], padding: float = 5.0) -> BoundingBox | None:
    """Bounding box around ``points`` expanded by ``padding`` degrees.

    Points may be models or mappings exposing ``lat``/``lon``; points missing
    either coordinate are ignored. Returns None when no usable point exists,
    leaving the caller to pick a fallback region or skip the dependent query.
    """

    min_lat = min_lon = math.inf
    max_lat = max_lon = -math.inf
    found = False

    for point in points:
        lat, lon = _coords(point)
        if not isinstance(lat, (int, float)) or not isinstance(lon, (int, float)):
            continue
        found = True
        min_lat = min(min_lat, lat)
        max_lat = max(max_lat, lat)
        min_lon = min(min_lon, lon)
        max_lon = max(max_lon, lon)

    if not found:
        return None

    return BoundingBox(
        min_lat=max(-90.0, min_lat - padding),
        min_lon=max(-180.0, min_lon - padding),
        max_lat=min(90.0, max_lat + padding),
        max_lon=min(180.0, max_lon + padding),
    )


__all__ = ["EARTH_RADIUS_KM", "compute_bounds", "haversine_km", "is_within_region"]
