"""Nearest-aircraft lookup for a selected balloon."""

from __future__ import annotations

import math
from typing import Iterable, Optional

from skytrack.domain.geo import haversine_km
from skytrack.models.aircraft import AircraftRecord
from skytrack.models.balloon import BalloonRecord
from skytrack.models.tracking import ProximityResult


def find_nearest(
    balloon: Optional[BalloonRecord], aircraft: Iterable[AircraftRecord]
) -> ProximityResult:
    """Linear scan for the aircraft closest to ``balloon``.

    Ties keep the first aircraft encountered. Aircraft without finite
    coordinates are ignored.
    """

    if balloon is None:
        return ProximityResult()

    nearest: AircraftRecord | None = None
    best = math.inf
    for plane in aircraft:
        if not (math.isfinite(plane.lat) and math.isfinite(plane.lon)):
            continue
        distance = haversine_km(balloon.lat, balloon.lon, plane.lat, plane.lon)
        if distance < best:
            best = distance
            nearest = plane

    if nearest is None:
        return ProximityResult()
    return ProximityResult(nearest=nearest, distance_km=best)


__all__ = ["find_nearest"]
