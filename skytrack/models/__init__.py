"""Pydantic models for the SkyTrack backend."""

from .aircraft import AircraftFeed, AircraftRecord
from .balloon import BalloonHistory, BalloonRecord
from .geo import BoundingBox
from .tracking import ProximityRequest, ProximityResult, TrackingSnapshot

__all__ = [
    "AircraftFeed",
    "AircraftRecord",
    "BalloonHistory",
    "BalloonRecord",
    "BoundingBox",
    "ProximityRequest",
    "ProximityResult",
    "TrackingSnapshot",
]
