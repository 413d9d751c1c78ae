"""Service-layer helpers for the SkyTrack backend."""

from .proximity import find_nearest
from .tracking import TrackingService, get_tracking_service

__all__ = ["TrackingService", "find_nearest", "get_tracking_service"]
