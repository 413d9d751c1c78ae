"""Data ingestors for SkyTrack."""

from .aircraft import AircraftFeedClient, normalize_feed, normalize_state
from .balloon_history import BalloonHistoryAggregator
from .balloon_snapshot import SnapshotResult, normalize_payload, normalize_snapshot
from .errors import (
    AircraftFeedError,
    AircraftFeedFailure,
    AircraftFeedHTTPError,
    AircraftFeedTimeout,
    AircraftRetriesExhausted,
    BalloonHistoryUnavailable,
)

__all__ = [
    "AircraftFeedClient",
    "AircraftFeedError",
    "AircraftFeedFailure",
    "AircraftFeedHTTPError",
    "AircraftFeedTimeout",
    "AircraftRetriesExhausted",
    "BalloonHistoryAggregator",
    "BalloonHistoryUnavailable",
    "SnapshotResult",
    "normalize_feed",
    "normalize_payload",
    "normalize_snapshot",
    "normalize_state",
]
