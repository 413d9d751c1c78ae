"""Run-level failures raised by the ingestors."""

from __future__ import annotations

from typing import Optional


class BalloonHistoryUnavailable(RuntimeError):
    """No balloon could be collected and at least one hourly fetch failed."""

    def __init__(self, errors: list[str]):
        super().__init__(
            "Some balloon history requests failed and no valid balloon data "
            "could be retrieved"
        )
        self.errors = list(errors)


class AircraftFeedError(RuntimeError):
    """Base class for failures of the live aircraft feed.

    ``attempts`` is the number of requests issued before giving up.
    """

    def __init__(self, message: str, *, attempts: int, details: Optional[str] = None):
        super().__init__(message)
        self.attempts = attempts
        self.details = details


class AircraftFeedHTTPError(AircraftFeedError):
    """The feed answered with a non-2xx status."""

    def __init__(self, status_code: int, body: str, *, attempts: int):
        super().__init__(
            f"Aircraft feed returned HTTP {status_code}", attempts=attempts, details=body
        )
        self.status_code = status_code


class AircraftFeedTimeout(AircraftFeedError):
    """The final attempt exceeded its deadline."""

    def __init__(self, timeout: float, *, attempts: int):
        super().__init__(
            f"Aircraft feed request timed out after {timeout:g}s", attempts=attempts
        )
        self.timeout = timeout


class AircraftFeedFailure(AircraftFeedError):
    """Transport or decoding failure on the final attempt."""


class AircraftRetriesExhausted(AircraftFeedError):
    """Every attempt was spent without a terminal decision."""


__all__ = [
    "AircraftFeedError",
    "AircraftFeedFailure",
    "AircraftFeedHTTPError",
    "AircraftFeedTimeout",
    "AircraftRetriesExhausted",
    "BalloonHistoryUnavailable",
]
