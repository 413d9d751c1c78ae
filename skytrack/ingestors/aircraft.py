"""Live aircraft feed client for the OpenSky REST API.

OpenSky state vectors are positional arrays; the indices used here are
0 icao24, 1 callsign, 2 origin_country, 5 longitude, 6 latitude,
7 baro_altitude (meters) and 8 on_ground.
"""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Any, Awaitable, Callable, Optional

import httpx

from skytrack.config import settings
from skytrack.ingestors.errors import (
    AircraftFeedFailure,
    AircraftFeedHTTPError,
    AircraftFeedTimeout,
    AircraftRetriesExhausted,
)
from skytrack.models.aircraft import AircraftFeed, AircraftRecord
from skytrack.models.geo import BoundingBox

logger = logging.getLogger("skytrack.ingestors.aircraft")

Sleep = Callable[[float], Awaitable[Any]]


def _as_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def normalize_state(entry: Any) -> Optional[AircraftRecord]:
    """Convert one state vector; grounded or position-less aircraft yield None."""

    if not isinstance(entry, (list, tuple)) or len(entry) < 7:
        return None

    icao24 = entry[0]
    if not icao24 or not isinstance(icao24, str):
        return None

    lon = _as_float(entry[5])
    lat = _as_float(entry[6])
    if lat is None or lon is None:
        return None

    on_ground = bool(entry[8]) if len(entry) > 8 else False
    if on_ground:
        return None

    raw_callsign = entry[1] if isinstance(entry[1], str) else None
    callsign = (raw_callsign or "N/A").strip() or "N/A"

    return AircraftRecord(
        icao24=icao24,
        callsign=callsign,
        origin_country=entry[2] if isinstance(entry[2], str) else "",
        lat=lat,
        lon=lon,
        baro_altitude=_as_float(entry[7]) if len(entry) > 7 else None,
    )


def normalize_feed(payload: Any) -> AircraftFeed:
    """Normalize a ``{"time": ..., "states": [...]}`` payload.

    A null or missing ``states`` list is an empty result, not an error.
    """

    if not isinstance(payload, dict):
        return AircraftFeed()

    raw_states = payload.get("states")
    if not isinstance(raw_states, list):
        raw_states = []
    aircraft = [
        record for record in (normalize_state(entry) for entry in raw_states) if record
    ]
    feed_time = payload.get("time")
    logger.debug(
        "Normalized %s of %s aircraft states", len(aircraft), len(raw_states)
    )
    return AircraftFeed(
        time=int(feed_time) if isinstance(feed_time, (int, float)) else None,
        aircraft=aircraft,
    )


class AircraftFeedClient:
    """Fetch aircraft state for a bounding box with bounded linear-backoff retries."""

    def __init__(
        self,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Sleep | None = None,
    ) -> None:
        self.base_url = base_url or settings.aircraft_base_url
        self.timeout = timeout if timeout is not None else settings.aircraft_timeout
        self.retries = max(retries if retries is not None else settings.aircraft_retries, 0)
        self.backoff_seconds = (
            backoff_seconds
            if backoff_seconds is not None
            else settings.aircraft_backoff_seconds
        )
        self.transport = transport
        self.sleep = sleep or asyncio.sleep

    async def fetch_states(self, box: BoundingBox) -> Any:
        """Return the decoded feed payload or raise an ``AircraftFeedError``.

        4xx responses are returned to the caller at once. 5xx responses,
        timeouts and transport errors are retried until the budget of
        ``1 + retries`` attempts is spent; the final attempt's failure is
        raised as is.
        """

        total = 1 + self.retries
        params = box.to_params()
        last_error: BaseException | None = None

        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self.transport, follow_redirects=True
        ) as client:
            for attempt in range(total):
                number = attempt + 1
                final = number == total

                if attempt > 0:
                    delay = attempt * self.backoff_seconds
                    logger.info(
                        "Retrying aircraft fetch (attempt %s/%s) after %.1fs delay",
                        number,
                        total,
                        delay,
                    )
                    await self.sleep(delay)

                try:
                    response = await asyncio.wait_for(
                        client.get(self.base_url, params=params), timeout=self.timeout
                    )
                    if response.is_success:
                        return response.json()
                except (httpx.TimeoutException, asyncio.TimeoutError) as exc:
                    last_error = exc
                    logger.warning(
                        "Aircraft fetch (attempt %s/%s) timed out after %ss",
                        number,
                        total,
                        self.timeout,
                    )
                    if final:
                        raise AircraftFeedTimeout(self.timeout, attempts=number) from exc
                    continue
                except Exception as exc:
                    last_error = exc
                    logger.warning(
                        "Aircraft fetch (attempt %s/%s) failed: %r", number, total, exc
                    )
                    if final:
                        raise AircraftFeedFailure(
                            f"Aircraft feed request failed: {exc}",
                            attempts=number,
                            details=repr(exc),
                        ) from exc
                    continue

                error = AircraftFeedHTTPError(
                    response.status_code, response.text, attempts=number
                )
                last_error = error
                logger.error(
                    "Aircraft fetch (attempt %s/%s) failed with status %s",
                    number,
                    total,
                    response.status_code,
                )
                if 400 <= response.status_code < 500 or final:
                    raise error

        logger.error("Aircraft fetch exhausted %s attempts; last error: %r", total, last_error)
        raise AircraftRetriesExhausted(
            "Aircraft feed failed after multiple retries",
            attempts=total,
            details=repr(last_error),
        ) from last_error

    async def get_aircraft(self, box: BoundingBox) -> AircraftFeed:
        """Fetch and normalize the aircraft inside ``box``."""

        payload = await self.fetch_states(box)
        feed = normalize_feed(payload)
        logger.info("Fetched %s airborne aircraft", len(feed.aircraft))
        return feed


__all__ = ["AircraftFeedClient", "normalize_feed", "normalize_state"]
