"""Collect the last 24 hours of balloon positions from the hourly feed.

Hours are fetched one at a time, most recent ("23") first. Each fetch is
folded into an immutable accumulator; because the newest hour is merged
first, keeping the first record seen for an id keeps its latest position.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
import logging
from types import MappingProxyType
from typing import Mapping, Optional

import httpx

from skytrack.config import settings
from skytrack.ingestors.balloon_snapshot import normalize_snapshot
from skytrack.ingestors.errors import BalloonHistoryUnavailable
from skytrack.models.balloon import BalloonHistory, BalloonRecord
from skytrack.models.fetch import (
    FetchHttpError,
    FetchNetworkError,
    FetchOutcome,
    FetchSuccess,
    FetchTimeout,
)
from skytrack.models.geo import BoundingBox

logger = logging.getLogger("skytrack.ingestors.balloon_history")

HOURS_DESCENDING: tuple[str, ...] = tuple(f"{hour:02d}" for hour in range(23, -1, -1))


def merge_first_write_wins(
    existing: Mapping[str, BalloonRecord], incoming: Mapping[str, BalloonRecord]
) -> dict[str, BalloonRecord]:
    """Merge ``incoming`` into a copy of ``existing`` without replacing known ids."""

    merged = dict(existing)
    for balloon_id, record in incoming.items():
        merged.setdefault(balloon_id, record)
    return merged


@dataclass(frozen=True)
class HourReport:
    """What happened for one hour of the run."""

    hour: str
    outcome: FetchOutcome
    received: int = 0
    added: int = 0
    error: Optional[str] = None


@dataclass(frozen=True)
class HistoryAccumulator:
    """Immutable state threaded through the hourly fold."""

    records: Mapping[str, BalloonRecord] = field(
        default_factory=lambda: MappingProxyType({})
    )
    errors: tuple[str, ...] = ()
    parse_failures: tuple[str, ...] = ()
    any_failed: bool = False

    def to_history(self, result_cap: int) -> BalloonHistory:
        """Materialize the run result, keeping insertion order up to the cap."""

        balloons = list(self.records.values())
        return BalloonHistory(
            balloons=balloons[: max(result_cap, 0)],
            any_failed=self.any_failed,
            errors=list(self.errors),
            parse_failures=list(self.parse_failures),
            unique_count=len(balloons),
        )


def describe_failure(hour: str, outcome: FetchOutcome) -> Optional[str]:
    """Error-list entry for a failed fetch, or None for a successful one."""

    if isinstance(outcome, FetchHttpError):
        return f"Hour {hour}: Status {outcome.status}"
    if isinstance(outcome, FetchTimeout):
        return f"Hour {hour}: Fetch Timeout"
    if isinstance(outcome, FetchNetworkError):
        return f"Hour {hour}: Fetch Error ({outcome.message})"
    return None


def fold_hour(
    acc: HistoryAccumulator,
    hour: str,
    outcome: FetchOutcome,
    *,
    region: BoundingBox | None = None,
    source: str = "WBS",
) -> tuple[HistoryAccumulator, HourReport]:
    """Apply one hour's fetch outcome to the accumulator."""

    if isinstance(outcome, FetchSuccess):
        snapshot = normalize_snapshot(outcome.body, hour=hour, region=region, source=source)
        merged = merge_first_write_wins(acc.records, snapshot.records)
        parse_failures = acc.parse_failures + ((hour,) if snapshot.parse_failed else ())
        next_acc = HistoryAccumulator(
            records=MappingProxyType(merged),
            errors=acc.errors,
            parse_failures=parse_failures,
            any_failed=acc.any_failed,
        )
        return next_acc, HourReport(
            hour=hour,
            outcome=outcome,
            received=len(snapshot.records),
            added=len(merged) - len(acc.records),
        )

    error = describe_failure(hour, outcome)
    next_acc = HistoryAccumulator(
        records=acc.records,
        errors=acc.errors + (error,),
        parse_failures=acc.parse_failures,
        any_failed=True,
    )
    return next_acc, HourReport(hour=hour, outcome=outcome, error=error)


class BalloonHistoryAggregator:
    """Fetch and merge the 24 hourly balloon snapshots."""

    def __init__(
        self,
        *,
        url_template: str | None = None,
        timeout: float | None = None,
        result_cap: int | None = None,
        region: BoundingBox | None = None,
        apply_region: bool | None = None,
        source_prefix: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url_template = url_template or settings.balloon_url_template
        self.timeout = timeout if timeout is not None else settings.balloon_timeout
        self.result_cap = (
            result_cap if result_cap is not None else settings.balloon_result_cap
        )
        if apply_region is None:
            apply_region = settings.region_filter_enabled
        self.region = (region or settings.region_bounds) if apply_region else None
        self.source_prefix = source_prefix or settings.balloon_source_prefix
        self.transport = transport

    def url_for(self, hour: str) -> str:
        return self.url_template.format(hour=hour)

    async def fetch_hour(self, client: httpx.AsyncClient, hour: str) -> FetchOutcome:
        """Issue one bounded-timeout request and classify the result."""

        url = self.url_for(hour)
        try:
            response = await asyncio.wait_for(client.get(url), timeout=self.timeout)
        except (httpx.TimeoutException, asyncio.TimeoutError):
            logger.error(
                "Error fetching data for hour %s: fetch timed out after %ss",
                hour,
                self.timeout,
            )
            return FetchTimeout(timeout=self.timeout)
        except httpx.RequestError as exc:
            logger.error("Error fetching data for hour %s: %s", hour, exc)
            return FetchNetworkError(message=str(exc) or exc.__class__.__name__)
        except Exception as exc:
            logger.error("Unexpected error fetching data for hour %s: %r", hour, exc)
            return FetchNetworkError(message=str(exc) or exc.__class__.__name__)

        if response.is_success:
            return FetchSuccess(body=response.text)

        logger.warning(
            "Request for hour %s failed with status %s", hour, response.status_code
        )
        return FetchHttpError(status=response.status_code, body=response.text)

    async def collect(self) -> BalloonHistory:
        """Run all 24 fetches and return the merged history without escalating."""

        acc = HistoryAccumulator()
        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self.transport, follow_redirects=True
        ) as client:
            for hour in HOURS_DESCENDING:
                outcome = await self.fetch_hour(client, hour)
                acc, report = fold_hour(
                    acc, hour, outcome, region=self.region, source=self.source_prefix
                )
                logger.debug(
                    "Hour %s: received=%s added=%s error=%s",
                    report.hour,
                    report.received,
                    report.added,
                    report.error,
                )

        history = acc.to_history(self.result_cap)
        logger.info(
            "Finished fetching balloon history: %s unique, returning %s, any failures: %s",
            history.unique_count,
            len(history.balloons),
            history.any_failed,
        )
        return history

    async def run(self) -> BalloonHistory:
        """Collect the history, raising when nothing usable came back from a failing feed."""

        history = await self.collect()
        if not history.balloons and history.any_failed:
            logger.error(
                "Balloon history unavailable: %s failed hours", len(history.errors)
            )
            raise BalloonHistoryUnavailable(history.errors)
        return history


__all__ = [
    "BalloonHistoryAggregator",
    "HOURS_DESCENDING",
    "HistoryAccumulator",
    "HourReport",
    "describe_failure",
    "fold_hour",
    "merge_first_write_wins",
]
