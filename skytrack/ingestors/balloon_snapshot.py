"""Normalize one hour of raw balloon positions into BalloonRecords.

The hourly feed has shipped two incompatible payload shapes:

* tuple schema: ``[[lat, lon, alt_km], ...]`` with no identifiers
* object schema: ``[{"id": ..., "lat"|"latitude": ..., "lon"|"longitude": ...,
  "alt"|"altitude": alt_ft}, ...]``

The shape is detected from the first element and each element is then
converted by the matching pure function.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import json
import logging
from typing import Any, Optional

from pydantic import ValidationError

from skytrack.domain.geo import is_within_region
from skytrack.models.balloon import BalloonRecord
from skytrack.models.geo import BoundingBox

logger = logging.getLogger("skytrack.ingestors.balloon_snapshot")

KM_TO_M = 1000.0
FT_TO_M = 0.3048


@dataclass
class SnapshotResult:
    """Records produced from one hour; ``parse_failed`` marks undecodable bodies."""

    records: dict[str, BalloonRecord] = field(default_factory=dict)
    parse_failed: bool = False


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _first_present(entry: dict, *keys: str) -> Any:
    for key in keys:
        value = entry.get(key)
        if value is not None:
            return value
    return None


def _build_record(
    balloon_id: str, lat: Any, lon: Any, alt: Optional[float]
) -> Optional[BalloonRecord]:
    if not _is_number(lat) or not _is_number(lon):
        return None
    try:
        return BalloonRecord(id=balloon_id, lat=float(lat), lon=float(lon), alt=alt)
    except ValidationError:
        logger.debug("Discarding out-of-range balloon %s at (%s, %s)", balloon_id, lat, lon)
        return None


def from_tuple(entry: Any, *, hour: str, index: int, source: str) -> Optional[BalloonRecord]:
    """Convert a ``[lat, lon, alt_km]`` entry; altitude is scaled to meters."""

    if not isinstance(entry, (list, tuple)) or len(entry) < 2:
        return None

    lat, lon = entry[0], entry[1]
    raw_alt = entry[2] if len(entry) > 2 else None
    if raw_alt is not None and not _is_number(raw_alt):
        return None
    alt = float(raw_alt) * KM_TO_M if raw_alt is not None else None

    return _build_record(f"{source}-H{hour}-{index}", lat, lon, alt)


def from_object(entry: Any) -> Optional[BalloonRecord]:
    """Convert an id-tagged object entry; altitude is feet, defaulting to 0."""

    if not isinstance(entry, dict):
        return None

    balloon_id = entry.get("id")
    if balloon_id is None:
        return None

    raw_alt = _first_present(entry, "alt", "altitude")
    if raw_alt is None:
        raw_alt = 0
    if not _is_number(raw_alt):
        return None

    return _build_record(
        str(balloon_id),
        _first_present(entry, "lat", "latitude"),
        _first_present(entry, "lon", "longitude"),
        float(raw_alt) * FT_TO_M,
    )


def normalize_payload(
    payload: Any,
    *,
    hour: str,
    region: BoundingBox | None = None,
    source: str = "WBS",
) -> dict[str, BalloonRecord]:
    """Normalize an already-decoded hourly payload.

    Anything other than a non-empty list yields no records. Within one
    payload a repeated id keeps its first occurrence.
    """

    if not isinstance(payload, list) or not payload:
        return {}

    first = payload[0]
    if isinstance(first, (list, tuple)) and first and _is_number(first[0]):
        candidates = (
            from_tuple(entry, hour=hour, index=index, source=source)
            for index, entry in enumerate(payload)
        )
    elif isinstance(first, dict) and "id" in first:
        candidates = (from_object(entry) for entry in payload)
    else:
        logger.debug("Hour %s payload has an unrecognized shape; ignoring", hour)
        return {}

    records: dict[str, BalloonRecord] = {}
    skipped = 0
    for record in candidates:
        if record is None:
            skipped += 1
            continue
        if region is not None and not is_within_region(record.lat, record.lon, region):
            continue
        records.setdefault(record.id, record)

    if skipped:
        logger.debug("Hour %s: skipped %s malformed balloon entries", hour, skipped)
    return records


def normalize_snapshot(
    body: str | bytes,
    *,
    hour: str,
    region: BoundingBox | None = None,
    source: str = "WBS",
) -> SnapshotResult:
    """Decode and normalize one hour's raw response body."""

    try:
        payload = json.loads(body)
    except ValueError as exc:
        logger.warning("Failed to parse JSON for hour %s.json: %s", hour, exc)
        return SnapshotResult(parse_failed=True)

    return SnapshotResult(
        records=normalize_payload(payload, hour=hour, region=region, source=source)
    )


__all__ = [
    "SnapshotResult",
    "from_object",
    "from_tuple",
    "normalize_payload",
    "normalize_snapshot",
]
