import json

import pytest

from skytrack.ingestors.balloon_snapshot import normalize_payload, normalize_snapshot
from skytrack.models.geo import BoundingBox

NORTH_AMERICA = BoundingBox(min_lat=15, min_lon=-170, max_lat=85, max_lon=-50)


def test_tuple_schema_scales_altitude_and_synthesizes_ids():
    payload = [[40.0, -100.0, 12.5], [41.5, -101.0, 0.3]]

    records = normalize_payload(payload, hour="07")

    assert list(records) == ["WBS-H07-0", "WBS-H07-1"]
    assert records["WBS-H07-0"].alt == pytest.approx(12500.0)
    assert records["WBS-H07-1"].alt == pytest.approx(300.0)
    assert records["WBS-H07-1"].lat == 41.5
    assert records["WBS-H07-1"].lon == -101.0


def test_tuple_schema_uses_source_prefix_and_keeps_missing_altitude_empty():
    records = normalize_payload([[10.0, 20.0]], hour="00", source="TEST")

    assert records["TEST-H00-0"].alt is None


def test_tuple_schema_skips_null_coordinates_but_keeps_index():
    payload = [[None, -100.0, 1.0], [40.0, None, 1.0], [40.0, -100.0, 1.0]]

    # The first entry decides the schema, so lead with a valid tuple.
    records = normalize_payload([[1.0, 1.0, 1.0]] + payload, hour="12")

    assert list(records) == ["WBS-H12-0", "WBS-H12-3"]


def test_object_schema_converts_feet_with_field_fallbacks():
    payload = [
        {"id": "alpha", "lat": 40.0, "lon": -100.0, "alt": 1000},
        {"id": "bravo", "latitude": 41.0, "longitude": -99.0, "altitude": 2000},
        {"id": "charlie", "lat": 42.0, "lon": -98.0},
    ]

    records = normalize_payload(payload, hour="03")

    assert records["alpha"].alt == pytest.approx(304.8)
    assert records["bravo"].alt == pytest.approx(609.6)
    assert records["bravo"].lat == 41.0
    assert records["bravo"].lon == -99.0
    assert records["charlie"].alt == 0.0


def test_object_schema_prefers_primary_field_names():
    payload = [{"id": "x", "lat": 0, "latitude": 50, "lon": 0, "longitude": 60, "alt": 10, "altitude": 99}]

    record = normalize_payload(payload, hour="01")["x"]

    assert record.lat == 0
    assert record.lon == 0
    assert record.alt == pytest.approx(3.048)


def test_object_schema_skips_incomplete_entries():
    payload = [
        {"id": "ok", "lat": 40.0, "lon": -100.0},
        {"lat": 40.0, "lon": -100.0},
        {"id": "no-lat", "lon": -100.0},
        {"id": "no-lon", "latitude": 40.0},
    ]

    records = normalize_payload(payload, hour="05")

    assert list(records) == ["ok"]


def test_region_filter_includes_boundary_and_excludes_outside():
    payload = [
        {"id": "on-min-lat", "lat": 15.0, "lon": -100.0},
        {"id": "on-max-lon", "lat": 40.0, "lon": -50.0},
        {"id": "below", "lat": 14.0, "lon": -100.0},
        {"id": "east", "lat": 40.0, "lon": -49.0},
    ]

    records = normalize_payload(payload, hour="09", region=NORTH_AMERICA)

    assert set(records) == {"on-min-lat", "on-max-lon"}


def test_region_filter_is_optional():
    payload = [{"id": "paris", "lat": 48.9, "lon": 2.4}]

    assert normalize_payload(payload, hour="09", region=NORTH_AMERICA) == {}
    assert "paris" in normalize_payload(payload, hour="09")


@pytest.mark.parametrize("payload", [[], {}, None, "text", [["a", "b"]], [{"name": "no id"}]])
def test_unusable_payloads_yield_nothing(payload):
    assert normalize_payload(payload, hour="10") == {}


def test_normalize_snapshot_reports_parse_failure():
    result = normalize_snapshot("{not json", hour="11")

    assert result.parse_failed is True
    assert result.records == {}


def test_normalize_snapshot_decodes_body():
    body = json.dumps([[40.0, -100.0, 1.0]])

    result = normalize_snapshot(body, hour="11")

    assert result.parse_failed is False
    assert list(result.records) == ["WBS-H11-0"]


def test_out_of_range_coordinates_are_dropped():
    records = normalize_payload([[95.0, 10.0, 1.0], [10.0, 10.0, 1.0]], hour="02")

    assert list(records) == ["WBS-H02-1"]
