import httpx
import pytest

from skytrack.ingestors.aircraft import AircraftFeedClient, normalize_feed, normalize_state
from skytrack.ingestors.errors import (
    AircraftFeedFailure,
    AircraftFeedHTTPError,
    AircraftFeedTimeout,
)
from skytrack.models.geo import BoundingBox

BOX = BoundingBox(min_lat=30.0, min_lon=-110.0, max_lat=45.0, max_lon=-90.0)


def _state(icao24="abc123", callsign="TEST123 ", lon=-100.0, lat=40.0, alt=3657.6, on_ground=False):
    return [
        icao24,
        callsign,
        "United States",
        1714765198,
        1714765200,
        lon,
        lat,
        alt,
        on_ground,
        164.6,
        90.0,
        2.0,
        None,
        3700.0,
        "7000",
        False,
        0,
    ]


class FakeSleep:
    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def _client(handler, *, retries=2, backoff=1.0, sleep=None) -> AircraftFeedClient:
    return AircraftFeedClient(
        base_url="https://opensky.test/api/states/all",
        timeout=5.0,
        retries=retries,
        backoff_seconds=backoff,
        transport=httpx.MockTransport(handler),
        sleep=sleep,
    )


@pytest.mark.anyio
async def test_fetch_states_sends_bounding_box():
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request):
        captured.append(request)
        return httpx.Response(200, json={"time": 1714765200, "states": [_state()]})

    payload = await _client(handler).fetch_states(BOX)

    assert payload["time"] == 1714765200
    params = captured[0].url.params
    assert float(params["lamin"]) == 30.0
    assert float(params["lomin"]) == -110.0
    assert float(params["lamax"]) == 45.0
    assert float(params["lomax"]) == -90.0


@pytest.mark.anyio
async def test_client_error_is_not_retried():
    calls = []
    sleep = FakeSleep()

    def handler(request: httpx.Request):
        calls.append(request)
        return httpx.Response(404, text="not found")

    with pytest.raises(AircraftFeedHTTPError) as exc_info:
        await _client(handler, sleep=sleep).fetch_states(BOX)

    assert len(calls) == 1
    assert sleep.delays == []
    assert exc_info.value.status_code == 404
    assert exc_info.value.details == "not found"
    assert exc_info.value.attempts == 1


@pytest.mark.anyio
async def test_server_error_retries_after_backoff():
    statuses = iter([500, 200])
    sleep = FakeSleep()

    def handler(request: httpx.Request):
        status = next(statuses)
        if status == 200:
            return httpx.Response(200, json={"time": 1, "states": None})
        return httpx.Response(status, text="boom")

    payload = await _client(handler, backoff=0.5, sleep=sleep).fetch_states(BOX)

    assert payload == {"time": 1, "states": None}
    assert sleep.delays == [0.5]


@pytest.mark.anyio
async def test_final_server_error_surfaces_its_status():
    calls = []
    sleep = FakeSleep()

    def handler(request: httpx.Request):
        calls.append(request)
        return httpx.Response(503, text="unavailable")

    with pytest.raises(AircraftFeedHTTPError) as exc_info:
        await _client(handler, sleep=sleep).fetch_states(BOX)

    assert len(calls) == 3
    assert sleep.delays == [1.0, 2.0]
    assert exc_info.value.status_code == 503
    assert exc_info.value.attempts == 3


@pytest.mark.anyio
async def test_timeouts_retry_then_raise_dedicated_error():
    calls = []
    sleep = FakeSleep()

    def handler(request: httpx.Request):
        calls.append(request)
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(AircraftFeedTimeout) as exc_info:
        await _client(handler, sleep=sleep).fetch_states(BOX)

    assert len(calls) == 3
    assert sleep.delays == [1.0, 2.0]
    assert exc_info.value.timeout == 5.0
    assert isinstance(exc_info.value.__cause__, httpx.TimeoutException)


@pytest.mark.anyio
async def test_timeout_then_success():
    outcomes = iter(["timeout", "ok"])

    def handler(request: httpx.Request):
        if next(outcomes) == "timeout":
            raise httpx.ConnectTimeout("slow", request=request)
        return httpx.Response(200, json={"time": 2, "states": []})

    payload = await _client(handler, sleep=FakeSleep()).fetch_states(BOX)

    assert payload["states"] == []


@pytest.mark.anyio
async def test_transport_failure_on_final_attempt_is_generic_failure():
    def handler(request: httpx.Request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(AircraftFeedFailure) as exc_info:
        await _client(handler, retries=0, sleep=FakeSleep()).fetch_states(BOX)

    assert exc_info.value.attempts == 1
    assert "connection refused" in str(exc_info.value)
    assert "ConnectError" in exc_info.value.details


@pytest.mark.anyio
async def test_get_aircraft_normalizes_states():
    payload = {
        "time": 1714765200,
        "states": [
            _state(),
            _state(icao24="ground1", on_ground=True),
            _state(icao24="nopos", lat=None),
            _state(icao24="nocall", callsign=None, alt=None),
        ],
    }

    transport = httpx.MockTransport(lambda request: httpx.Response(200, json=payload))
    client = AircraftFeedClient(base_url="https://opensky.test", transport=transport)

    feed = await client.get_aircraft(BOX)

    assert feed.time == 1714765200
    assert [a.icao24 for a in feed.aircraft] == ["abc123", "nocall"]
    first, second = feed.aircraft
    assert first.callsign == "TEST123"
    assert first.origin_country == "United States"
    assert (first.lat, first.lon) == (40.0, -100.0)
    assert first.baro_altitude == pytest.approx(3657.6)
    assert second.callsign == "N/A"
    assert second.baro_altitude is None


def test_normalize_feed_treats_null_states_as_empty():
    assert normalize_feed({"time": 5, "states": None}).aircraft == []
    assert normalize_feed({"time": 5}).aircraft == []
    assert normalize_feed(None).aircraft == []


def test_normalize_state_rejects_malformed_entries():
    assert normalize_state(["abc"]) is None
    assert normalize_state(None) is None
    assert normalize_state(_state(icao24=None)) is None
    assert normalize_state(_state(callsign="   ")).callsign == "N/A"


@pytest.mark.anyio
async def test_unexpected_errors_are_retried_then_wrapped():
    calls = []
    sleep = FakeSleep()

    def handler(request: httpx.Request):
        calls.append(request)
        raise OSError("socket exploded")

    with pytest.raises(AircraftFeedFailure) as exc_info:
        await _client(handler, sleep=sleep).fetch_states(BOX)

    assert len(calls) == 3
    assert sleep.delays == [1.0, 2.0]
    assert exc_info.value.attempts == 3
    assert "OSError" in exc_info.value.details
    assert isinstance(exc_info.value.__cause__, OSError)


def test_normalize_feed_ignores_non_list_states():
    assert normalize_feed({"time": 5, "states": 5}).aircraft == []
    assert normalize_feed({"time": 5, "states": {"abc": []}}).aircraft == []


def test_explicit_zero_timeout_is_kept():
    assert AircraftFeedClient(timeout=0).timeout == 0
