import asyncio

import httpx
import pytest

from groomroute.routes import geocoding as geocoding_route
from groomroute.services.geocoding_service import (
    GeocodeResult,
    GeocodingError,
    geocode_address,
    try_geocode,
)

NOMINATIM_MATCH = [
    {"lat": "40.7128", "lon": "-74.0060", "display_name": "New York, NY, USA"},
]


def _client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_geocode_address_parses_first_result():
    seen = {}

    def handler(request):
        seen["q"] = request.url.params["q"]
        seen["agent"] = request.headers["User-Agent"]
        return httpx.Response(200, json=NOMINATIM_MATCH)

    result = asyncio.run(geocode_address("New York", client=_client(handler)))

    assert result == GeocodeResult(lat=40.7128, lng=-74.006, display_name="New York, NY, USA")
    assert seen["q"] == "New York"
    assert seen["agent"].startswith("GroomRoute")


def test_geocode_address_no_match():
    result = asyncio.run(
        geocode_address("Nowhere Lane", client=_client(lambda r: httpx.Response(200, json=[])))
    )

    assert result is None


def test_geocode_address_short_input_is_not_looked_up():
    def handler(request):
        raise AssertionError("should not be called")

    assert asyncio.run(geocode_address("  a ", client=_client(handler))) is None


def test_geocode_address_upstream_error():
    with pytest.raises(GeocodingError):
        asyncio.run(
            geocode_address("New York", client=_client(lambda r: httpx.Response(503)))
        )


def test_geocode_address_network_error():
    def handler(request):
        raise httpx.ConnectError("boom", request=request)

    with pytest.raises(GeocodingError):
        asyncio.run(geocode_address("New York", client=_client(handler)))


def test_geocode_results_are_cached(fake_redis):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json=NOMINATIM_MATCH)

    first = asyncio.run(geocode_address("New  York", client=_client(handler)))
    second = asyncio.run(geocode_address("new york", client=_client(handler)))

    assert first == second
    assert len(calls) == 1
    assert "groomroute:geocode:new york" in fake_redis.store


def test_misses_are_cached(fake_redis):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json=[])

    asyncio.run(geocode_address("Nowhere Lane", client=_client(handler)))
    assert asyncio.run(geocode_address("Nowhere Lane", client=_client(handler))) is None
    assert len(calls) == 1


def test_try_geocode_swallows_upstream_errors(monkeypatch):
    from groomroute.services import geocoding_service

    async def failing(address, client=None):
        raise GeocodingError("down")

    monkeypatch.setattr(geocoding_service, "geocode_address", failing)

    assert asyncio.run(try_geocode("New York")) is None


def test_geocode_endpoint(client, monkeypatch):
    async def fake(address, client=None):
        return GeocodeResult(lat=1.5, lng=2.5, display_name="Somewhere")

    monkeypatch.setattr(geocoding_route, "geocode_address", fake)

    data = client.get("/geocode", params={"address": "Somewhere"}).json()

    assert data == {
        "success": True,
        "lat": 1.5,
        "lng": 2.5,
        "formattedAddress": "Somewhere",
        "error": None,
    }


def test_geocode_endpoint_errors(client, monkeypatch):
    async def not_found(address, client=None):
        return None

    async def failing(address, client=None):
        raise GeocodingError("down")

    assert client.get("/geocode", params={"address": " "}).status_code == 400

    monkeypatch.setattr(geocoding_route, "geocode_address", not_found)
    data = client.get("/geocode", params={"address": "Nowhere"}).json()
    assert data["success"] is False
    assert data["error"] == "Address not found"

    monkeypatch.setattr(geocoding_route, "geocode_address", failing)
    assert client.get("/geocode", params={"address": "Somewhere"}).status_code == 502
