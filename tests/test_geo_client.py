import asyncio

import httpx
import pytest

from app.api.modules.fingerprint.services.network import IpGeoClient
from app.api.modules.fingerprint.services.network.client import (
    extract_isp,
    location_confidence,
    looks_like_vpn_org,
)
from app.settings import FingerprintConfig

MOSCOW_HETZNER = {
    "ip": "198.51.100.20",
    "city": "Moscow",
    "region_code": "MOW",
    "country_code": "ru",
    "latitude": 55.75,
    "longitude": 37.61,
    "timezone": "Europe/Moscow",
    "org": "AS24940 Hetzner Online GmbH",
}

BERLIN_TELEKOM = {
    "ip": "198.51.100.21",
    "city": "Berlin",
    "region_code": "BE",
    "country_code": "DE",
    "latitude": 52.52,
    "longitude": 13.40,
    "timezone": "Europe/Berlin",
    "org": "AS3320 Deutsche Telekom AG",
}


def make_client(handler, **config_overrides) -> tuple[httpx.AsyncClient, IpGeoClient]:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    config = FingerprintConfig(**config_overrides)
    return http_client, IpGeoClient(http_client, config)


async def test_lookup_enriches_hosting_ip():
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=MOSCOW_HETZNER)

    http_client, client = make_client(handler)
    async with http_client:
        geo = await client.lookup("198.51.100.20")

    assert requests[0].url.path == "/198.51.100.20/json/"
    assert geo is not None
    assert geo.country == "RU"
    assert geo.city == "Moscow"
    assert geo.is_vpn is True
    assert geo.isp == "Hetzner Online GmbH"
    assert geo.confidence == pytest.approx(0.7)
    assert geo.risk_factors == ["VPN_OR_PROXY", "HIGH_RISK_COUNTRY"]


async def test_lookup_residential_ip():
    http_client, client = make_client(lambda request: httpx.Response(200, json=BERLIN_TELEKOM))
    async with http_client:
        geo = await client.lookup("198.51.100.21")

    assert geo is not None
    assert geo.is_vpn is False
    assert geo.confidence == 1.0
    assert geo.risk_factors == []
    assert geo.isp == "Deutsche Telekom AG"


async def test_private_ip_skips_remote_lookup():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("private addresses must not be looked up")

    http_client, client = make_client(handler)
    async with http_client:
        geo = await client.lookup("192.168.1.10")

    assert geo is not None
    assert geo.country == "XX"
    assert geo.city == "Local/Private Network"
    assert geo.confidence == 0.0
    assert geo.risk_factors == []


async def test_http_error_returns_none():
    http_client, client = make_client(lambda request: httpx.Response(500))
    async with http_client:
        assert await client.lookup("198.51.100.20") is None


async def test_error_payload_returns_none():
    http_client, client = make_client(
        lambda request: httpx.Response(200, json={"error": True, "reason": "RateLimited"})
    )
    async with http_client:
        assert await client.lookup("198.51.100.20") is None


async def test_slow_lookup_times_out():
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(1)
        return httpx.Response(200, json=BERLIN_TELEKOM)

    http_client, client = make_client(handler, geolocation_timeout_seconds=0.05)
    async with http_client:
        assert await client.lookup("198.51.100.21") is None


async def test_results_are_cached():
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(200, json=BERLIN_TELEKOM)

    http_client, client = make_client(handler)
    async with http_client:
        first = await client.lookup("198.51.100.21")
        second = await client.lookup("198.51.100.21")

    assert calls == 1
    assert first == second


async def test_disabled_lookup_returns_none():
    http_client, client = make_client(
        lambda request: httpx.Response(200, json=BERLIN_TELEKOM),
        geolocation_enabled=False,
    )
    async with http_client:
        assert await client.lookup("198.51.100.21") is None


def test_org_helpers():
    assert looks_like_vpn_org("NordVPN S.A.")
    assert looks_like_vpn_org("DigitalOcean, LLC")
    assert not looks_like_vpn_org("")
    assert extract_isp("AS16509 Amazon.com, Inc.") == "Amazon.com,"
    assert extract_isp("") is None
    assert location_confidence(None, None, None, "") == 0.5
