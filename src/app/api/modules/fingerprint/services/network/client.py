import asyncio
import logging
import re
from time import monotonic
from typing import Any

import httpx

from app.api.modules.fingerprint.schema import GeoLocation
from app.api.modules.fingerprint.services.network.common import is_local_or_private_ip
from app.settings import FingerprintConfig

logger = logging.getLogger(__name__)

VPN_ORG_INDICATORS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        # Cloud and VPS providers
        r"amazon",
        r"google cloud",
        r"microsoft",
        r"digitalocean",
        r"linode",
        r"vultr",
        r"ovh",
        r"hetzner",
        # VPN and anonymizer services
        r"vpn",
        r"proxy",
        r"tunnel",
        r"anonymizer",
        r"tor",
        r"onion",
        r"private internet access",
        r"nordvpn",
        r"expressvpn",
        r"surfshark",
        r"cyberghost",
        r"purevpn",
        r"hotspot shield",
        # Data centers
        r"hosting",
        r"datacenter",
        r"cloud",
        r"server",
        r"colocation",
        r"dedicated",
        r"virtual",
    )
)
_HOSTING_ORG_RE = re.compile(r"hosting|datacenter|cloud|server", re.IGNORECASE)
_AS_PREFIX_RE = re.compile(r"^AS\d+\s+", re.IGNORECASE)
_CORPORATE_SUFFIX_RE = re.compile(r"\s+(Inc|LLC|Ltd|Corp|Corporation)\.?$", re.IGNORECASE)

_GEO_CACHE_MAX_SIZE = 4096


def looks_like_vpn_org(org: str) -> bool:
    if not org:
        return False
    return any(pattern.search(org) for pattern in VPN_ORG_INDICATORS)


def extract_isp(org: str) -> str | None:
    if not org:
        return None
    isp = _AS_PREFIX_RE.sub("", org)
    isp = _CORPORATE_SUFFIX_RE.sub("", isp)
    return isp.strip()


def _parse_float(value: object) -> float | None:
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


def _str_or_none(value: object) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


def location_confidence(
    city: str | None,
    latitude: float | None,
    longitude: float | None,
    org: str,
) -> float:
    confidence = 0.5
    if city:
        confidence += 0.3
    if latitude is not None and longitude is not None:
        confidence += 0.2
    if looks_like_vpn_org(org):
        confidence -= 0.3
    return round(max(0.0, min(1.0, confidence)), 2)


def analyze_risk_factors(
    country: str | None,
    region: str | None,
    city: str | None,
    org: str,
    high_risk_countries: frozenset[str],
) -> list[str]:
    factors: list[str] = []
    if looks_like_vpn_org(org):
        factors.append("VPN_OR_PROXY")
    if _HOSTING_ORG_RE.search(org):
        factors.append("HOSTING_PROVIDER")
    if country and country in high_risk_countries:
        factors.append("HIGH_RISK_COUNTRY")
    if not city and not region:
        factors.append("INCOMPLETE_LOCATION")
    return factors


def local_location(ip: str | None) -> GeoLocation:
    return GeoLocation(
        ip=ip,
        country="XX",
        city="Local/Private Network",
        is_vpn=False,
        isp="Local Network",
        confidence=0.0,
        risk_factors=[],
    )


class IpGeoClient:
    """Resolves client IPs to enriched geolocation.

    Every failure path returns ``None`` so that geography simply stops
    contributing to the risk score.
    """

    def __init__(self, client: httpx.AsyncClient, config: FingerprintConfig):
        self._enabled = config.geolocation_enabled
        self._client = client
        self._base_url = config.geolocation_base_url.rstrip("/")
        self._timeout = config.geolocation_timeout_seconds
        self._cache_ttl_seconds = config.geolocation_cache_ttl_seconds
        self._high_risk_countries = frozenset(
            code.upper() for code in config.high_risk_countries
        )
        self._cache: dict[str, tuple[float, GeoLocation]] = {}

    async def lookup(self, ip: str | None) -> GeoLocation | None:
        if not self._enabled:
            return None

        if is_local_or_private_ip(ip):
            return local_location(ip)

        now = monotonic()
        if self._cache_ttl_seconds > 0:
            cached = self._cache.get(ip)
            if cached and cached[0] > now:
                return cached[1]

        try:
            data = await asyncio.wait_for(self._fetch(ip), timeout=self._timeout)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Failed to resolve IP geolocation", extra={"ip": ip})
            logger.debug("IP geolocation lookup failed: %s", exc)
            return None

        if not isinstance(data, dict) or data.get("error"):
            return None

        result = self._build_location(ip, data)

        if self._cache_ttl_seconds > 0:
            self._remember(ip, result, now)

        return result

    async def _fetch(self, ip: str) -> Any:
        response = await self._client.get(
            f"{self._base_url}/{ip}/json/",
            timeout=self._timeout,
            follow_redirects=True,
        )
        response.raise_for_status()
        return response.json()

    def _build_location(self, ip: str, data: dict[str, Any]) -> GeoLocation:
        country = _str_or_none(data.get("country_code") or data.get("country"))
        if country:
            country = country.upper()
        region = _str_or_none(data.get("region_code") or data.get("region"))
        city = _str_or_none(data.get("city"))
        latitude = _parse_float(data.get("latitude"))
        longitude = _parse_float(data.get("longitude"))
        org = str(data.get("org") or "")

        return GeoLocation(
            ip=ip,
            country=country,
            region=region,
            city=city,
            latitude=latitude,
            longitude=longitude,
            timezone=_str_or_none(data.get("timezone")),
            is_vpn=looks_like_vpn_org(org),
            isp=extract_isp(org),
            confidence=location_confidence(city, latitude, longitude, org),
            risk_factors=analyze_risk_factors(
                country, region, city, org, self._high_risk_countries
            ),
        )

    def _remember(self, ip: str, result: GeoLocation, now: float) -> None:
        if len(self._cache) >= _GEO_CACHE_MAX_SIZE:
            stale = [k for k, (exp, _) in self._cache.items() if exp <= now]
            for k in stale:
                del self._cache[k]
            if len(self._cache) >= _GEO_CACHE_MAX_SIZE:
                oldest = min(self._cache, key=lambda k: self._cache[k][0])
                del self._cache[oldest]
        self._cache[ip] = (now + self._cache_ttl_seconds, result)


__all__ = (
    "IpGeoClient",
    "analyze_risk_factors",
    "extract_isp",
    "local_location",
    "location_confidence",
    "looks_like_vpn_org",
)
