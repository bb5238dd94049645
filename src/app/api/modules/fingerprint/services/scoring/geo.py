from app.api.modules.fingerprint.schema import GeoLocation

HIGH_RISK_COUNTRY = "HIGH_RISK_COUNTRY"
HOSTING_PROVIDER = "HOSTING_PROVIDER"

VPN_WEIGHT = 0.30
HIGH_RISK_COUNTRY_WEIGHT = 0.20
HOSTING_PROVIDER_WEIGHT = 0.25
LOW_CONFIDENCE_WEIGHT = 0.10
UNKNOWN_LOCATION_WEIGHT = 0.15

LOW_CONFIDENCE_THRESHOLD = 0.3
MAX_LOCATION_RISK = 0.5


def calculate_location_risk(geo: GeoLocation | None) -> float:
    """Geography contribution to the risk score, capped at ``MAX_LOCATION_RISK``."""
    if geo is None:
        return 0.0

    risk = 0.0
    if geo.is_vpn:
        risk += VPN_WEIGHT
    if HIGH_RISK_COUNTRY in geo.risk_factors:
        risk += HIGH_RISK_COUNTRY_WEIGHT
    if HOSTING_PROVIDER in geo.risk_factors:
        risk += HOSTING_PROVIDER_WEIGHT
    if geo.confidence < LOW_CONFIDENCE_THRESHOLD:
        risk += LOW_CONFIDENCE_WEIGHT
    if not geo.country and not geo.city:
        risk += UNKNOWN_LOCATION_WEIGHT

    return min(risk, MAX_LOCATION_RISK)


def location_flags(geo: GeoLocation | None) -> list[str]:
    if geo is None:
        return []

    flags: list[str] = []
    if geo.is_vpn:
        flags.append("LOCATION_VPN_PROXY")
    flags.extend(f"LOCATION_{factor}" for factor in geo.risk_factors)
    if geo.confidence < LOW_CONFIDENCE_THRESHOLD:
        flags.append("LOW_LOCATION_CONFIDENCE")
    return flags


__all__ = (
    "HIGH_RISK_COUNTRY",
    "HOSTING_PROVIDER",
    "MAX_LOCATION_RISK",
    "calculate_location_risk",
    "location_flags",
)
