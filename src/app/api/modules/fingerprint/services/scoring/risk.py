from collections.abc import Sequence

from app.api.modules.fingerprint.schema import GeoLocation, RiskLevel
from app.api.modules.fingerprint.services.core import unique
from app.api.modules.fingerprint.services.detectors import DetectorHit
from app.api.modules.fingerprint.services.scoring.geo import (
    calculate_location_risk,
    location_flags,
)
from app.settings import RiskThresholds

MAX_RISK_SCORE = 1.0
# Absorbs float drift so sums such as 0.1 + 0.2 + 0.3 land on the threshold.
_SCORE_PRECISION = 6


def calculate_risk_score(
    hits: Sequence[DetectorHit],
    geo: GeoLocation | None,
) -> float:
    score = sum(hit.weight for hit in hits) + calculate_location_risk(geo)
    return round(min(max(score, 0.0), MAX_RISK_SCORE), _SCORE_PRECISION)


def risk_level_for_score(score: float, thresholds: RiskThresholds) -> RiskLevel:
    if score >= thresholds.critical:
        return "CRITICAL"
    if score >= thresholds.high:
        return "HIGH"
    if score >= thresholds.medium:
        return "MEDIUM"
    if score >= thresholds.low:
        return "LOW"
    return "MINIMAL"


def generate_flags(
    hits: Sequence[DetectorHit],
    geo: GeoLocation | None,
) -> list[str]:
    return unique([*(hit.flag for hit in hits), *location_flags(geo)])


__all__ = (
    "MAX_RISK_SCORE",
    "calculate_risk_score",
    "generate_flags",
    "risk_level_for_score",
)
