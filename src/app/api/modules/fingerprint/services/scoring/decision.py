from collections.abc import Collection

from app.api.modules.fingerprint.schema import FraudDecision
from app.api.modules.fingerprint.services.core import unique
from app.settings import RiskThresholds

BLOCK_REQUEST = "BLOCK_REQUEST"
REQUIRE_ADDITIONAL_AUTH = "REQUIRE_ADDITIONAL_AUTH"
ENHANCED_MONITORING = "ENHANCED_MONITORING"
RATE_LIMIT = "RATE_LIMIT"
LOG_ACTIVITY = "LOG_ACTIVITY"


def decide(
    risk_score: float,
    flags: Collection[str],
    thresholds: RiskThresholds,
) -> FraudDecision:
    """Evaluate every rule top to bottom; actions accumulate, later reasons win."""
    blocked = False
    reason: str | None = None
    confidence = 0.0
    actions: list[str] = []

    if risk_score >= thresholds.critical:
        blocked = True
        reason = "CRITICAL_RISK_SCORE"
        confidence = 0.95
        actions.append(BLOCK_REQUEST)

    if "BOT_DETECTED" in flags:
        blocked = True
        reason = "BOT_DETECTED"
        confidence = 0.90
        actions.append(BLOCK_REQUEST)

    if risk_score >= thresholds.high:
        actions.extend((REQUIRE_ADDITIONAL_AUTH, ENHANCED_MONITORING))

    if risk_score >= thresholds.medium:
        actions.extend((RATE_LIMIT, LOG_ACTIVITY))

    return FraudDecision(
        blocked=blocked,
        reason=reason,
        confidence=confidence,
        actions=unique(actions),
    )


__all__ = (
    "BLOCK_REQUEST",
    "ENHANCED_MONITORING",
    "LOG_ACTIVITY",
    "RATE_LIMIT",
    "REQUIRE_ADDITIONAL_AUTH",
    "decide",
)
