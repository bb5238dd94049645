from app.api.modules.fingerprint.services.scoring import decide
from app.settings import RiskThresholds

THRESHOLDS = RiskThresholds()


def test_critical_score_blocks():
    decision = decide(0.95, [], THRESHOLDS)

    assert decision.blocked is True
    assert decision.reason == "CRITICAL_RISK_SCORE"
    assert decision.confidence == 0.95
    assert decision.actions == [
        "BLOCK_REQUEST",
        "REQUIRE_ADDITIONAL_AUTH",
        "ENHANCED_MONITORING",
        "RATE_LIMIT",
        "LOG_ACTIVITY",
    ]


def test_bot_flag_blocks_regardless_of_score():
    decision = decide(0.4, ["BOT_DETECTED"], THRESHOLDS)

    assert decision.blocked is True
    assert decision.reason == "BOT_DETECTED"
    assert decision.confidence == 0.90
    assert decision.actions == ["BLOCK_REQUEST"]


def test_bot_reason_overrides_critical_and_action_is_not_duplicated():
    decision = decide(1.0, ["BOT_DETECTED", "HEADLESS_BROWSER"], THRESHOLDS)

    assert decision.blocked is True
    assert decision.reason == "BOT_DETECTED"
    assert decision.confidence == 0.90
    assert decision.actions.count("BLOCK_REQUEST") == 1
    assert decision.actions[0] == "BLOCK_REQUEST"


def test_high_score_requires_additional_auth_without_blocking():
    decision = decide(0.85, ["HEADLESS_BROWSER"], THRESHOLDS)

    assert decision.blocked is False
    assert decision.reason is None
    assert decision.actions == [
        "REQUIRE_ADDITIONAL_AUTH",
        "ENHANCED_MONITORING",
        "RATE_LIMIT",
        "LOG_ACTIVITY",
    ]


def test_medium_score_rate_limits():
    decision = decide(0.6, [], THRESHOLDS)

    assert decision.blocked is False
    assert decision.actions == ["RATE_LIMIT", "LOG_ACTIVITY"]


def test_low_score_allows_without_actions():
    decision = decide(0.59, ["VPN_INDICATORS"], THRESHOLDS)

    assert decision.blocked is False
    assert decision.reason is None
    assert decision.confidence == 0.0
    assert decision.actions == []


def test_decision_follows_runtime_thresholds():
    strict = RiskThresholds(low=0.1, medium=0.2, high=0.3, critical=0.4)
    decision = decide(0.45, [], strict)

    assert decision.blocked is True
    assert decision.reason == "CRITICAL_RISK_SCORE"
