import pytest

from app.api.modules.fingerprint.schema import FingerprintComponents
from app.api.modules.fingerprint.services.detectors import (
    DEFAULT_DETECTORS,
    DetectionContext,
    detect_automation,
    detect_bot,
    detect_fingerprint_anomalies,
    detect_headless_browser,
    detect_inconsistencies,
    detect_rare_configuration,
    detect_vpn_indicators,
    run_detectors,
)
from tests.helpers import CHROME_UA, GOOGLEBOT_UA, clean_components


def components(**overrides) -> FingerprintComponents:
    data = clean_components()
    data.update(overrides)
    return FingerprintComponents.model_validate(data)


@pytest.mark.parametrize(
    "user_agent",
    [
        GOOGLEBOT_UA,
        "Mozilla/5.0 (compatible; bingbot/2.0)",
        "Baiduspider/2.0",
        "SiteCrawler 1.0",
        "MyScraper/3",
        "Mozilla/5.0 HeadlessChrome/120.0",
        "PhantomJS/2.1.1",
        "selenium/4.0",
        "Puppeteer",
    ],
)
def test_bot_signatures(user_agent):
    assert detect_bot(user_agent)


def test_bot_detection_ignores_regular_browser():
    assert not detect_bot(CHROME_UA)


@pytest.mark.parametrize(
    "user_agent",
    ["WebDriver/1.0", "Automation Agent", "chrome-automation", "HeadlessChrome/120"],
)
def test_automation_signatures(user_agent):
    assert detect_automation(user_agent)


def test_automation_chromium_alone_is_not_flagged():
    assert not detect_automation("Mozilla/5.0 Chromium/120.0")


@pytest.mark.parametrize(
    "user_agent",
    ["SuperVPN client", "Proxy/1.0", "TunnelBear", "Anonymous Browser"],
)
def test_vpn_keywords(user_agent):
    assert detect_vpn_indicators(user_agent)
    assert not detect_vpn_indicators(CHROME_UA)


def test_viewport_larger_than_screen_is_inconsistent():
    data = FingerprintComponents.model_validate(
        {"screen": {"width": 800, "height": 600}, "viewport": {"width": 1000, "height": 600}}
    )
    assert detect_inconsistencies(data)


def test_fallback_marker_is_inconsistent():
    assert detect_inconsistencies(components(fallback=True))
    assert not detect_inconsistencies(components())
    assert not detect_inconsistencies(None)


@pytest.mark.parametrize(
    "overrides",
    [
        {"screen": {"width": 300, "height": 300}},
        {"screen": {"width": 7680, "height": 4320}},
        {"hardware": {"hardwareConcurrency": 64, "deviceMemory": 8}},
        {"hardware": {"hardwareConcurrency": 8, "deviceMemory": 64}},
    ],
)
def test_rare_configuration(overrides):
    assert detect_rare_configuration(components(**overrides))


def test_common_configuration_is_not_rare():
    assert not detect_rare_configuration(components())
    assert not detect_rare_configuration(
        components(screen={"width": 1920}, hardware={"deviceMemory": 16})
    )


def test_unavailable_canvas_and_webgl_mean_headless():
    data = FingerprintComponents.model_validate(
        {"canvas": "canvas_unavailable", "webgl": "webgl_unavailable"}
    )
    assert detect_headless_browser(data)


@pytest.mark.parametrize(
    "overrides",
    [
        {"canvas": None},
        {"canvas": ""},
        {"webgl": "webgl_unavailable"},
        {"viewport": {"width": 1920, "height": 1080}},
    ],
)
def test_headless_indicators(overrides):
    assert detect_headless_browser(components(**overrides))


def test_regular_browser_is_not_headless():
    assert not detect_headless_browser(components())
    assert not detect_headless_browser(None)


def test_short_canvas_is_an_anomaly():
    assert detect_fingerprint_anomalies(components(canvas="abc123"))


def test_few_fonts_is_an_anomaly():
    assert detect_fingerprint_anomalies(components(fonts=["Arial", "Verdana"]))
    assert detect_fingerprint_anomalies(components(fonts=[]))


def test_missing_fonts_is_not_an_anomaly():
    assert not detect_fingerprint_anomalies(components(fonts=None))
    assert not detect_fingerprint_anomalies(components())


def test_run_detectors_reports_hits_in_flag_order():
    context = DetectionContext(
        user_agent="Googlebot via proxy",
        components=components(fallback=True, canvas="tiny"),
    )
    hits = run_detectors(context)

    assert [hit.flag for hit in hits] == [
        "BOT_DETECTED",
        "INCONSISTENT_DATA",
        "VPN_INDICATORS",
        "FINGERPRINT_ANOMALIES",
    ]
    assert sum(hit.weight for hit in hits) == pytest.approx(0.9)


def test_clean_request_triggers_nothing():
    context = DetectionContext(user_agent=CHROME_UA, components=components())
    assert run_detectors(context) == []


def test_detector_weights():
    weights = {detector.flag: detector.weight for detector in DEFAULT_DETECTORS}
    assert weights == {
        "BOT_DETECTED": 0.40,
        "AUTOMATION_DETECTED": 0.30,
        "HEADLESS_BROWSER": 0.35,
        "INCONSISTENT_DATA": 0.20,
        "RARE_CONFIGURATION": 0.15,
        "VPN_INDICATORS": 0.10,
        "FINGERPRINT_ANOMALIES": 0.20,
    }
