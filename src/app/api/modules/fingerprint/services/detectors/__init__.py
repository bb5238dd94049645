from app.api.modules.fingerprint.services.detectors.device import (
    detect_fingerprint_anomalies,
    detect_headless_browser,
    detect_inconsistencies,
    detect_rare_configuration,
)
from app.api.modules.fingerprint.services.detectors.registry import (
    DEFAULT_DETECTORS,
    DetectionContext,
    Detector,
    DetectorHit,
    run_detectors,
)
from app.api.modules.fingerprint.services.detectors.user_agent import (
    detect_automation,
    detect_bot,
    detect_vpn_indicators,
)

__all__ = (
    "DEFAULT_DETECTORS",
    "DetectionContext",
    "Detector",
    "DetectorHit",
    "detect_automation",
    "detect_bot",
    "detect_fingerprint_anomalies",
    "detect_headless_browser",
    "detect_inconsistencies",
    "detect_rare_configuration",
    "detect_vpn_indicators",
    "run_detectors",
)
