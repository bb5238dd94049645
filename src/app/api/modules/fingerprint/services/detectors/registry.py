from collections.abc import Callable, Sequence
from dataclasses import dataclass

from app.api.modules.fingerprint.schema import FingerprintComponents, GeoLocation
from app.api.modules.fingerprint.services.detectors.device import (
    detect_fingerprint_anomalies,
    detect_headless_browser,
    detect_inconsistencies,
    detect_rare_configuration,
)
from app.api.modules.fingerprint.services.detectors.user_agent import (
    detect_automation,
    detect_bot,
    detect_vpn_indicators,
)


@dataclass(frozen=True, slots=True)
class DetectionContext:
    user_agent: str
    components: FingerprintComponents | None
    geo: GeoLocation | None = None


@dataclass(frozen=True, slots=True)
class Detector:
    kind: str
    flag: str
    weight: float
    predicate: Callable[[DetectionContext], bool]

    def __call__(self, context: DetectionContext) -> bool:
        return self.predicate(context)


@dataclass(frozen=True, slots=True)
class DetectorHit:
    kind: str
    flag: str
    weight: float


# Order defines the order of the emitted flags.
DEFAULT_DETECTORS: tuple[Detector, ...] = (
    Detector("bot", "BOT_DETECTED", 0.40, lambda ctx: detect_bot(ctx.user_agent)),
    Detector(
        "automation",
        "AUTOMATION_DETECTED",
        0.30,
        lambda ctx: detect_automation(ctx.user_agent),
    ),
    Detector(
        "headless",
        "HEADLESS_BROWSER",
        0.35,
        lambda ctx: detect_headless_browser(ctx.components),
    ),
    Detector(
        "inconsistency",
        "INCONSISTENT_DATA",
        0.20,
        lambda ctx: detect_inconsistencies(ctx.components),
    ),
    Detector(
        "rare_configuration",
        "RARE_CONFIGURATION",
        0.15,
        lambda ctx: detect_rare_configuration(ctx.components),
    ),
    Detector(
        "vpn_keyword",
        "VPN_INDICATORS",
        0.10,
        lambda ctx: detect_vpn_indicators(ctx.user_agent),
    ),
    Detector(
        "fingerprint_anomaly",
        "FINGERPRINT_ANOMALIES",
        0.20,
        lambda ctx: detect_fingerprint_anomalies(ctx.components),
    ),
)


def run_detectors(
    context: DetectionContext,
    detectors: Sequence[Detector] = DEFAULT_DETECTORS,
) -> list[DetectorHit]:
    return [
        DetectorHit(kind=detector.kind, flag=detector.flag, weight=detector.weight)
        for detector in detectors
        if detector(context)
    ]


__all__ = (
    "DEFAULT_DETECTORS",
    "DetectionContext",
    "Detector",
    "DetectorHit",
    "run_detectors",
)
