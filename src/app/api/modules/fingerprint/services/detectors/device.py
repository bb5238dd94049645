from app.api.modules.fingerprint.schema import FingerprintComponents

CANVAS_UNAVAILABLE = "canvas_unavailable"
WEBGL_UNAVAILABLE = "webgl_unavailable"

MIN_SCREEN_PIXELS = 100_000
MAX_SCREEN_PIXELS = 20_000_000
MAX_HARDWARE_CONCURRENCY = 32
MAX_DEVICE_MEMORY_GB = 32
MIN_CANVAS_LENGTH = 10
MIN_FONT_COUNT = 5


def _greater(left: float | None, right: float | None) -> bool:
    if left is None or right is None:
        return False
    return left > right


def detect_inconsistencies(components: FingerprintComponents | None) -> bool:
    if components is None:
        return False

    screen = components.screen
    viewport = components.viewport
    if screen and viewport:
        if _greater(viewport.width, screen.width) or _greater(
            viewport.height, screen.height
        ):
            return True

    return bool(components.fallback)


def detect_rare_configuration(components: FingerprintComponents | None) -> bool:
    if components is None:
        return False

    screen = components.screen
    if screen and screen.width is not None and screen.height is not None:
        total_pixels = screen.width * screen.height
        if total_pixels < MIN_SCREEN_PIXELS or total_pixels > MAX_SCREEN_PIXELS:
            return True

    hardware = components.hardware
    if hardware:
        if _greater(hardware.hardware_concurrency, MAX_HARDWARE_CONCURRENCY):
            return True
        if _greater(hardware.device_memory, MAX_DEVICE_MEMORY_GB):
            return True

    return False


def detect_headless_browser(components: FingerprintComponents | None) -> bool:
    if components is None:
        return False

    if not components.canvas or components.canvas == CANVAS_UNAVAILABLE:
        return True

    if not components.webgl or components.webgl == WEBGL_UNAVAILABLE:
        return True

    screen = components.screen
    viewport = components.viewport
    if screen and viewport:
        # Headless runners commonly report a viewport identical to the screen.
        if viewport.width == screen.width and viewport.height == screen.height:
            return True

    return False


def detect_fingerprint_anomalies(components: FingerprintComponents | None) -> bool:
    if components is None:
        return False

    if components.canvas and len(components.canvas) < MIN_CANVAS_LENGTH:
        return True

    if components.fonts is not None and len(components.fonts) < MIN_FONT_COUNT:
        return True

    return False


__all__ = (
    "CANVAS_UNAVAILABLE",
    "WEBGL_UNAVAILABLE",
    "detect_fingerprint_anomalies",
    "detect_headless_browser",
    "detect_inconsistencies",
    "detect_rare_configuration",
)
