import logging
from datetime import UTC, datetime
from typing import Any

logger = logging.getLogger(__name__)

security_logger = logging.getLogger("app.security")

FINGERPRINT_VIOLATION = "FINGERPRINT_VIOLATION"
FINGERPRINT_ANALYSIS = "FINGERPRINT_ANALYSIS"
DEVICE_TRUSTED = "DEVICE_TRUSTED"
DEVICE_UNTRUSTED = "DEVICE_UNTRUSTED"
RISK_THRESHOLDS_UPDATED = "RISK_THRESHOLDS_UPDATED"


class SecurityEventLogger:
    """Fire-and-forget sink for security events."""

    def __init__(self, sink: logging.Logger = security_logger):
        self._sink = sink

    def log(self, event_type: str, details: dict[str, Any] | None = None) -> None:
        try:
            payload = {
                "timestamp": datetime.now(UTC).isoformat(),
                "ip": "unknown",
                "userAgent": "unknown",
                **{k: v for k, v in (details or {}).items() if v is not None},
            }
            self._sink.info(
                "SECURITY_EVENT: %s",
                event_type,
                extra={"event": event_type, "details": payload},
            )
        except Exception:
            logger.exception("Failed to log security event %s", event_type)


__all__ = (
    "DEVICE_TRUSTED",
    "DEVICE_UNTRUSTED",
    "FINGERPRINT_ANALYSIS",
    "FINGERPRINT_VIOLATION",
    "RISK_THRESHOLDS_UPDATED",
    "SecurityEventLogger",
)
