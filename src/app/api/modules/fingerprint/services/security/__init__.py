from app.api.modules.fingerprint.services.security.events import (
    DEVICE_TRUSTED,
    DEVICE_UNTRUSTED,
    FINGERPRINT_ANALYSIS,
    FINGERPRINT_VIOLATION,
    RISK_THRESHOLDS_UPDATED,
    SecurityEventLogger,
)
from app.api.modules.fingerprint.services.security.trust import DeviceTrustService

__all__ = (
    "DEVICE_TRUSTED",
    "DEVICE_UNTRUSTED",
    "FINGERPRINT_ANALYSIS",
    "FINGERPRINT_VIOLATION",
    "RISK_THRESHOLDS_UPDATED",
    "DeviceTrustService",
    "SecurityEventLogger",
)
