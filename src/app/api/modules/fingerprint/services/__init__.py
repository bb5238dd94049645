from app.api.modules.fingerprint.services.core import AnalysisCache, FingerprintExtractor
from app.api.modules.fingerprint.services.network import IpGeoClient, RequestIpResolver
from app.api.modules.fingerprint.services.security import (
    DeviceTrustService,
    SecurityEventLogger,
)

__all__ = (
    "AnalysisCache",
    "DeviceTrustService",
    "FingerprintExtractor",
    "IpGeoClient",
    "RequestIpResolver",
    "SecurityEventLogger",
)
