from app.api.modules.fingerprint.services.core.cache import AnalysisCache, CachedAnalysis
from app.api.modules.fingerprint.services.core.extractor import FingerprintExtractor
from app.api.modules.fingerprint.services.core.utils import (
    UNKNOWN_IP,
    ServerSignals,
    build_fingerprint_hash,
    canonical_snapshot,
    unique,
)

__all__ = (
    "UNKNOWN_IP",
    "AnalysisCache",
    "CachedAnalysis",
    "FingerprintExtractor",
    "ServerSignals",
    "build_fingerprint_hash",
    "canonical_snapshot",
    "unique",
)
