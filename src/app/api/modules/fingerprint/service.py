import logging
from collections.abc import Sequence
from datetime import UTC, datetime

from starlette.requests import Request

from app.api.modules.fingerprint.schema import (
    Analysis,
    FingerprintPayload,
    FraudDecision,
    GeoLocation,
)
from app.api.modules.fingerprint.services.core import (
    UNKNOWN_IP,
    AnalysisCache,
    CachedAnalysis,
    FingerprintExtractor,
    ServerSignals,
    build_fingerprint_hash,
)
from app.api.modules.fingerprint.services.detectors import (
    DEFAULT_DETECTORS,
    DetectionContext,
    Detector,
    run_detectors,
)
from app.api.modules.fingerprint.services.network import IpGeoClient, RequestIpResolver
from app.api.modules.fingerprint.services.scoring import (
    calculate_risk_score,
    decide,
    generate_flags,
    risk_level_for_score,
)
from app.settings import RiskThresholds

logger = logging.getLogger(__name__)


class DeviceFingerprintService:
    """Risk engine: turns a fingerprint plus request metadata into an analysis.

    One instance per application. It owns the analysis cache and the
    runtime-mutable risk thresholds.
    """

    def __init__(
        self,
        thresholds: RiskThresholds,
        cache: AnalysisCache,
        extractor: FingerprintExtractor,
        ip_resolver: RequestIpResolver,
        ip_geo_client: IpGeoClient,
        detectors: Sequence[Detector] = DEFAULT_DETECTORS,
    ):
        self._thresholds = thresholds
        self._cache = cache
        self._extractor = extractor
        self._ip_resolver = ip_resolver
        self._ip_geo_client = ip_geo_client
        self._detectors = tuple(detectors)

    @property
    def thresholds(self) -> RiskThresholds:
        return self._thresholds

    @property
    def extractor(self) -> FingerprintExtractor:
        return self._extractor

    @property
    def cache(self) -> AnalysisCache:
        return self._cache

    def update_thresholds(self, thresholds: RiskThresholds) -> RiskThresholds:
        previous = self._thresholds
        self._thresholds = thresholds
        logger.info("Risk thresholds updated: %s -> %s", previous, thresholds)
        return previous

    def server_signals(self, request: Request) -> ServerSignals:
        return ServerSignals(
            user_agent=request.headers.get("user-agent", ""),
            accept_language=request.headers.get("accept-language"),
            accept_encoding=request.headers.get("accept-encoding"),
            client_ip=self._ip_resolver.get_request_ip(request) or UNKNOWN_IP,
        )

    async def analyze(
        self,
        payload: FingerprintPayload,
        signals: ServerSignals,
    ) -> Analysis:
        geo = await self._lookup_geo(signals.client_ip)
        fingerprint = build_fingerprint_hash(payload, signals)

        hits = run_detectors(
            DetectionContext(
                user_agent=signals.user_agent,
                components=payload.components,
                geo=geo,
            ),
            self._detectors,
        )
        risk_score = calculate_risk_score(hits, geo)

        analysis = Analysis(
            fingerprint=fingerprint,
            risk_score=risk_score,
            risk_level=risk_level_for_score(risk_score, self._thresholds),
            flags=generate_flags(hits, geo),
            client_ip=signals.client_ip,
            user_agent=signals.user_agent,
            geo_location=geo,
            components=payload.components_snapshot(),
            timestamp=datetime.now(UTC),
        )
        await self._store(analysis)
        return analysis

    def evaluate(self, analysis: Analysis) -> FraudDecision:
        return decide(analysis.risk_score, analysis.flags, self._thresholds)

    def should_log(self, analysis: Analysis, log_all_requests: bool) -> bool:
        return log_all_requests or analysis.risk_score > self._thresholds.medium

    async def get_cached(self, fingerprint: str) -> CachedAnalysis | None:
        return await self._cache.get(fingerprint)

    async def _lookup_geo(self, ip: str) -> GeoLocation | None:
        try:
            return await self._ip_geo_client.lookup(None if ip == UNKNOWN_IP else ip)
        except Exception:
            logger.exception("Geolocation lookup failed")
            return None

    async def _store(self, analysis: Analysis) -> None:
        try:
            evicted = await self._cache.put(analysis)
        except Exception:
            logger.exception("Error storing fingerprint analysis")
            return
        if evicted:
            logger.debug("Evicted cached analysis %s...", evicted[:8])


__all__ = ("DeviceFingerprintService",)
