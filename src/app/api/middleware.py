import json
import logging
from typing import Any
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from app.api.modules.fingerprint.schema import (
    Analysis,
    DeviceFingerprintState,
    ErrorResponse,
    FraudDecision,
)
from app.api.modules.fingerprint.service import DeviceFingerprintService
from app.api.modules.fingerprint.services.security import (
    FINGERPRINT_ANALYSIS,
    FINGERPRINT_VIOLATION,
    SecurityEventLogger,
)
from app.settings import FingerprintConfig

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "x-request-id"
FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def _read_body(request: Request) -> Any:
    content_type = request.headers.get("content-type", "")
    if "application/json" in content_type:
        body = await request.body()
        if not body:
            return None
        try:
            return json.loads(body)
        except ValueError:
            return None

    if content_type.startswith(FORM_CONTENT_TYPES):
        # Cache the raw body first so the route can parse the form again.
        await request.body()
        return await request.form()

    return None


def _request_details(request: Request, ip: str) -> dict[str, Any]:
    return {
        "ip": ip,
        "userAgent": request.headers.get("user-agent"),
        "url": str(request.url),
        "method": request.method,
    }


class DeviceFingerprintMiddleware(BaseHTTPMiddleware):
    """Runs device fingerprint analysis and fraud checks for every request.

    Internal failures never block a request: the request proceeds with an
    error marker on ``request.state.device_fingerprint``.
    """

    def __init__(self, app, config: FingerprintConfig) -> None:  # noqa: ANN001
        super().__init__(app)
        self._require_fingerprint = config.require_fingerprint
        self._enable_fraud_detection = config.enable_fraud_detection
        self._log_all_requests = config.log_all_requests
        self._skip_routes = tuple(config.skip_routes)

    async def dispatch(self, request: Request, call_next) -> Response:  # noqa: ANN001
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id

        if any(route in request.url.path for route in self._skip_routes):
            return await call_next(request)

        try:
            rejection = await self._inspect(request, request_id)
        except Exception:
            logger.exception("Device fingerprinting middleware error")
            request.state.device_fingerprint = DeviceFingerprintState(
                error=True,
                message="Fingerprinting failed",
            )
            rejection = None

        if rejection is not None:
            rejection.headers[REQUEST_ID_HEADER] = request_id
            return rejection

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    async def _inspect(self, request: Request, request_id: str) -> Response | None:
        container = request.state.dishka_container
        service = await container.get(DeviceFingerprintService)
        events = await container.get(SecurityEventLogger)

        body = await _read_body(request)
        payload = service.extractor.extract(body, request.headers, request.query_params)

        if payload is None:
            if self._require_fingerprint:
                return JSONResponse(
                    ErrorResponse(
                        error="Device fingerprint required",
                        code="FINGERPRINT_REQUIRED",
                    ).model_dump(exclude_none=True),
                    status_code=400,
                )
            return None

        analysis = await service.analyze(payload, service.server_signals(request))
        state = DeviceFingerprintState(
            fingerprint=analysis.fingerprint,
            risk_score=analysis.risk_score,
            risk_level=analysis.risk_level,
            flags=analysis.flags,
            components=analysis.components,
        )
        request.state.device_fingerprint = state

        if self._enable_fraud_detection:
            decision = service.evaluate(analysis)
            if decision.blocked:
                self._log_violation(events, request, analysis, decision)
                return JSONResponse(
                    ErrorResponse(
                        error="Access denied due to security policy",
                        code="SECURITY_VIOLATION",
                        request_id=request_id,
                    ).model_dump(),
                    status_code=403,
                )
            state.fraud_check = decision

        if service.should_log(analysis, self._log_all_requests):
            events.log(
                FINGERPRINT_ANALYSIS,
                {
                    "fingerprint": analysis.fingerprint,
                    "riskScore": analysis.risk_score,
                    "riskLevel": analysis.risk_level,
                    "flags": analysis.flags,
                    **_request_details(request, analysis.client_ip),
                    "userId": getattr(request.state, "user_id", None),
                },
            )
        return None

    @staticmethod
    def _log_violation(
        events: SecurityEventLogger,
        request: Request,
        analysis: Analysis,
        decision: FraudDecision,
    ) -> None:
        logger.warning(
            "Security incident: %s (confidence %.2f) for %s...",
            decision.reason,
            decision.confidence,
            analysis.fingerprint[:8],
        )
        events.log(
            FINGERPRINT_VIOLATION,
            {
                "reason": decision.reason,
                "confidence": decision.confidence,
                "fingerprint": analysis.fingerprint,
                "riskScore": analysis.risk_score,
                "flags": analysis.flags,
                **_request_details(request, analysis.client_ip),
            },
        )


__all__ = ("DeviceFingerprintMiddleware",)
