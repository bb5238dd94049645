from dishka import FromDishka
from dishka.integrations.fastapi import DishkaRoute
from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from app.api.modules.fingerprint.schema import (
    Analysis,
    DeviceFingerprintState,
    ErrorResponse,
    SuccessResponse,
    TrustDeviceRequest,
    TrustedDeviceResponse,
    TrustStatusResponse,
)
from app.api.modules.fingerprint.service import DeviceFingerprintService
from app.api.modules.fingerprint.services.security import (
    DEVICE_TRUSTED,
    DEVICE_UNTRUSTED,
    RISK_THRESHOLDS_UPDATED,
    DeviceTrustService,
    SecurityEventLogger,
)
from app.settings import RiskThresholds

router = APIRouter(route_class=DishkaRoute)


@router.post(
    "/analyze",
    response_model=DeviceFingerprintState,
    status_code=200,
    responses={400: {"model": ErrorResponse}},
)
async def analyze_fingerprint(request: Request) -> DeviceFingerprintState | JSONResponse:
    state = getattr(request.state, "device_fingerprint", None)
    if state is None:
        return JSONResponse(
            ErrorResponse(
                error="Device fingerprint required",
                code="FINGERPRINT_REQUIRED",
                request_id=getattr(request.state, "request_id", None),
            ).model_dump(exclude_none=True),
            status_code=400,
        )
    return state


@router.get("/analyses/{fingerprint}", response_model=Analysis, status_code=200)
async def get_cached_analysis(
    fingerprint: str,
    service: FromDishka[DeviceFingerprintService],
) -> Analysis:
    cached = await service.get_cached(fingerprint)
    if cached is None:
        raise HTTPException(status_code=404, detail="analysis_not_found")
    return cached.analysis


@router.get("/thresholds", response_model=RiskThresholds, status_code=200)
async def get_thresholds(
    service: FromDishka[DeviceFingerprintService],
) -> RiskThresholds:
    return service.thresholds


@router.put("/thresholds", response_model=RiskThresholds, status_code=200)
async def update_thresholds(
    request: Request,
    payload: RiskThresholds,
    service: FromDishka[DeviceFingerprintService],
    events: FromDishka[SecurityEventLogger],
) -> RiskThresholds:
    previous = service.update_thresholds(payload)
    events.log(
        RISK_THRESHOLDS_UPDATED,
        {
            "previous": previous.model_dump(),
            "thresholds": payload.model_dump(),
            "ip": request.client.host if request.client else None,
        },
    )
    return service.thresholds


@router.get("/devices/trusted", response_model=TrustStatusResponse, status_code=200)
async def is_device_trusted(
    trust: FromDishka[DeviceTrustService],
    fingerprint: str = Query(..., min_length=1, max_length=128),
    user_id: str = Query(..., min_length=1, max_length=64),
) -> TrustStatusResponse:
    return TrustStatusResponse(trusted=await trust.is_trusted(fingerprint, user_id))


@router.get("/devices", response_model=list[TrustedDeviceResponse], status_code=200)
async def list_devices(
    trust: FromDishka[DeviceTrustService],
    user_id: str = Query(..., min_length=1, max_length=64),
) -> list[TrustedDeviceResponse]:
    devices = await trust.list_devices(user_id)
    return [TrustedDeviceResponse.model_validate(item) for item in devices]


@router.post("/devices/trust", response_model=SuccessResponse, status_code=200)
async def trust_device(
    payload: TrustDeviceRequest,
    trust: FromDishka[DeviceTrustService],
    events: FromDishka[SecurityEventLogger],
) -> SuccessResponse:
    if not await trust.trust(payload.fingerprint, payload.user_id):
        raise HTTPException(status_code=503, detail="device_store_unavailable")
    events.log(
        DEVICE_TRUSTED,
        {"deviceFingerprint": payload.fingerprint, "userId": payload.user_id},
    )
    return SuccessResponse(message="Device trusted successfully")


@router.post("/devices/untrust", response_model=SuccessResponse, status_code=200)
async def untrust_device(
    payload: TrustDeviceRequest,
    trust: FromDishka[DeviceTrustService],
    events: FromDishka[SecurityEventLogger],
) -> SuccessResponse:
    if not await trust.untrust(payload.fingerprint, payload.user_id):
        raise HTTPException(status_code=503, detail="device_store_unavailable")
    events.log(
        DEVICE_UNTRUSTED,
        {"deviceFingerprint": payload.fingerprint, "userId": payload.user_id},
    )
    return SuccessResponse(message="Device untrusted successfully")
