from datetime import datetime
from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidatorFunctionWrapHandler,
    field_validator,
)

RiskLevel = Literal["MINIMAL", "LOW", "MEDIUM", "HIGH", "CRITICAL"]


class LenientModel(BaseModel):
    """Client-reported signals: a field of the wrong type is dropped, not fatal."""

    model_config = ConfigDict(extra="allow")

    @field_validator("*", mode="wrap")
    @classmethod
    def _drop_invalid(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        try:
            return handler(value)
        except ValidationError:
            return None


class ScreenSignals(LenientModel):
    width: int | None = None
    height: int | None = None


class ViewportSignals(LenientModel):
    width: int | None = None
    height: int | None = None


class HardwareSignals(LenientModel):
    hardware_concurrency: int | None = Field(default=None, alias="hardwareConcurrency")
    device_memory: float | None = Field(default=None, alias="deviceMemory")

    model_config = ConfigDict(populate_by_name=True)


class FingerprintComponents(LenientModel):
    screen: ScreenSignals | None = None
    viewport: ViewportSignals | None = None
    timezone: str | None = None
    hardware: HardwareSignals | None = None
    platform: str | None = None
    canvas: str | None = None
    webgl: str | None = None
    fonts: list[str] | None = None
    fallback: bool | None = None


class FingerprintPayload(LenientModel):
    """Client-reported fingerprint as carried by a request."""

    fingerprint: str | int | None = None
    components: FingerprintComponents | None = None

    def components_snapshot(self) -> dict[str, Any]:
        if self.components is None:
            return {}
        return self.components.model_dump(mode="json", by_alias=True, exclude_none=True)


class GeoLocation(BaseModel):
    ip: str | None = None
    country: str | None = None
    region: str | None = None
    city: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    timezone: str | None = None
    is_vpn: bool = False
    isp: str | None = None
    confidence: float = Field(0.0, ge=0, le=1)
    risk_factors: list[str] = Field(default_factory=list)


class Analysis(BaseModel):
    fingerprint: str
    risk_score: float = Field(..., ge=0, le=1)
    risk_level: RiskLevel
    flags: list[str]
    client_ip: str
    user_agent: str
    geo_location: GeoLocation | None = None
    components: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime

    model_config = ConfigDict(frozen=True)


class FraudDecision(BaseModel):
    blocked: bool = False
    reason: str | None = None
    confidence: float = Field(0.0, ge=0, le=1)
    actions: list[str] = Field(default_factory=list)


class DeviceFingerprintState(BaseModel):
    fingerprint: str | None = None
    risk_score: float | None = None
    risk_level: RiskLevel | None = None
    flags: list[str] = Field(default_factory=list)
    components: dict[str, Any] = Field(default_factory=dict)
    fraud_check: FraudDecision | None = None

    error: bool = False
    message: str | None = None


class ErrorResponse(BaseModel):
    error: str
    code: str
    request_id: str | None = None


class TrustDeviceRequest(BaseModel):
    fingerprint: str = Field(..., min_length=1, max_length=128)
    user_id: str = Field(..., min_length=1, max_length=64)

    model_config = ConfigDict(extra="forbid")


class TrustStatusResponse(BaseModel):
    trusted: bool


class TrustedDeviceResponse(BaseModel):
    device_fingerprint: str
    user_id: str
    is_trusted: bool
    last_login_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class SuccessResponse(BaseModel):
    success: bool = True
    message: str
