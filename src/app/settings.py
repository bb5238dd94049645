from functools import lru_cache
from typing import Literal, final

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from yarl import URL


class PostgresConfig(BaseModel):
    user: str = "postgres"
    password: str = "postgres"
    host: str = "localhost"
    port: int = 5432
    db: str = "fingerprint"


class APIConfig(BaseModel):
    title: str = "Device Fingerprinting API"
    version: str = "1.0.0"
    port: int = 8000
    host: str = "0.0.0.0"
    allowed_hosts: list[str] = Field(default_factory=lambda: ["*"])


class RiskThresholds(BaseModel):
    low: float = Field(0.3, ge=0, le=1)
    medium: float = Field(0.6, ge=0, le=1)
    high: float = Field(0.8, ge=0, le=1)
    critical: float = Field(0.9, ge=0, le=1)

    model_config = ConfigDict(frozen=True, extra="forbid")

    @model_validator(mode="after")
    def _check_ascending(self) -> "RiskThresholds":
        if not self.low < self.medium < self.high < self.critical:
            raise ValueError("Thresholds must be in ascending order")
        return self


class FingerprintConfig(BaseModel):
    risk_thresholds: RiskThresholds = Field(default_factory=RiskThresholds)
    cache_capacity: int = Field(1000, ge=1)

    require_fingerprint: bool = False
    enable_fraud_detection: bool = True
    log_all_requests: bool = False
    skip_routes: list[str] = Field(
        default_factory=lambda: ["/health", "/favicon.ico"]
    )

    body_field: str = "deviceFingerprint"
    header_name: str = "x-device-fingerprint"
    query_param: str = "deviceFingerprint"

    trust_forwarded_ip: bool = False

    geolocation_enabled: bool = True
    geolocation_base_url: str = "https://ipapi.co"
    geolocation_timeout_seconds: float = 2.0
    geolocation_cache_ttl_seconds: int = 3600
    high_risk_countries: list[str] = Field(
        default_factory=lambda: ["CN", "RU", "KP", "IR"]
    )

    trust_store_timeout_seconds: float = 2.0


@final
class Config(BaseSettings):
    model_config: SettingsConfigDict = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="APP__",
        env_nested_delimiter="__",
        extra="ignore",
    )

    env: Literal["local", "dev", "prod"] = "local"

    api: APIConfig = Field(default_factory=APIConfig)
    postgres: PostgresConfig = Field(default_factory=PostgresConfig)
    fingerprint: FingerprintConfig = Field(default_factory=FingerprintConfig)

    @property
    def database_url(self) -> str:
        host = "localhost" if self.env == "local" else self.postgres.host
        return URL.build(
            scheme="postgresql+asyncpg",
            user=self.postgres.user,
            password=self.postgres.password,
            host=host,
            port=self.postgres.port,
            path=f"/{self.postgres.db}",
        ).human_repr()


@lru_cache
def get_config() -> Config:
    return Config()
