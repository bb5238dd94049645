from collections.abc import Callable
from typing import Any

import pytest
from dishka import make_async_container
from fastapi.testclient import TestClient

from app.api.modules.fingerprint.schema import FingerprintPayload
from app.api.modules.fingerprint.service import DeviceFingerprintService
from app.api.modules.fingerprint.services.core import AnalysisCache, FingerprintExtractor
from app.api.modules.fingerprint.services.network import RequestIpResolver
from app.application import create_app
from app.ioc import ServicesProvider
from app.settings import Config, FingerprintConfig, RiskThresholds
from tests.helpers import (
    FakeInfraProvider,
    InMemoryTrustedDeviceGateway,
    StubGeoClient,
    clean_payload,
)


@pytest.fixture
def geo_client() -> StubGeoClient:
    return StubGeoClient()


@pytest.fixture
def trusted_gateway() -> InMemoryTrustedDeviceGateway:
    return InMemoryTrustedDeviceGateway()


@pytest.fixture
def make_service(geo_client: StubGeoClient) -> Callable[..., DeviceFingerprintService]:
    def factory(**kwargs: Any) -> DeviceFingerprintService:
        config = FingerprintConfig()
        params: dict[str, Any] = {
            "thresholds": RiskThresholds(),
            "cache": AnalysisCache(capacity=config.cache_capacity),
            "extractor": FingerprintExtractor(
                body_field=config.body_field,
                header_name=config.header_name,
                query_param=config.query_param,
            ),
            "ip_resolver": RequestIpResolver(config),
            "ip_geo_client": geo_client,
        }
        params.update(kwargs)
        return DeviceFingerprintService(**params)

    return factory


@pytest.fixture
def payload() -> FingerprintPayload:
    return FingerprintPayload.model_validate(clean_payload())


@pytest.fixture
def make_client(
    geo_client: StubGeoClient,
    trusted_gateway: InMemoryTrustedDeviceGateway,
) -> Callable[..., TestClient]:
    def factory(**fingerprint_options: Any) -> TestClient:
        config = Config(fingerprint=FingerprintConfig(**fingerprint_options))
        container = make_async_container(
            FakeInfraProvider(config, geo_client, trusted_gateway),
            ServicesProvider(),
        )
        return TestClient(create_app(config, container))

    return factory
