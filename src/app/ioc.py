from collections.abc import AsyncIterator

from dishka import AsyncContainer, Provider, Scope, make_async_container, provide
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from app.api.modules.fingerprint.service import DeviceFingerprintService
from app.api.modules.fingerprint.services.core import AnalysisCache, FingerprintExtractor
from app.api.modules.fingerprint.services.network import IpGeoClient, RequestIpResolver
from app.api.modules.fingerprint.services.security import (
    DeviceTrustService,
    SecurityEventLogger,
)
from app.clients.providers import HttpClientsProvider
from app.database.engine import build_engine, build_session_factory
from app.database.uow import UnitOfWork
from app.settings import Config, get_config


class AppProvider(Provider):
    """Application provider for dependency injection."""

    @provide(scope=Scope.APP)
    def get_config(self) -> Config:
        return get_config()


class DatabaseProvider(Provider):
    """Async SQLAlchemy engine, sessions and unit of work."""

    @provide(scope=Scope.APP)
    async def get_engine(self, config: Config) -> AsyncIterator[AsyncEngine]:
        engine = build_engine(config)
        yield engine
        await engine.dispose()

    @provide(scope=Scope.APP)
    def get_session_factory(self, engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
        return build_session_factory(engine)

    @provide(scope=Scope.REQUEST)
    async def get_session(
        self,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    @provide(scope=Scope.REQUEST)
    def get_uow(self, session: AsyncSession) -> UnitOfWork:
        return UnitOfWork(session)


class ServicesProvider(Provider):
    """Services provider for dependency injection."""

    @provide(scope=Scope.APP)
    def get_analysis_cache(self, config: Config) -> AnalysisCache:
        return AnalysisCache(capacity=config.fingerprint.cache_capacity)

    @provide(scope=Scope.APP)
    def get_fingerprint_extractor(self, config: Config) -> FingerprintExtractor:
        return FingerprintExtractor(
            body_field=config.fingerprint.body_field,
            header_name=config.fingerprint.header_name,
            query_param=config.fingerprint.query_param,
        )

    @provide(scope=Scope.APP)
    def get_request_ip_resolver(self, config: Config) -> RequestIpResolver:
        return RequestIpResolver(config.fingerprint)

    @provide(scope=Scope.APP)
    def get_security_event_logger(self) -> SecurityEventLogger:
        return SecurityEventLogger()

    @provide(scope=Scope.APP)
    def get_device_fingerprint_service(
        self,
        config: Config,
        cache: AnalysisCache,
        extractor: FingerprintExtractor,
        ip_resolver: RequestIpResolver,
        ip_geo_client: IpGeoClient,
    ) -> DeviceFingerprintService:
        return DeviceFingerprintService(
            thresholds=config.fingerprint.risk_thresholds,
            cache=cache,
            extractor=extractor,
            ip_resolver=ip_resolver,
            ip_geo_client=ip_geo_client,
        )

    @provide(scope=Scope.REQUEST)
    def get_device_trust_service(
        self,
        config: Config,
        uow: UnitOfWork,
    ) -> DeviceTrustService:
        return DeviceTrustService(
            uow=uow,
            timeout_seconds=config.fingerprint.trust_store_timeout_seconds,
        )


def get_async_container() -> AsyncContainer:
    return make_async_container(
        AppProvider(),
        DatabaseProvider(),
        ServicesProvider(),
        HttpClientsProvider(),
    )
