import asyncio
from datetime import UTC, datetime
from typing import Any

from dishka import Provider, Scope, provide

from app.api.modules.fingerprint.models import TrustedDevice
from app.api.modules.fingerprint.schema import Analysis, GeoLocation
from app.api.modules.fingerprint.services.core import ServerSignals
from app.api.modules.fingerprint.services.network import IpGeoClient
from app.database.uow import UnitOfWork
from app.settings import Config

CHROME_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)
GOOGLEBOT_UA = "Mozilla/5.0 (compatible; Googlebot/2.1)"


def clean_components() -> dict[str, Any]:
    return {
        "screen": {"width": 1920, "height": 1080},
        "viewport": {"width": 1920, "height": 937},
        "timezone": "Europe/Berlin",
        "hardware": {"hardwareConcurrency": 8, "deviceMemory": 8},
        "platform": "Win32",
        "canvas": "data:image/png;base64,iVBORw0KGgoAAAANSUhEUg",
        "webgl": "ANGLE (NVIDIA, NVIDIA GeForce GTX 1080 Direct3D11)",
        "fonts": ["Arial", "Calibri", "Cambria", "Consolas", "Georgia", "Verdana"],
    }


def clean_payload(**overrides: Any) -> dict[str, Any]:
    components = clean_components()
    components.update(overrides)
    return {"fingerprint": "fp-7f3a9c", "components": components}


def make_signals(**overrides: Any) -> ServerSignals:
    values = {
        "user_agent": CHROME_UA,
        "accept_language": "en-US,en;q=0.9",
        "accept_encoding": "gzip, deflate, br",
        "client_ip": "203.0.113.7",
    }
    values.update(overrides)
    return ServerSignals(**values)


def make_analysis(fingerprint: str, risk_score: float = 0.0) -> Analysis:
    return Analysis(
        fingerprint=fingerprint,
        risk_score=risk_score,
        risk_level="MINIMAL",
        flags=[],
        client_ip="203.0.113.7",
        user_agent=CHROME_UA,
        timestamp=datetime.now(UTC),
    )


class StubGeoClient:
    def __init__(
        self,
        result: GeoLocation | None = None,
        error: Exception | None = None,
    ):
        self.result = result
        self.error = error
        self.calls: list[str | None] = []

    async def lookup(self, ip: str | None) -> GeoLocation | None:
        self.calls.append(ip)
        if self.error is not None:
            raise self.error
        return self.result


class InMemoryTrustedDeviceGateway:
    def __init__(self, delay: float = 0.0, error: Exception | None = None):
        self.records: dict[tuple[str, str], TrustedDevice] = {}
        self.delay = delay
        self.error = error

    async def _maybe_fail(self) -> None:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error

    async def find(self, fingerprint: str, user_id: str) -> TrustedDevice | None:
        await self._maybe_fail()
        return self.records.get((fingerprint, user_id))

    async def upsert(self, fingerprint: str, user_id: str, fields: dict[str, Any]) -> None:
        await self._maybe_fail()
        record = self.records.get((fingerprint, user_id))
        if record is None:
            record = TrustedDevice(
                device_fingerprint=fingerprint,
                user_id=user_id,
                is_trusted=False,
            )
            self.records[(fingerprint, user_id)] = record
        for key, value in fields.items():
            setattr(record, key, value)

    async def list_for_user(self, user_id: str) -> list[TrustedDevice]:
        await self._maybe_fail()
        return [item for (_, uid), item in self.records.items() if uid == user_id]


class FakeUnitOfWork:
    def __init__(self, gateway: InMemoryTrustedDeviceGateway):
        self.trusted_devices = gateway
        self.commits = 0
        self.rollbacks = 0

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1


class FakeInfraProvider(Provider):
    def __init__(
        self,
        config: Config,
        geo_client: StubGeoClient,
        gateway: InMemoryTrustedDeviceGateway,
    ):
        super().__init__()
        self._config = config
        self._geo_client = geo_client
        self._gateway = gateway

    @provide(scope=Scope.APP)
    def get_config(self) -> Config:
        return self._config

    @provide(scope=Scope.APP)
    def get_ip_geo_client(self) -> IpGeoClient:
        return self._geo_client  # type: ignore[return-value]

    @provide(scope=Scope.REQUEST)
    def get_uow(self) -> UnitOfWork:
        return FakeUnitOfWork(self._gateway)  # type: ignore[return-value]
