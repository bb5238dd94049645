"""HTTP clients provider for dependency injection."""

from collections.abc import AsyncIterator

import httpx
from dishka import Provider, Scope, provide

from app.api.modules.fingerprint.services.network import IpGeoClient
from app.settings import Config


class HttpClientsProvider(Provider):
    """Provider for HTTP clients and external service integrations.

    A single httpx.AsyncClient is shared for the application lifetime and
    closed on shutdown. Per-call timeouts are set by each client.
    """

    @provide(scope=Scope.APP)
    async def get_httpx_client(self) -> AsyncIterator[httpx.AsyncClient]:
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(10.0),
            limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            follow_redirects=True,
        ) as client:
            yield client

    @provide(scope=Scope.APP)
    def get_ip_geo_client(
        self,
        client: httpx.AsyncClient,
        config: Config,
    ) -> IpGeoClient:
        return IpGeoClient(client, config.fingerprint)
