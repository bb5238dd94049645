from sqlalchemy.ext.asyncio import AsyncSession

from app.api.modules.fingerprint.gateway import TrustedDeviceGateway


class UnitOfWork:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.trusted_devices = TrustedDeviceGateway(session)

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
