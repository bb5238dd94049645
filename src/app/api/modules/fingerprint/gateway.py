from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.modules.fingerprint.models import TrustedDevice


class TrustedDeviceGateway:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def find(self, fingerprint: str, user_id: str) -> TrustedDevice | None:
        stmt = select(TrustedDevice).where(
            TrustedDevice.device_fingerprint == fingerprint,
            TrustedDevice.user_id == user_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def upsert(
        self,
        fingerprint: str,
        user_id: str,
        fields: Mapping[str, Any],
    ) -> None:
        stmt = (
            insert(TrustedDevice)
            .values(device_fingerprint=fingerprint, user_id=user_id, **fields)
            .on_conflict_do_update(
                index_elements=[TrustedDevice.user_id, TrustedDevice.device_fingerprint],
                set_=dict(fields),
            )
        )
        await self.session.execute(stmt)

    async def list_for_user(self, user_id: str) -> Sequence[TrustedDevice]:
        stmt = (
            select(TrustedDevice)
            .where(TrustedDevice.user_id == user_id)
            .order_by(TrustedDevice.last_login_at.desc())
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()
