import asyncio
import logging
from collections.abc import Sequence
from datetime import UTC, datetime

from app.api.modules.fingerprint.models import TrustedDevice
from app.database.uow import UnitOfWork

logger = logging.getLogger(__name__)


class DeviceTrustService:
    """Trusted-device checks backed by the persistent device store.

    Store failures and timeouts never propagate: queries fall back to
    "not trusted" / empty, writes are dropped after logging.
    """

    def __init__(self, uow: UnitOfWork, timeout_seconds: float = 2.0):
        self._uow = uow
        self._timeout = timeout_seconds

    async def is_trusted(self, fingerprint: str, user_id: str) -> bool:
        try:
            device = await asyncio.wait_for(
                self._uow.trusted_devices.find(fingerprint, user_id),
                timeout=self._timeout,
            )
        except Exception:
            logger.exception("Error checking device trust")
            return False
        return bool(device and device.is_trusted)

    async def trust(self, fingerprint: str, user_id: str) -> bool:
        saved = await self._set_trusted(fingerprint, user_id, trusted=True)
        if saved:
            logger.info("Device marked as trusted: %s...", fingerprint[:8])
        return saved

    async def untrust(self, fingerprint: str, user_id: str) -> bool:
        saved = await self._set_trusted(fingerprint, user_id, trusted=False)
        if saved:
            logger.info("Device trust revoked: %s...", fingerprint[:8])
        return saved

    async def list_devices(self, user_id: str) -> Sequence[TrustedDevice]:
        try:
            return await asyncio.wait_for(
                self._uow.trusted_devices.list_for_user(user_id),
                timeout=self._timeout,
            )
        except Exception:
            logger.exception("Error listing devices")
            return []

    async def _set_trusted(self, fingerprint: str, user_id: str, trusted: bool) -> bool:
        fields: dict[str, object] = {"is_trusted": trusted}
        if trusted:
            fields["last_login_at"] = datetime.now(UTC)

        try:
            await asyncio.wait_for(
                self._uow.trusted_devices.upsert(fingerprint, user_id, fields),
                timeout=self._timeout,
            )
            await asyncio.wait_for(self._uow.commit(), timeout=self._timeout)
        except Exception:
            logger.exception("Error updating device trust")
            await self._rollback()
            return False
        return True

    async def _rollback(self) -> None:
        try:
            await self._uow.rollback()
        except Exception:
            logger.exception("Error rolling back device trust update")


__all__ = ("DeviceTrustService",)
