import datetime

from sqlalchemy import Boolean, DateTime, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.database.base import Base, DateTimeMixin, UUIDPrimaryKeyMixin


class TrustedDevice(Base, UUIDPrimaryKeyMixin, DateTimeMixin):
    """Per-user trust marker for a device fingerprint hash."""

    __tablename__ = "user_devices"
    __table_args__ = (UniqueConstraint("user_id", "device_fingerprint"),)

    user_id: Mapped[str] = mapped_column(String(64), index=True)
    device_fingerprint: Mapped[str] = mapped_column(String(128), index=True)
    is_trusted: Mapped[bool] = mapped_column(Boolean, default=False)
    last_login_at: Mapped[datetime.datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
