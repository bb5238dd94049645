from app.database.base import Base, DateTimeMixin, UUIDPrimaryKeyMixin
from app.database.engine import build_engine, build_session_factory

__all__ = [
    "Base",
    "DateTimeMixin",
    "UUIDPrimaryKeyMixin",
    "build_engine",
    "build_session_factory",
]
