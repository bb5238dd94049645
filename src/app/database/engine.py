from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.settings import Config


def build_engine(config: Config) -> AsyncEngine:
    return create_async_engine(
        config.database_url,
        pool_pre_ping=True,
        echo=config.env == "local",
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


__all__ = ("build_engine", "build_session_factory")
