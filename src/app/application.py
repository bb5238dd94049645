import logging
from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager

from dishka import AsyncContainer
from dishka.integrations.fastapi import setup_dishka
from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncEngine

from app.api import register_routers
from app.api.middleware import DeviceFingerprintMiddleware
from app.ioc import get_async_container
from app.services.logging import setup_logging
from app.settings import Config, get_config

logger = logging.getLogger(__name__)

Lifespan = Callable[[FastAPI], AbstractAsyncContextManager[None]]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    from app.database.base import Base

    # Import models so Base.metadata knows about them
    import app.api.modules.fingerprint.models  # noqa: F401

    container: AsyncContainer = app.state.dishka_container
    engine = await container.get(AsyncEngine)

    logger.info("Creating database tables...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("Starting application...")
    yield
    logger.info("Shutting down application...")
    await container.close()


def create_app(
    config: Config,
    container: AsyncContainer,
    app_lifespan: Lifespan | None = None,
) -> FastAPI:
    app = FastAPI(
        title=config.api.title,
        version=config.api.version,
        lifespan=app_lifespan,
    )

    app.add_middleware(DeviceFingerprintMiddleware, config=config.fingerprint)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.api.allowed_hosts,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_router = APIRouter()
    register_routers(api_router)
    app.include_router(api_router)

    # Registered last so the request container wraps the fingerprint middleware.
    setup_dishka(container, app)

    return app


def get_production_app() -> FastAPI:
    """Get the FastAPI application instance."""
    config = get_config()
    setup_logging(config.env)
    return create_app(config, get_async_container(), app_lifespan=lifespan)
