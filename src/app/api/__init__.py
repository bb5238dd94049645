from fastapi import APIRouter

health_router = APIRouter()


@health_router.get("/health", tags=["Health"])
async def health() -> dict[str, str]:
    return {"status": "ok"}


def register_routers(router: APIRouter) -> None:
    from app.api.modules.fingerprint.routes import router as fingerprint_router

    router.include_router(health_router)
    router.include_router(fingerprint_router, prefix="/fingerprint", tags=["Fingerprint"])
