import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from device_registry import __version__
from device_registry.core.config import Settings, get_settings
from device_registry.core.container import ApplicationContainer
from device_registry.core.security import PrincipalResolver
from device_registry.infrastructure.database.session import dispose_engine, init_db
from device_registry.interfaces.http import create_api_router
from device_registry.interfaces.http.errors import register_exception_handlers

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent


def _resolve_path(path: Path) -> Path:
    if path.is_absolute():
        return path
    return (PROJECT_ROOT / path).resolve()


def _configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    container: ApplicationContainer = app.state.container
    container.init_infrastructure()
    await init_db(container.settings)
    logger.info("%s %s started", container.settings.project_name, __version__)
    try:
        yield
    finally:
        await dispose_engine()


def create_app(
    settings: Settings | None = None,
    principal_resolver: PrincipalResolver | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    _configure_logging(settings)

    photo_dir = _resolve_path(settings.storage.photo_dir)
    settings.storage.photo_dir = photo_dir
    container = ApplicationContainer.from_settings(settings, principal_resolver)

    app = FastAPI(
        title=settings.project_name,
        description="Check-in and check-out registry for computers and medical devices",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.container = container
    app.state.principal_resolver = container.principal_resolver

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # The directory is created on startup.
    app.mount("/photos", StaticFiles(directory=str(photo_dir), check_dir=False), name="photos")
    app.include_router(create_api_router(settings.api_prefix))

    @app.get("/health", tags=["health"])
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "device_registry.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.server.reload,
    )
