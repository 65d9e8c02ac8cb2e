"""Entry point for the TaskFlow FastAPI application."""

from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routers import api_router, health_router
from .core.config import Settings, get_settings
from .core.logging import configure_logging
from .core.middleware import CorrelationIdMiddleware
from .db import Database
from .deps import SettingsDependency
from .errors import register_exception_handlers
from .schemas.system import Envelope, RootResponse
from .services.uploads import AzureBlobUploader, Uploader

logger = logging.getLogger(__name__)


def _normalise_prefix(raw_prefix: str) -> str:
    router_prefix = raw_prefix.strip()
    if router_prefix and not router_prefix.startswith("/"):
        router_prefix = f"/{router_prefix}"
    router_prefix = router_prefix.rstrip("/")
    return "" if router_prefix == "/" else router_prefix


def create_app(
    settings: Settings | None = None,
    database: Database | None = None,
    uploader: Uploader | None = None,
) -> FastAPI:
    """Instantiate and configure the FastAPI application.

    The database handle and the upload collaborator are built from settings
    unless supplied by the caller, and both live on ``app.state`` for the
    lifetime of the application.
    """

    settings = settings or get_settings()
    configure_logging(settings)

    router_prefix = _normalise_prefix(settings.api_prefix)
    openapi_url = "/openapi.json" if not router_prefix else f"{router_prefix}/openapi.json"

    application = FastAPI(
        title=settings.project_name,
        version=settings.version,
        summary="Task management API with role-based access control.",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url=openapi_url,
    )

    application.state.settings = settings
    application.state.database = database or Database.from_settings(settings)
    if uploader is None and settings.uploads_configured:
        uploader = AzureBlobUploader.from_settings(settings)
    application.state.uploader = uploader

    application.add_middleware(CorrelationIdMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    application.include_router(api_router, prefix=router_prefix)
    application.include_router(health_router)

    @application.get("/", response_model=Envelope[RootResponse], tags=["system"], summary="Service metadata")
    async def read_root(app_settings: SettingsDependency) -> Envelope[RootResponse]:
        """Expose minimal service metadata for API clients."""

        return Envelope[RootResponse](
            success=True,
            data=RootResponse(
                name=app_settings.project_name,
                environment=app_settings.environment,
                version=app_settings.version,
                api_prefix=router_prefix,
            ),
        )

    register_exception_handlers(application)

    @application.on_event("startup")
    async def _initialise_database() -> None:
        if settings.db_create_all:
            await application.state.database.create_all()
        logger.info(
            "Application started",
            extra={"environment": settings.environment, "uploads_configured": uploader is not None},
        )

    @application.on_event("shutdown")
    async def _release_resources() -> None:
        if application.state.uploader is not None:
            await application.state.uploader.close()
        await application.state.database.dispose()

    return application


app = create_app()


def run() -> None:
    """Convenience entry point for the ``taskflow`` console script."""

    settings: Settings = get_settings()
    uvicorn.run(
        "taskflow.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.reload,
        log_config=None,
    )
