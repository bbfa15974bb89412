"""Entry point for the TaskFlow FastAPI application."""

from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .api.routers import api_router, health_router
from .core.config import Settings, get_settings
from .core.logging import configure_logging
from .core.middleware import CorrelationIdMiddleware
from .errors import register_exception_handlers
from .schemas.system import RootResponse
from .services import TaskService
from .storage import StorageBackend, build_storage

logger = logging.getLogger(__name__)


def _normalise_prefix(raw_prefix: str) -> str:
    router_prefix = raw_prefix.strip()
    if router_prefix and not router_prefix.startswith("/"):
        router_prefix = f"/{router_prefix}"
    router_prefix = router_prefix.rstrip("/")
    if router_prefix == "/":
        router_prefix = ""
    return router_prefix


def create_app(
    settings: Settings | None = None,
    storage: StorageBackend | None = None,
) -> FastAPI:
    """Instantiate and configure the FastAPI application.

    ``storage`` overrides the backend selected by ``settings``; tests use it
    to share a backend with the code under test.
    """

    settings = settings or get_settings()
    configure_logging(settings)

    router_prefix = _normalise_prefix(settings.api_prefix)
    openapi_url = "/openapi.json" if not router_prefix else f"{router_prefix}/openapi.json"

    application = FastAPI(
        title=settings.project_name,
        version=settings.version,
        summary="Personal task tracker with categories, statistics and backups.",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url=openapi_url,
    )

    application.state.settings = settings
    application.state.storage = storage or build_storage(settings)

    application.add_middleware(CorrelationIdMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    if router_prefix:
        application.include_router(api_router, prefix=router_prefix)
    else:
        application.include_router(api_router)

    application.include_router(health_router)

    register_exception_handlers(application)

    @application.get("/", response_model=RootResponse, summary="Service metadata")
    async def read_root(request: Request) -> RootResponse:
        """Expose minimal service metadata at the root endpoint."""
        current: Settings = request.app.state.settings
        return RootResponse(
            name=current.project_name,
            environment=current.environment,
            version=current.version,
            api_prefix=current.api_prefix,
            storage_backend=request.app.state.storage.name,
        )

    @application.on_event("startup")
    async def _resync_category_counts() -> None:
        await TaskService(application.state.storage).resync_counts()
        logger.info("Category counts synchronised on startup")

    @application.on_event("shutdown")
    async def _close_storage() -> None:
        await application.state.storage.close()

    return application


def run() -> None:
    """Convenience entry point for the ``taskflow`` console script."""

    settings: Settings = get_settings()
    uvicorn.run(
        "taskflow.app.main:create_app",
        factory=True,
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.reload,
        log_config=None,
    )
