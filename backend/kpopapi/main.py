"""KPop Idol API - FastAPI Application Factory."""

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from kpopapi.api import api_router
from kpopapi.api.error_handlers import register_error_handlers
from kpopapi.api.health import router as health_router
from kpopapi.core import (
    Settings,
    build_engine,
    build_session_maker,
    get_settings,
    init_db,
    setup_logging,
)
from kpopapi.core.logging import get_logger
from kpopapi.middleware import (
    AccessGateMiddleware,
    PreflightCORSMiddleware,
    revocation_cleanup_loop,
)
from kpopapi.services.auth import AuthService

logger = get_logger("main")


def task_done_callback(task: asyncio.Task[None]) -> None:
    """Log unhandled exceptions from background tasks."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error(f"Background task {task.get_name()} failed: {exc}")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    config: Settings = app.state.settings
    setup_logging(config)
    logger.info(f"Starting {config.app_name} v{config.app_version}")

    for warning in config.check_security_configuration():
        logger.warning(f"SECURITY: {warning}")

    await init_db(app.state.engine)

    cleanup_task = asyncio.create_task(
        revocation_cleanup_loop(app.state.auth.store, config.revocation_purge_interval_seconds)
    )
    cleanup_task.add_done_callback(task_done_callback)

    yield

    logger.info("Shutting down...")
    cleanup_task.cancel()
    try:
        await cleanup_task
    except asyncio.CancelledError:
        pass
    await app.state.engine.dispose()


def create_app(
    config: Settings | None = None,
    auth_service: AuthService | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    One AuthService (and so one token store) and one database engine are
    owned per application; the access gate and the session endpoints share
    the store.
    """
    config = config or get_settings()
    auth_service = auth_service or AuthService.from_settings(config)

    app = FastAPI(
        title=config.app_name,
        description="K-Pop idol REST API with bearer token authentication",
        version=config.app_version,
        lifespan=lifespan,
        # Under /swagger so the access gate's public prefix covers both
        docs_url="/swagger",
        openapi_url="/swagger.json",
        redoc_url=None,
    )
    app.state.settings = config
    app.state.auth = auth_service
    app.state.engine = build_engine(config)
    app.state.session_maker = build_session_maker(app.state.engine)

    register_error_handlers(app)

    app.add_middleware(AccessGateMiddleware, store=auth_service.store)

    # CORS middleware - MUST be outermost (added last in Starlette LIFO order)
    # so that CORS headers are present on ALL responses, including 401 from the gate.
    app.add_middleware(
        PreflightCORSMiddleware,
        allow_origins=config.cors_origins_list,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept"],
    )

    app.include_router(health_router)  # /healthz at root level
    app.include_router(api_router)  # API at /api

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint with API information."""
        return {
            "name": config.app_name,
            "version": config.app_version,
            "docs": "/swagger",
        }

    return app


# Application instance
app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    config = get_settings()
    uvicorn.run("kpopapi.main:app", host="0.0.0.0", port=config.app_port)
