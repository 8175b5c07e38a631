"""
FastAPI entry point for the UniScout API.

The lifespan wires logging, telemetry, the cache schema and the periodic
expired-result sweep around the HTTP routers.
"""

import asyncio
import contextlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.infrastructure.monitoring import setup_telemetry, shutdown_telemetry
from src.interfaces.api.dependencies import enforce_general_rate_limit
from src.interfaces.api.exception_handlers import register_exception_handlers
from src.interfaces.api.v1.routers import health, metrics, search
from src.shared.config import get_settings
from src.shared.utils import configure_logging

logger = structlog.get_logger(__name__)


async def _start_expired_sweep(interval_minutes: int) -> asyncio.Task | None:
    """Schedule the periodic expired-result sweep, if enabled."""
    if interval_minutes <= 0:
        logger.info("expired_sweep_disabled")
        return None

    from src.interfaces.api.dependencies import (
        get_clear_expired_results_use_case,
        get_db_connection,
        get_result_cache,
    )

    cache = await get_result_cache(await get_db_connection())
    use_case = await get_clear_expired_results_use_case(cache)
    return asyncio.create_task(use_case.run_periodically(interval_minutes * 60))


async def _create_schema() -> None:
    """Create missing tables; a database outage only degrades caching."""
    from src.interfaces.api.dependencies import get_db_connection

    connection = await get_db_connection()
    try:
        await connection.create_schema()
    except Exception as e:
        logger.error("database_schema_unavailable", error=str(e))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """
    Manages application lifecycle events.

    Args:
        app: The FastAPI application instance

    Yields:
        None

    Raises:
        ConfigurationError: If required settings are missing or invalid
    """
    # Startup logic
    settings = get_settings()
    configure_logging(settings.monitoring.log_level)
    settings.validate_required()
    setup_telemetry(settings)
    await _create_schema()

    sweep_task = await _start_expired_sweep(
        settings.cache.cache_cleanup_interval_minutes
    )
    logger.info(
        "application_started",
        environment=settings.environment,
        ttl_hours=settings.cache.cache_ttl_hours,
    )

    yield

    # Shutdown logic
    if sweep_task is not None:
        sweep_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await sweep_task

    from src.interfaces.api.dependencies import shutdown_dependencies

    await shutdown_dependencies()
    shutdown_telemetry()
    logger.info("application_stopped")


def create_application() -> FastAPI:
    """
    Creates and configures the FastAPI application instance.

    Returns:
        FastAPI: Configured FastAPI application
    """
    settings = get_settings()

    app = FastAPI(
        title="UniScout API",
        description=(
            "University discovery service. Given a degree, this API returns "
            "ranked universities with post-study work, visa, funding and "
            "accreditation details, cached per degree for 24 hours."
        ),
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    # Register routers
    app.include_router(
        health.router,
        tags=["Health"],
    )
    app.include_router(
        health.router,
        prefix="/api",
        tags=["Health"],
        dependencies=[Depends(enforce_general_rate_limit)],
    )
    app.include_router(
        search.router,
        prefix="/api",
        tags=["Search"],
    )
    app.include_router(
        metrics.router,
        prefix="/api/metrics",
        tags=["Metrics"],
    )

    # Register exception handlers
    register_exception_handlers(app)

    return app


# Create the application instance
app = create_application()


if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run(
        "src.interfaces.api.main:app",
        host=_settings.api.api_host,
        port=_settings.api.api_port,
        reload=_settings.api.api_reload,
        log_level=_settings.monitoring.log_level.lower(),
    )
