"""
FastAPI application factory.

Creates and configures the main application instance.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from src.api.middleware.error_handler import setup_exception_handlers
from src.api.routes import (
    auth_router,
    customers_router,
    dashboard_router,
    health_router,
    invoices_router,
    products_router,
    units_router,
)
from src.config import configure_logging, get_logger, get_settings
from src.core.exceptions import StorageError

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan handler.

    Migrates the database, opens the connection pool and restores the
    session that was active when the app last ran.
    """
    settings = get_settings()

    logger.info(
        "application_starting",
        host=settings.api.host,
        port=settings.api.port,
        debug=settings.api.debug,
    )

    try:
        from src.infrastructure.storage.sqlite import get_pool
        from src.infrastructure.storage.sqlite.migrations.migrator import run_migrations

        await run_migrations()
        logger.info("database_initialized")

        await get_pool()
        logger.info("connection_pool_ready")

    except Exception as e:
        logger.error("database_init_failed", error=str(e))
        raise

    from src.api.dependencies import get_restore_session_use_case
    from src.application.services import get_workspace

    try:
        restore = await get_restore_session_use_case()
        await restore.execute(get_workspace())
    except StorageError as e:
        # an unreadable session entry leaves the app logged out
        logger.error("session_restore_failed", error=str(e))

    # Warm up LLM provider (optional)
    if settings.llm.warmup_on_start:
        try:
            from src.infrastructure.llm import get_llm_provider

            health_status = await get_llm_provider().check_health()
            logger.info("llm_provider_ready", healthy=health_status.available)

        except Exception as e:
            logger.warning("llm_warmup_failed", error=str(e))

    logger.info("application_started")

    yield

    logger.info("application_stopping")

    try:
        from src.infrastructure.storage.sqlite import close_pool

        await close_pool()
        logger.info("connection_pool_closed")

    except Exception as e:
        logger.warning("connection_pool_close_failed", error=str(e))

    logger.info("application_stopped")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()
    configure_logging()

    app = FastAPI(
        title=f"{settings.app_name} API",
        description="Invoicing: catalog, customers, invoices, PDF export and sales insights",
        version=settings.app_version,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan,
    )

    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)

    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    setup_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(products_router)
    app.include_router(customers_router)
    app.include_router(units_router)
    app.include_router(invoices_router)
    app.include_router(dashboard_router)

    return app


# Create app instance
app = create_app()


@app.get("/")
async def root() -> dict[str, str]:
    """API info."""
    settings = get_settings()
    return {
        "name": f"{settings.app_name} API",
        "version": settings.app_version,
        "docs": "/docs",
    }


# Root health endpoint (for k8s/docker health checks)
@app.get("/health")
async def root_health() -> dict[str, str]:
    """Simple health check at root level."""
    return {
        "status": "healthy",
        "version": get_settings().app_version,
    }


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "src.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )
