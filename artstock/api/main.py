"""
FastAPI application factory.

Creates and configures the main application instance.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from artstock.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from artstock.api.middleware.error_handler import setup_exception_handlers
from artstock.api.routes import health_router, orders_router, pictures_router, stock_router
from artstock.application.services import reset_services
from artstock.config import configure_logging, get_logger, get_settings
from artstock.infrastructure.storage.sqlite import close_pool, get_pool
from artstock.infrastructure.storage.sqlite.migrations import run_migrations

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan handler.

    Runs migrations and opens the connection pool on startup, closes it on
    shutdown.
    """
    settings = get_settings()
    configure_logging()

    logger.info(
        "application_starting",
        host=settings.api.host,
        port=settings.api.port,
        db_path=str(settings.storage.db_path),
    )

    try:
        await run_migrations()
        logger.info("database_initialized")
        await get_pool()
        logger.info("connection_pool_ready")
    except Exception as e:
        logger.error("database_init_failed", error=str(e))
        raise

    logger.info("application_started")

    yield

    logger.info("application_stopping")
    reset_services()
    await close_pool()
    logger.info("application_stopped")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()

    app = FastAPI(
        title="ArtStock API",
        description="Stock ledger, order fulfillment and costing for a painting workshop",
        version=settings.app_version,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan,
    )

    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(LoggingMiddleware)

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
    app.include_router(stock_router)
    app.include_router(orders_router)
    app.include_router(pictures_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "artstock.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )
