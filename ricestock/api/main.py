"""
FastAPI application for the rice stock ledger.

Run with ``python -m ricestock.api.main``; the schema is migrated and the
connection pool opened before the first request is served.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ricestock import __version__
from ricestock.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from ricestock.api.middleware.error_handler import setup_exception_handlers
from ricestock.api.routes import health_router, ledger_router, metrics_router, stock_router
from ricestock.config import configure_logging, get_logger, get_settings

logger = get_logger(__name__)


async def _open_storage() -> None:
    from ricestock.infrastructure.storage.sqlite import get_pool
    from ricestock.infrastructure.storage.sqlite.migrations.migrator import run_migrations

    results = await run_migrations()
    pool = await get_pool()
    logger.info("ledger_storage_ready", migrations_applied=len(results), **pool.stats())


async def _close_storage() -> None:
    from ricestock.infrastructure.storage.sqlite import close_pool

    try:
        await close_pool()
    except Exception as e:
        logger.warning("connection_pool_close_failed", error=str(e))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    configure_logging()
    logger.info(
        "application_starting",
        environment=settings.environment,
        db_path=str(settings.storage.db_path),
        port=settings.api.port,
    )

    try:
        await _open_storage()
    except Exception as e:
        logger.error("ledger_storage_init_failed", error=str(e))
        raise

    yield

    logger.info("application_stopping")
    await _close_storage()


def create_app() -> FastAPI:
    """Build the app: middleware, error handlers and the stock, ledger and metrics routers."""
    settings = get_settings()

    app = FastAPI(
        title="Rice Stock Ledger API",
        description="Lot balances, transaction ledger and stock metrics for rice warehouses",
        version=__version__,
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
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )

    setup_exception_handlers(app)

    for router in (health_router, stock_router, ledger_router, metrics_router):
        app.include_router(router)

    @app.get("/health", include_in_schema=False)
    async def root_health() -> dict[str, str]:
        return {"status": "healthy", "version": __version__}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "ricestock.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )
