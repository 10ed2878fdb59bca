"""Liveness and database health endpoints."""

import time

from fastapi import APIRouter

from ricestock import __version__
from ricestock.application.dto.responses import DatabaseHealthResponse, HealthResponse

router = APIRouter(prefix="/api/health", tags=["health"])

_started_at = time.monotonic()


def _uptime() -> float:
    return time.monotonic() - _started_at


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    return HealthResponse(status="healthy", version=__version__, uptime_seconds=_uptime())


@router.get("/db", response_model=HealthResponse)
async def db_health() -> HealthResponse:
    """
    Round-trip the ledger database through the pool.

    Reports the applied schema version and how many pooled connections are
    free; ``unhealthy`` when the query fails.
    """
    from ricestock.infrastructure.storage.sqlite import get_pool

    try:
        pool = await get_pool()
        started = time.perf_counter()
        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT MAX(version) FROM schema_migrations")
            (schema_version,) = await cursor.fetchone()
        stats = pool.stats()
        database = DatabaseHealthResponse(
            available=True,
            latency_ms=round((time.perf_counter() - started) * 1000, 2),
            schema_version=schema_version,
            pool_size=stats["size"],
            pool_available=stats["available"],
        )
    except Exception as e:
        database = DatabaseHealthResponse(available=False, error=str(e))

    return HealthResponse(
        status="healthy" if database.available else "unhealthy",
        version=__version__,
        uptime_seconds=_uptime(),
        database=database,
    )
