"""
Health check endpoints.
"""

import time

from fastapi import APIRouter, Depends

from artstock.api.dependencies import get_container
from artstock.application.dto.responses import HealthResponse, ProviderHealthResponse
from artstock.application.services import ServiceContainer

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check(
    container: ServiceContainer = Depends(get_container),
) -> HealthResponse:
    """
    Service health with a database round trip.

    Reports ``unhealthy`` when SQLite does not answer.
    """
    db_status = ProviderHealthResponse(name="sqlite", available=False)
    try:
        start = time.time()
        async with container.pool.acquire() as conn:
            await conn.execute("SELECT 1")
        db_status = ProviderHealthResponse(
            name="sqlite",
            available=True,
            latency_ms=(time.time() - start) * 1000,
        )
    except Exception as e:
        db_status.error = str(e)

    return HealthResponse(
        status="healthy" if db_status.available else "unhealthy",
        version="1.0.0",
        uptime_seconds=time.time() - _start_time,
        database=db_status,
    )
