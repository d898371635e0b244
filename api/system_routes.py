# ============================================================================
# SYSTEM ROUTES
# ============================================================================
# STATUS: Infrastructure - Liveness and readiness endpoints
# PURPOSE: Container probes for the Zombie Watch service itself
# CREATED: 18 OCT 2026
# ============================================================================
"""
System Routes

Endpoints:
    GET /livez  - Liveness probe. 200 while the process is responsive,
                  no external dependencies.
    GET /readyz - Readiness probe. 200 when the database answers a ping,
                  503 otherwise.
"""

import asyncio
import logging

from fastapi.responses import JSONResponse
from fastapi import APIRouter

from __version__ import __version__, BUILD_DATE

logger = logging.getLogger(__name__)

system_router = APIRouter(tags=["Health"])

READINESS_TIMEOUT_SECONDS = 5.0

_pool = None


def set_system_services(pool):
    """Called by main.py at startup to inject the connection pool."""
    global _pool
    _pool = pool


@system_router.get("/livez")
async def liveness_probe():
    """Process is alive."""
    return {"status": "alive", "version": __version__, "build_date": BUILD_DATE}


@system_router.get("/readyz")
async def readiness_probe():
    """Database is reachable."""
    if _pool is None:
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "database": "not initialized"},
        )

    try:
        async with _pool.connection() as conn:
            await asyncio.wait_for(conn.execute("SELECT 1"), READINESS_TIMEOUT_SECONDS)
    except Exception as e:
        logger.warning(f"Readiness check failed: {e}")
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "database": str(e) or type(e).__name__},
        )

    return {"status": "ready", "database": "ok", "version": __version__}
