# ============================================================================
# ZOMBIE WATCH - MAIN APPLICATION
# ============================================================================
# STATUS: Core - FastAPI application entry point
# PURPOSE: Wire the pool, services and routers into one application
# CREATED: 18 OCT 2026
# ============================================================================
"""
Zombie Watch Main Application

FastAPI application that:
1. Runs on-demand batch health checks of zombie candidates
2. Activates watcher observation schedules
3. Applies per-candidate schedule, pause, resume and opt-out actions
4. Manages the database connection pool

Usage:
    uvicorn main:app --host 0.0.0.0 --port 8000
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI

from __version__ import __version__, BUILD_DATE, SERVICE_NAME
from fastapi.middleware.cors import CORSMiddleware

from core.config import get_defaults
from repositories import create_pool, deploy_schema
from services import HealthCheckService, ScheduleService
from api import (
    candidate_router,
    watcher_router,
    register_exception_handlers,
    set_candidate_services,
    set_watcher_services,
)
from api.system_routes import system_router, set_system_services

# Configure logging using our structured logging system
from core.logging import configure_logging, get_logger

configure_logging(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    json_output=os.environ.get("LOG_FORMAT", "").lower() == "json",
)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Initializes services on startup, cleans up on shutdown.
    """
    logger.info(f"Starting {SERVICE_NAME} v{__version__} (Build {BUILD_DATE})")

    pool = await create_pool(
        min_size=int(os.environ.get("DB_POOL_MIN_SIZE", "2")),
        max_size=int(os.environ.get("DB_POOL_MAX_SIZE", "10")),
    )

    # Optional: Bootstrap schema on startup (for development)
    if os.environ.get("AUTO_BOOTSTRAP_SCHEMA", "").lower() == "true":
        logger.info("Auto-bootstrap enabled, deploying schema...")
        try:
            await deploy_schema(pool)
            logger.info("Schema bootstrap completed successfully")
        except Exception as e:
            logger.warning(f"Schema bootstrap failed (may already exist): {e}")

    defaults = get_defaults()
    health_check_service = HealthCheckService(pool, defaults)
    schedule_service = ScheduleService(pool, defaults.schedule)

    set_candidate_services(health_check_service, schedule_service)
    set_watcher_services(schedule_service)
    set_system_services(pool)
    logger.info(
        f"Services initialized (probe timeout {defaults.probe.timeout_seconds}s, "
        f"max batch {defaults.batch.max_batch_size})"
    )

    yield

    # Shutdown
    logger.info(f"Shutting down {SERVICE_NAME}...")

    set_system_services(None)
    await pool.close()

    logger.info(f"{SERVICE_NAME} stopped")


# Create FastAPI app
app = FastAPI(
    title=SERVICE_NAME,
    description="Health checks and observation scheduling for zombie service candidates",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include health check routes (no prefix - /livez, /readyz)
app.include_router(system_router)

# Include API routes
app.include_router(candidate_router, prefix="/api/v1")
app.include_router(watcher_router, prefix="/api/v1")


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": SERVICE_NAME,
        "version": __version__,
        "build_date": BUILD_DATE,
        "status": "running",
        "docs": "/docs",
    }


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "8000"))

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=os.environ.get("RELOAD", "false").lower() == "true",
    )
