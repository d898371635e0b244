# ============================================================================
# API MODULE
# ============================================================================
# STATUS: Core - FastAPI routes
# PURPOSE: HTTP API for candidate health checks, candidate actions and watcher scheduling
# CREATED: 18 OCT 2026
# ============================================================================
"""
API Module

FastAPI routes for Zombie Watch.
"""

from .candidate_routes import router as candidate_router, set_candidate_services
from .watcher_routes import router as watcher_router, set_watcher_services
from .errors import register_exception_handlers
from .schemas import (
    CandidateScheduleRequest,
    CandidateScheduleResponse,
    HealthCheckRequest,
    HealthCheckResponse,
    ScheduleRequest,
    ScheduleResponse,
    WatcherScheduleResponse,
)

__all__ = [
    "candidate_router",
    "watcher_router",
    "set_candidate_services",
    "set_watcher_services",
    "register_exception_handlers",
    "CandidateScheduleRequest",
    "CandidateScheduleResponse",
    "HealthCheckRequest",
    "HealthCheckResponse",
    "ScheduleRequest",
    "ScheduleResponse",
    "WatcherScheduleResponse",
]
