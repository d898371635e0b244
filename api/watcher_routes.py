# ============================================================================
# WATCHER ROUTES
# ============================================================================
# STATUS: Core - Watcher scheduling HTTP endpoints
# PURPOSE: Activate and read a watcher's observation schedule
# CREATED: 18 OCT 2026
# ============================================================================
"""
Watcher Routes

Endpoints:
- POST /api/v1/watchers/{watcher_id}/schedule - PENDING_SCHEDULE -> SCHEDULED
- GET  /api/v1/watchers/{watcher_id}/schedule - Current schedule
"""

import logging

from fastapi import APIRouter

from api.schemas import (
    ERROR_RESPONSES,
    ScheduleRequest,
    ScheduleResponse,
    WatcherScheduleResponse,
)
from core.errors import ServiceUnavailableError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/watchers", tags=["watchers"])


# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================

_schedule_service = None


def set_watcher_services(schedule_service):
    """Called by main.py at startup to inject the schedule service."""
    global _schedule_service
    _schedule_service = schedule_service


def _get_schedule_service():
    """Get the schedule service, raising 503 if not initialized."""
    if _schedule_service is None:
        raise ServiceUnavailableError("Schedule service not initialized")
    return _schedule_service


# ============================================================================
# SCHEDULE
# ============================================================================

@router.post("/{watcher_id}/schedule", response_model=ScheduleResponse, responses=ERROR_RESPONSES)
async def schedule_watcher(watcher_id: str, request: ScheduleRequest):
    """
    Activate periodic observation: PENDING_SCHEDULE -> SCHEDULED.

    Legal once per watcher. A second call returns 409 and changes nothing.
    """
    svc = _get_schedule_service()
    outcome = await svc.schedule(
        watcher_id,
        scan_frequency_minutes=request.scan_frequency_minutes,
        analysis_period_days=request.analysis_period_days,
        for_all_services=request.for_all_services,
    )
    return ScheduleResponse.from_outcome(outcome)


@router.get(
    "/{watcher_id}/schedule",
    response_model=WatcherScheduleResponse,
    responses=ERROR_RESPONSES,
)
async def get_watcher_schedule(watcher_id: str):
    """Get the watcher's schedule (per-candidate settings when varied)."""
    svc = _get_schedule_service()
    schedule = await svc.get_schedule(watcher_id)
    return WatcherScheduleResponse.from_schedule(schedule)
