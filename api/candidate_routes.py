# ============================================================================
# CANDIDATE ROUTES
# ============================================================================
# STATUS: Core - Candidate HTTP endpoints
# PURPOSE: On-demand batch health checks and per-candidate schedule actions
# CREATED: 18 OCT 2026
# ============================================================================
"""
Candidate Routes

Endpoints:
- POST /api/v1/candidates/health-check           - Assess up to 50 candidates
- POST /api/v1/candidates/{candidate_id}/schedule - schedule/pause/resume/opt_out
"""

import logging

from fastapi import APIRouter

from api.schemas import (
    ERROR_RESPONSES,
    CandidateScheduleRequest,
    CandidateScheduleResponse,
    HealthCheckRequest,
    HealthCheckResponse,
)
from core.errors import ServiceUnavailableError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/candidates", tags=["candidates"])


# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================

_health_check_service = None
_schedule_service = None


def set_candidate_services(health_check_service, schedule_service=None):
    """Called by main.py at startup to inject the candidate services."""
    global _health_check_service, _schedule_service
    _health_check_service = health_check_service
    _schedule_service = schedule_service


def _get_health_check_service():
    """Get the health check service, raising 503 if not initialized."""
    if _health_check_service is None:
        raise ServiceUnavailableError("Health check service not initialized")
    return _health_check_service


def _get_schedule_service():
    if _schedule_service is None:
        raise ServiceUnavailableError("Schedule service not initialized")
    return _schedule_service


# ============================================================================
# HEALTH CHECK
# ============================================================================

@router.post("/health-check", response_model=HealthCheckResponse, responses=ERROR_RESPONSES)
async def health_check(request: HealthCheckRequest):
    """
    Check whether each candidate is still alive.

    A candidate is healthy when it is tracked by an observability source
    or its endpoint answered the probe below 500. Ids that do not belong
    to the owner are left out of the response.
    """
    svc = _get_health_check_service()
    report = await svc.check_candidates(request.candidate_ids, request.owner_id)
    return HealthCheckResponse.from_report(report)


# ============================================================================
# SCHEDULE
# ============================================================================

@router.post(
    "/{candidate_id}/schedule",
    response_model=CandidateScheduleResponse,
    responses=ERROR_RESPONSES,
)
async def schedule_candidate(candidate_id: int, request: CandidateScheduleRequest):
    """
    Apply one action to a candidate of the owner.

    schedule sets the candidate's own cadence (watcher must be varied).
    pause, resume and opt_out change only its observation status.
    """
    svc = _get_schedule_service()
    outcome = await svc.update_candidate(
        candidate_id,
        request.owner_id,
        action=request.action,
        scan_frequency_minutes=request.scan_frequency_minutes,
        analysis_period_days=request.analysis_period_days,
        pause_reason=request.pause_reason,
    )
    return CandidateScheduleResponse.from_outcome(outcome)
