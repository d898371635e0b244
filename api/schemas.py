# ============================================================================
# API SCHEMAS
# ============================================================================
# STATUS: Core - Request/Response schemas
# PURPOSE: Pydantic models for API validation
# CREATED: 18 OCT 2026
# ============================================================================
"""
API Schemas

Request and response models for the API.

Request models only enforce JSON types (strict: "5" is not an integer
and 1 is not a boolean). Range and batch-size checks live in the
services so the API and direct callers get the same errors.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, StrictBool, StrictInt

from core.contracts import CandidateAction, EntityType, ObservationType
from core.models import (
    BatchHealthReport,
    CandidateScheduleOutcome,
    ScheduleOutcome,
    WatcherSchedule,
)


# ============================================================================
# REQUEST SCHEMAS
# ============================================================================

class HealthCheckRequest(BaseModel):
    """Request to health-check a batch of candidates."""
    candidate_ids: List[StrictInt] = Field(
        default_factory=list,
        description="Candidate ids to assess (1..50)",
    )
    owner_id: Optional[str] = Field(
        None,
        max_length=255,
        description="User that owns the candidates' watchers",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [{"candidate_ids": [101, 102], "owner_id": "user-42"}]
        }
    }


class ScheduleRequest(BaseModel):
    """Request to activate observation of a watcher."""
    scan_frequency_minutes: StrictInt = Field(..., description="5..1440")
    analysis_period_days: StrictInt = Field(..., description="7..365")
    for_all_services: StrictBool = Field(
        ...,
        description="True: candidates inherit (uniform). False: defaults copied (varied)",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "scan_frequency_minutes": 60,
                    "analysis_period_days": 30,
                    "for_all_services": True,
                }
            ]
        }
    }



class CandidateScheduleRequest(BaseModel):
    """Request to apply one action to a single candidate."""
    owner_id: Optional[str] = Field(
        None,
        max_length=255,
        description="User that owns the candidate's watcher",
    )
    action: str = Field(
        CandidateAction.SCHEDULE.value,
        description="schedule | pause | resume | opt_out",
    )
    scan_frequency_minutes: Optional[StrictInt] = Field(
        None, description="5..1440, required for schedule"
    )
    analysis_period_days: Optional[StrictInt] = Field(
        None, description="7..365, required for schedule"
    )
    pause_reason: Optional[str] = Field(
        None, description="Stored with pause and opt_out"
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "owner_id": "user-42",
                    "action": "schedule",
                    "scan_frequency_minutes": 15,
                    "analysis_period_days": 14,
                },
                {"owner_id": "user-42", "action": "pause", "pause_reason": "maintenance"},
            ]
        }
    }

# ============================================================================
# RESPONSE SCHEMAS
# ============================================================================

class HealthCheckDetails(BaseModel):
    status_code: Optional[int] = None
    response_time_ms: Optional[int] = None
    observability_sources: List[str] = Field(default_factory=list)
    error: Optional[str] = None


class CandidateHealthResponse(BaseModel):
    """Verdict for one candidate."""
    candidate_id: int
    entity_name: Optional[str] = None
    entity_type: Optional[EntityType] = None
    route_path: Optional[str] = None
    healthy: bool
    reachable: bool
    tracked: bool
    message: str
    details: HealthCheckDetails


class HealthCheckSummary(BaseModel):
    total: int
    healthy: int
    unhealthy: int
    tracked: int
    reachable: int


class HealthCheckResponse(BaseModel):
    """Batch health check response."""
    success: bool = True
    summary: HealthCheckSummary
    candidates: List[CandidateHealthResponse]

    @classmethod
    def from_report(cls, report: BatchHealthReport) -> "HealthCheckResponse":
        return cls.model_validate(report.to_dict())


class ScheduleResponse(BaseModel):
    """Outcome of a successful schedule call."""
    success: bool = True
    watcher_id: str
    status: str
    observation_type: ObservationType
    scan_frequency_minutes: int
    analysis_period_days: int
    next_observation_at: datetime
    candidates_updated: int = 0

    @classmethod
    def from_outcome(cls, outcome: ScheduleOutcome) -> "ScheduleResponse":
        return cls(
            watcher_id=outcome.watcher_id,
            status=outcome.status,
            observation_type=outcome.observation_type,
            scan_frequency_minutes=outcome.scan_frequency_minutes,
            analysis_period_days=outcome.analysis_period_days,
            next_observation_at=outcome.next_observation_at,
            candidates_updated=outcome.candidates_updated,
        )


class CandidateSettingResponse(BaseModel):
    candidate_id: int
    entity_type: EntityType
    entity_name: Optional[str] = None
    scan_frequency_minutes: Optional[int] = None
    analysis_period_days: Optional[int] = None


class WatcherScheduleResponse(BaseModel):
    """Current schedule of a watcher."""
    watcher_id: str
    watcher_name: Optional[str] = None
    status: str
    observation_type: Optional[ObservationType] = None
    scan_frequency_minutes: Optional[int] = None
    analysis_period_days: Optional[int] = None
    next_observation_at: Optional[datetime] = None
    candidate_settings: Optional[List[CandidateSettingResponse]] = None

    @classmethod
    def from_schedule(cls, schedule: WatcherSchedule) -> "WatcherScheduleResponse":
        settings = None
        if schedule.candidate_settings is not None:
            settings = [
                CandidateSettingResponse(
                    candidate_id=s.candidate_id,
                    entity_type=s.entity_type,
                    entity_name=s.entity_name,
                    scan_frequency_minutes=s.scan_frequency_minutes,
                    analysis_period_days=s.analysis_period_days,
                )
                for s in schedule.candidate_settings
            ]
        return cls(
            watcher_id=schedule.watcher_id,
            watcher_name=schedule.watcher_name,
            status=schedule.status,
            observation_type=schedule.observation_type,
            scan_frequency_minutes=schedule.scan_frequency_minutes,
            analysis_period_days=schedule.analysis_period_days,
            next_observation_at=schedule.next_observation_at,
            candidate_settings=settings,
        )


class CandidateScheduleResponse(BaseModel):
    """Outcome of a per-candidate action."""
    success: bool = True
    candidate_id: int
    watcher_id: str
    action: CandidateAction
    status: str
    scan_frequency_minutes: Optional[int] = None
    analysis_period_days: Optional[int] = None
    next_observation_at: Optional[datetime] = None
    pause_reason: Optional[str] = None

    @classmethod
    def from_outcome(cls, outcome: CandidateScheduleOutcome) -> "CandidateScheduleResponse":
        return cls(
            candidate_id=outcome.candidate_id,
            watcher_id=outcome.watcher_id,
            action=outcome.action,
            status=outcome.status,
            scan_frequency_minutes=outcome.scan_frequency_minutes,
            analysis_period_days=outcome.analysis_period_days,
            next_observation_at=outcome.next_observation_at,
            pause_reason=outcome.pause_reason,
        )


class ErrorResponse(BaseModel):
    """Body of every error response."""
    error: str
    message: str
    context: Optional[Dict[str, Any]] = None


# Documented on every route that can fail with a typed error
ERROR_RESPONSES: Dict[Union[int, str], Dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "validation_error"},
    404: {"model": ErrorResponse, "description": "not_found"},
    409: {"model": ErrorResponse, "description": "invalid_state"},
    500: {"model": ErrorResponse, "description": "internal_error"},
    503: {"model": ErrorResponse, "description": "service_unavailable"},
}
