# ============================================================================
# MODELS MODULE
# ============================================================================
# STATUS: Model exports
# PURPOSE: Central export point for domain models and result types
# LAST_REVIEWED: 18 OCT 2026
# ============================================================================
"""
Models Module - Central Export Point

Persisted aggregates (Watcher, Candidate) are Pydantic models.
Transient assessment and schedule results are plain dataclasses.
"""

from core.models.watcher import Watcher
from core.models.candidate import Candidate
from core.models.health import (
    HealthCheckTarget,
    ProbeResult,
    ObservabilitySignal,
    HealthCheckResult,
    BatchSummary,
    BatchHealthReport,
)
from core.models.schedule import (
    ScheduleOutcome,
    CandidateScheduleSetting,
    WatcherSchedule,
    CandidateScheduleOutcome,
)

__all__ = [
    # Aggregates
    "Watcher",
    "Candidate",
    # Health assessment
    "HealthCheckTarget",
    "ProbeResult",
    "ObservabilitySignal",
    "HealthCheckResult",
    "BatchSummary",
    "BatchHealthReport",
    # Scheduling
    "ScheduleOutcome",
    "CandidateScheduleSetting",
    "WatcherSchedule",
    "CandidateScheduleOutcome",
]
