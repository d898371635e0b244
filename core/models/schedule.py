# ============================================================================
# SCHEDULE READ MODELS
# ============================================================================
# STATUS: Core model - Scheduling outcomes and schedule views
# PURPOSE: Shapes returned by the scheduling state machine
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: ScheduleOutcome, CandidateScheduleSetting, WatcherSchedule,
#          CandidateScheduleOutcome
# ============================================================================
"""
Schedule Read Models

ScheduleOutcome is what a successful schedule() call returns.
WatcherSchedule is the getSchedule() view; candidate_settings is only
populated for watchers with observation_type=varied.
CandidateScheduleOutcome is what one per-candidate action returns.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from core.contracts import CandidateAction, EntityType, ObservationType


@dataclass
class ScheduleOutcome:
    """Result of the PENDING_SCHEDULE -> SCHEDULED transition."""
    watcher_id: str
    status: str
    observation_type: ObservationType
    scan_frequency_minutes: int
    analysis_period_days: int
    next_observation_at: datetime
    candidates_updated: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "watcher_id": self.watcher_id,
            "status": self.status,
            "observation_type": self.observation_type.value,
            "scan_frequency_minutes": self.scan_frequency_minutes,
            "analysis_period_days": self.analysis_period_days,
            "next_observation_at": self.next_observation_at.isoformat(),
            "candidates_updated": self.candidates_updated,
        }


@dataclass
class CandidateScheduleSetting:
    """One active candidate's own cadence."""
    candidate_id: int
    entity_type: EntityType
    entity_name: Optional[str]
    scan_frequency_minutes: Optional[int]
    analysis_period_days: Optional[int]


@dataclass
class WatcherSchedule:
    """Current schedule of a watcher."""
    watcher_id: str
    watcher_name: Optional[str]
    status: str
    observation_type: Optional[ObservationType]
    scan_frequency_minutes: Optional[int]
    analysis_period_days: Optional[int]
    next_observation_at: Optional[datetime]
    candidate_settings: Optional[List[CandidateScheduleSetting]] = field(default=None)


@dataclass
class CandidateScheduleOutcome:
    """Result of one CandidateAction applied to a candidate."""
    candidate_id: int
    watcher_id: str
    action: CandidateAction
    status: str
    scan_frequency_minutes: Optional[int] = None
    analysis_period_days: Optional[int] = None
    next_observation_at: Optional[datetime] = None
    pause_reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "candidate_id": self.candidate_id,
            "watcher_id": self.watcher_id,
            "action": self.action.value,
            "status": self.status,
            "scan_frequency_minutes": self.scan_frequency_minutes,
            "analysis_period_days": self.analysis_period_days,
            "next_observation_at": (
                self.next_observation_at.isoformat() if self.next_observation_at else None
            ),
            "pause_reason": self.pause_reason,
        }


__all__ = [
    "ScheduleOutcome",
    "CandidateScheduleSetting",
    "WatcherSchedule",
    "CandidateScheduleOutcome",
]
