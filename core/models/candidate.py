# ============================================================================
# CANDIDATE MODEL
# ============================================================================
# STATUS: Domain model - One discovered service unit
# PURPOSE: Track an endpoint/job/worker under observation
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: Candidate
# DEPENDENCIES: pydantic
# ============================================================================
"""
Candidate Model

One discovered unit (HTTP endpoint, cron job, queue worker, ...) owned by
exactly one Watcher. Deleted together with its watcher.

Schedule overrides are nullable: None means "inherit from the watcher".
The health-check engine reads candidates but never mutates them; the
owner changes them one at a time through the CandidateAction transitions.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from pydantic import BaseModel, Field

from core.contracts import CandidateAction, CandidateStatus, EntityType
from core.errors import InvalidStateError

OPT_OUT_REASON = "user_opt_out"

_ALLOWED_FROM = {
    CandidateAction.SCHEDULE: {
        CandidateStatus.PENDING.value,
        CandidateStatus.ACTIVE.value,
        CandidateStatus.PAUSED.value,
    },
    CandidateAction.PAUSE: {CandidateStatus.ACTIVE.value},
    CandidateAction.RESUME: {
        CandidateStatus.PAUSED.value,
        CandidateStatus.INACTIVE.value,
    },
    CandidateAction.OPT_OUT: {
        CandidateStatus.PENDING.value,
        CandidateStatus.ACTIVE.value,
        CandidateStatus.PAUSED.value,
    },
}


class Candidate(BaseModel):
    """
    A service unit under observation.

    Maps to: zombiewatch.zombie_candidates
    """

    candidate_id: int = Field(..., ge=1)
    watcher_id: str = Field(..., max_length=255)

    entity_type: EntityType
    entity_name: Optional[str] = Field(default=None, max_length=500)
    route_path: Optional[str] = None
    method: Optional[str] = Field(default=None, max_length=20)

    status: str = Field(default=CandidateStatus.ACTIVE.value, max_length=20)

    # Per-candidate overrides (None = inherit from watcher)
    scan_frequency_minutes: Optional[int] = Field(default=None, ge=5, le=1440)
    analysis_period_days: Optional[int] = Field(default=None, ge=7, le=365)
    next_observation_at: Optional[datetime] = None

    # Set while paused or opted out
    pause_reason: Optional[str] = Field(default=None, max_length=500)
    paused_at: Optional[datetime] = None

    discovered_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = {"frozen": False}

    def effective_scan_frequency(self, watcher_frequency: Optional[int]) -> Optional[int]:
        """Own override if set, else the watcher's cadence."""
        if self.scan_frequency_minutes is not None:
            return self.scan_frequency_minutes
        return watcher_frequency

    def effective_analysis_period(self, watcher_period: Optional[int]) -> Optional[int]:
        """Own override if set, else the watcher's analysis period."""
        if self.analysis_period_days is not None:
            return self.analysis_period_days
        return watcher_period

    # ----------------------------------------------------------------
    # State transitions
    # ----------------------------------------------------------------

    def can_apply(self, action: CandidateAction) -> bool:
        """Check if the action is legal from the current status."""
        return self.status in _ALLOWED_FROM[action]

    def _require(self, action: CandidateAction) -> None:
        if not self.can_apply(action):
            raise InvalidStateError(
                f"Cannot {action.value.replace('_', ' ')} candidate "
                f"{self.candidate_id} from status '{self.status}'",
                current_state=self.status,
                required_state=" | ".join(sorted(_ALLOWED_FROM[action])),
            )

    def customize_schedule(
        self,
        scan_frequency_minutes: int,
        analysis_period_days: int,
        now: Optional[datetime] = None,
    ) -> None:
        """
        Give the candidate its own cadence and (re)activate it.

        Raises:
            InvalidStateError: Candidate opted out (resume it first).
        """
        self._require(CandidateAction.SCHEDULE)
        now = now or datetime.now(timezone.utc)
        self.status = CandidateStatus.ACTIVE.value
        self.scan_frequency_minutes = scan_frequency_minutes
        self.analysis_period_days = analysis_period_days
        self.next_observation_at = now + timedelta(minutes=scan_frequency_minutes)
        self.pause_reason = None
        self.paused_at = None
        self.updated_at = now

    def pause(self, reason: Optional[str] = None, now: Optional[datetime] = None) -> None:
        """ACTIVE -> PAUSED. The next observation is cleared."""
        self._require(CandidateAction.PAUSE)
        now = now or datetime.now(timezone.utc)
        self.status = CandidateStatus.PAUSED.value
        self.pause_reason = reason
        self.paused_at = now
        self.next_observation_at = None
        self.updated_at = now

    def opt_out(self, reason: Optional[str] = None, now: Optional[datetime] = None) -> None:
        """Stop observing until the owner explicitly resumes."""
        self._require(CandidateAction.OPT_OUT)
        now = now or datetime.now(timezone.utc)
        self.status = CandidateStatus.INACTIVE.value
        self.pause_reason = reason or OPT_OUT_REASON
        self.paused_at = now
        self.next_observation_at = None
        self.updated_at = now

    def resume(
        self,
        watcher_frequency: Optional[int],
        now: Optional[datetime] = None,
    ) -> None:
        """
        PAUSED or INACTIVE -> ACTIVE.

        The next observation is recomputed from now using the effective
        cadence. Without any cadence (watcher never scheduled) it stays None.
        """
        self._require(CandidateAction.RESUME)
        now = now or datetime.now(timezone.utc)
        frequency = self.effective_scan_frequency(watcher_frequency)
        self.status = CandidateStatus.ACTIVE.value
        self.pause_reason = None
        self.paused_at = None
        self.next_observation_at = (
            now + timedelta(minutes=frequency) if frequency is not None else None
        )
        self.updated_at = now


__all__ = ["Candidate"]
