# ============================================================================
# WATCHER MODEL
# ============================================================================
# STATUS: Domain model - Aggregate root for a monitored application
# PURPOSE: Track a monitored repository, its endpoints and its schedule
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: Watcher, normalize_sources
# DEPENDENCIES: pydantic
# ============================================================================
"""
Watcher Model

A Watcher is one monitored repository/application plus its deployed
endpoints and its observation schedule. It owns every Candidate
discovered for it.

Lifecycle:
    1. Created by the external discovery workflow with status=pending_schedule
    2. Scheduled exactly once by the scheduling state machine -> scheduled
    3. Later states (paused, archived, ...) are owned by other services

observability_sources has been stored in two shapes over time:
    {"grafana": "https://..."}                       (name -> descriptor)
    [{"type": "grafana", "url": "https://..."}, ...] (list of descriptors)
Both are normalized to the mapping form on load. Anything else (a
JSON-encoded string is decoded first) counts as no sources, so one bad
row never fails a whole batch.
"""

import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, computed_field, field_validator

from core.contracts import ObservationType, WatcherStatus
from core.errors import InvalidStateError

logger = logging.getLogger(__name__)


def normalize_sources(value: Any) -> Dict[str, Any]:
    """
    Normalize stored observability sources to a name -> descriptor mapping.

    A JSON string (double-encoded JSONB) is decoded first. List entries
    without a url are dropped. Duplicate types get a numeric suffix
    ("grafana", "grafana#2") so no source is lost. Any other shape is
    logged and treated as "no sources".
    """
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            logger.warning(f"Ignoring undecodable observability sources: {value[:80]!r}")
            return {}
    if not value:
        return {}
    if isinstance(value, dict):
        return dict(value)
    if isinstance(value, list):
        normalized: Dict[str, Any] = {}
        for index, source in enumerate(value):
            if not isinstance(source, dict) or not source.get("url"):
                continue
            name = str(source.get("type") or f"source_{index}")
            key, suffix = name, 2
            while key in normalized:
                key = f"{name}#{suffix}"
                suffix += 1
            normalized[key] = source
        return normalized
    logger.warning(f"Ignoring observability sources of type {type(value).__name__}")
    return {}


class Watcher(BaseModel):
    """
    A monitored application unit.

    Maps to: zombiewatch.watchers
    """

    # Identity
    watcher_id: str = Field(..., max_length=255)
    watcher_name: Optional[str] = Field(default=None, max_length=500)
    owner_id: str = Field(..., max_length=255, description="User that owns the watcher")

    # Lifecycle - kept as str so states owned elsewhere round-trip untouched
    status: str = Field(default=WatcherStatus.PENDING_SCHEDULE.value, max_length=50)

    # Schedule (null until scheduled)
    observation_type: Optional[ObservationType] = None
    scan_frequency_minutes: Optional[int] = Field(default=None, ge=5, le=1440)
    analysis_period_days: Optional[int] = Field(default=None, ge=7, le=365)
    next_observation_at: Optional[datetime] = None

    # Probe configuration supplied at creation
    application_url: Optional[str] = None
    observability_sources: Dict[str, Any] = Field(default_factory=dict)

    # Timestamps
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = {"frozen": False}

    @field_validator("observability_sources", mode="before")
    @classmethod
    def _normalize_sources(cls, value: Any) -> Dict[str, Any]:
        return normalize_sources(value)

    # ----------------------------------------------------------------
    # Computed fields
    # ----------------------------------------------------------------

    @computed_field
    @property
    def is_scheduled(self) -> bool:
        """True once periodic observation has been activated."""
        return self.status == WatcherStatus.SCHEDULED.value

    # ----------------------------------------------------------------
    # State transitions
    # ----------------------------------------------------------------

    def can_transition_to(self, new_status: WatcherStatus) -> bool:
        """
        Validate if a status transition is allowed.

        Valid transitions:
            PENDING_SCHEDULE -> SCHEDULED
            SCHEDULED -> (none owned by this core)

        A same-state transition is NOT a no-op:
        scheduling a scheduled watcher must fail.
        """
        allowed = {
            WatcherStatus.PENDING_SCHEDULE.value: {WatcherStatus.SCHEDULED},
            WatcherStatus.SCHEDULED.value: set(),
        }
        return new_status in allowed.get(self.status, set())

    def mark_scheduled(
        self,
        scan_frequency_minutes: int,
        analysis_period_days: int,
        observation_type: ObservationType,
        now: Optional[datetime] = None,
    ) -> None:
        """
        Transition PENDING_SCHEDULE -> SCHEDULED and compute the next observation.

        Raises:
            InvalidStateError: Watcher is not awaiting a schedule.
        """
        if not self.can_transition_to(WatcherStatus.SCHEDULED):
            raise InvalidStateError(
                f"Cannot schedule watcher {self.watcher_id} from status "
                f"'{self.status}' (must be '{WatcherStatus.PENDING_SCHEDULE.value}')",
                current_state=self.status,
                required_state=WatcherStatus.PENDING_SCHEDULE.value,
            )
        now = now or datetime.now(timezone.utc)
        self.status = WatcherStatus.SCHEDULED.value
        self.observation_type = observation_type
        self.scan_frequency_minutes = scan_frequency_minutes
        self.analysis_period_days = analysis_period_days
        self.next_observation_at = now + timedelta(minutes=scan_frequency_minutes)
        self.updated_at = now


__all__ = ["Watcher", "normalize_sources"]
