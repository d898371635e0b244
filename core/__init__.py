# ============================================================================
# CORE MODULE
# ============================================================================
# STATUS: Core module initialization
# PURPOSE: Export core contracts, errors and models
# LAST_REVIEWED: 18 OCT 2026
# ============================================================================

from core.contracts import WatcherStatus, ObservationType, EntityType, CandidateStatus
from core.errors import (
    ZombieWatchError,
    ValidationError,
    NotFoundError,
    InvalidStateError,
    TransientProbeError,
    InternalError,
)
from core.models import (
    Watcher,
    Candidate,
    HealthCheckResult,
    BatchSummary,
)

__all__ = [
    # Enums
    "WatcherStatus",
    "ObservationType",
    "EntityType",
    "CandidateStatus",
    # Errors
    "ZombieWatchError",
    "ValidationError",
    "NotFoundError",
    "InvalidStateError",
    "TransientProbeError",
    "InternalError",
    # Models
    "Watcher",
    "Candidate",
    "HealthCheckResult",
    "BatchSummary",
]
