# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# STATUS: Foundation - Core enums for watchers and candidates
# PURPOSE: Define lifecycle and classification enums shared by all layers
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: WatcherStatus, ObservationType, EntityType, CandidateStatus,
#          CandidateAction
# DEPENDENCIES: enum
# ============================================================================
"""
Base contracts for the Zombie Watch core.

These enums cross every boundary:
- SQL (PostgreSQL columns store the .value)
- HTTP (request/response bodies)
- Python (internal processing)
"""

from enum import Enum


# ============================================================================
# WATCHER ENUMS
# ============================================================================

class WatcherStatus(str, Enum):
    """
    Watcher lifecycle states known to this core.

    State transitions owned here:
        PENDING_SCHEDULE -> SCHEDULED

    Later states (paused, archived, ...) are written by other services.
    They are stored as plain strings and treated as opaque.
    """
    PENDING_SCHEDULE = "pending_schedule"  # Created by discovery, awaiting schedule
    SCHEDULED = "scheduled"                # Periodic observation active


class ObservationType(str, Enum):
    """How candidates of a watcher get their cadence."""
    UNIFORM = "uniform"    # All candidates inherit the watcher schedule
    VARIED = "varied"      # Candidates carry their own (customisable) schedule

    @classmethod
    def for_all_services(cls, for_all_services: bool) -> "ObservationType":
        """Map the scheduling flag onto an observation type."""
        return cls.UNIFORM if for_all_services else cls.VARIED


# ============================================================================
# CANDIDATE ENUMS
# ============================================================================

class EntityType(str, Enum):
    """
    Kinds of discovered service units.

    Closed set. Only HTTP_ENDPOINT supports active reachability probing;
    every other type is judged on observability coverage alone.
    """
    HTTP_ENDPOINT = "http_endpoint"
    CRON_JOB = "cron_job"
    QUEUE_WORKER = "queue_worker"
    SERVERLESS_FUNCTION = "serverless_function"
    WEBSOCKET = "websocket"
    GRPC_SERVICE = "grpc_service"
    GRAPHQL_RESOLVER = "graphql_resolver"

    def supports_probe(self) -> bool:
        """Check if a live network probe can be issued for this type."""
        return self is EntityType.HTTP_ENDPOINT


class CandidateStatus(str, Enum):
    """Observation status of a single candidate."""
    PENDING = "pending"      # Discovered, not yet observed
    ACTIVE = "active"        # Under observation
    PAUSED = "paused"        # Temporarily excluded by the user
    INACTIVE = "inactive"    # Opted out, never auto-resumed


class CandidateAction(str, Enum):
    """
    User actions on one candidate's observation.

    Legal source states:
        SCHEDULE: PENDING, ACTIVE, PAUSED  -> ACTIVE (own cadence)
        PAUSE:    ACTIVE                   -> PAUSED
        RESUME:   PAUSED, INACTIVE         -> ACTIVE
        OPT_OUT:  PENDING, ACTIVE, PAUSED  -> INACTIVE
    """
    SCHEDULE = "schedule"
    PAUSE = "pause"
    RESUME = "resume"
    OPT_OUT = "opt_out"


__all__ = [
    "WatcherStatus",
    "ObservationType",
    "EntityType",
    "CandidateStatus",
    "CandidateAction",
]
