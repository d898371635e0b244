# ============================================================================
# HEALTH ASSESSMENT TYPES
# ============================================================================
# STATUS: Core model - Transient results of a batch health check
# PURPOSE: Probe, signal and verdict result types plus the batch summary
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: HealthCheckTarget, ProbeResult, ObservabilitySignal,
#          HealthCheckResult, BatchSummary, BatchHealthReport
# ============================================================================
"""
Health Assessment Types

None of these are persisted. A HealthCheckResult is produced fresh for
every candidate on every batch invocation and written exactly once by the
task that assessed that candidate.

Flow:
    HealthCheckTarget --probe--> ProbeResult ----\\
                      --resolve-> ObservabilitySignal --synthesize--> HealthCheckResult
    [HealthCheckResult, ...] --fold--> BatchSummary
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from core.contracts import EntityType


@dataclass
class HealthCheckTarget:
    """A candidate joined with the watcher fields the assessment needs."""
    candidate_id: int
    watcher_id: str
    entity_type: EntityType
    entity_name: Optional[str] = None
    route_path: Optional[str] = None
    method: Optional[str] = None
    application_url: Optional[str] = None
    observability_sources: Dict[str, Any] = field(default_factory=dict)

    @property
    def probe_applicable(self) -> bool:
        """Only HTTP endpoints with a configured base URL are probed."""
        return self.entity_type.supports_probe() and bool(self.application_url)


@dataclass
class ProbeResult:
    """Outcome of one reachability probe."""
    reachable: bool
    url: Optional[str] = None
    status_code: Optional[int] = None
    response_time_ms: Optional[int] = None
    error: Optional[str] = None

    @classmethod
    def unreachable(cls, error: str, url: Optional[str] = None, **details) -> "ProbeResult":
        """Create unreachable result with a reason."""
        return cls(reachable=False, url=url, error=error, **details)


@dataclass
class ObservabilitySignal:
    """Passive liveness signal derived from configured integrations."""
    tracked: bool
    sources: List[str] = field(default_factory=list)


@dataclass
class HealthCheckResult:
    """Verdict for one candidate in one batch."""
    candidate_id: int
    healthy: bool
    reachable: bool
    tracked: bool
    message: str
    entity_type: Optional[EntityType] = None
    entity_name: Optional[str] = None
    route_path: Optional[str] = None
    status_code: Optional[int] = None
    response_time_ms: Optional[int] = None
    observability_sources: List[str] = field(default_factory=list)
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON response."""
        return {
            "candidate_id": self.candidate_id,
            "entity_name": self.entity_name,
            "entity_type": self.entity_type.value if self.entity_type else None,
            "route_path": self.route_path,
            "healthy": self.healthy,
            "reachable": self.reachable,
            "tracked": self.tracked,
            "message": self.message,
            "details": {
                "status_code": self.status_code,
                "response_time_ms": self.response_time_ms,
                "observability_sources": list(self.observability_sources),
                "error": self.error,
            },
        }


@dataclass
class BatchSummary:
    """Counts over one batch. Always the fold of the individual results."""
    total: int = 0
    healthy: int = 0
    unhealthy: int = 0
    tracked: int = 0
    reachable: int = 0

    @classmethod
    def from_results(cls, results: List[HealthCheckResult]) -> "BatchSummary":
        """Fold results into counts."""
        healthy = sum(1 for r in results if r.healthy)
        return cls(
            total=len(results),
            healthy=healthy,
            unhealthy=len(results) - healthy,
            tracked=sum(1 for r in results if r.tracked),
            reachable=sum(1 for r in results if r.reachable),
        )

    def to_dict(self) -> Dict[str, int]:
        return {
            "total": self.total,
            "healthy": self.healthy,
            "unhealthy": self.unhealthy,
            "tracked": self.tracked,
            "reachable": self.reachable,
        }


@dataclass
class BatchHealthReport:
    """Everything one batch invocation returns."""
    summary: BatchSummary
    candidates: List[HealthCheckResult]
    duration_ms: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "summary": self.summary.to_dict(),
            "candidates": [r.to_dict() for r in self.candidates],
        }


__all__ = [
    "HealthCheckTarget",
    "ProbeResult",
    "ObservabilitySignal",
    "HealthCheckResult",
    "BatchSummary",
    "BatchHealthReport",
]
