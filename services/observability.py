# ============================================================================
# OBSERVABILITY SIGNAL RESOLVER
# ============================================================================
# STATUS: Service - Passive liveness signal
# PURPOSE: Decide whether a candidate is tracked by an observability integration
# CREATED: 18 OCT 2026
# ============================================================================
"""
Observability Signal Resolver

A candidate counts as tracked when its watcher has at least one
observability source configured. Dashboards are not queried.
"""

from typing import Any, Mapping, Optional

from core.models import ObservabilitySignal


def resolve_observability(
    sources: Optional[Mapping[str, Any]],
    route_path: Optional[str] = None,
) -> ObservabilitySignal:
    """
    Resolve the tracked signal from a watcher's configured sources.

    route_path is accepted so per-route matching can be added without
    changing callers; it does not affect the result today.
    """
    if not sources:
        return ObservabilitySignal(tracked=False, sources=[])
    names = list(sources.keys())
    return ObservabilitySignal(tracked=len(names) > 0, sources=names)


__all__ = ["resolve_observability"]
