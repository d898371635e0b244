# ============================================================================
# HEALTH VERDICT
# ============================================================================
# STATUS: Service - Pure verdict synthesis
# PURPOSE: Combine probe and observability signals into one health verdict
# CREATED: 18 OCT 2026
# EXPORTS: VERDICT_MESSAGES, synthesize_verdict
# ============================================================================
"""
Health Verdict

healthy = tracked OR reachable. The message is looked up in an explicit
table keyed by (tracked, reachable, has_probe_error); every combination
is listed so no input falls through to a default.

A probe error does not change the message. It is carried separately in
the result details.
"""

from typing import Dict, Optional, Tuple

from core.models import HealthCheckResult, HealthCheckTarget, ObservabilitySignal, ProbeResult

REACHABLE_AND_TRACKED = "Endpoint reachable and tracked by observability"
TRACKED_ONLY = "Tracked by observability sources"
REACHABLE_ONLY = "Endpoint reachable but no observability tracking"
NEITHER = "No observability sources and endpoint unreachable"

# (tracked, reachable, has_probe_error) -> message
VERDICT_MESSAGES: Dict[Tuple[bool, bool, bool], str] = {
    (True, True, False): REACHABLE_AND_TRACKED,
    (True, True, True): REACHABLE_AND_TRACKED,
    (True, False, False): TRACKED_ONLY,
    (True, False, True): TRACKED_ONLY,
    (False, True, False): REACHABLE_ONLY,
    (False, True, True): REACHABLE_ONLY,
    (False, False, False): NEITHER,
    (False, False, True): NEITHER,
}


def verdict_message(tracked: bool, reachable: bool, probe_error: Optional[str] = None) -> str:
    """Look up the verdict message for one combination of signals."""
    return VERDICT_MESSAGES[(bool(tracked), bool(reachable), bool(probe_error))]


def synthesize_verdict(
    target: HealthCheckTarget,
    signal: ObservabilitySignal,
    probe: Optional[ProbeResult] = None,
) -> HealthCheckResult:
    """
    Build the HealthCheckResult for one candidate.

    Args:
        target: Candidate being assessed
        signal: Observability signal for the candidate
        probe: Probe outcome, or None when the candidate was not probed.
               Unprobed candidates are reported reachable iff tracked.
    """
    tracked = signal.tracked
    reachable = probe.reachable if probe is not None else tracked
    error = probe.error if probe is not None else None

    return HealthCheckResult(
        candidate_id=target.candidate_id,
        healthy=tracked or reachable,
        reachable=reachable,
        tracked=tracked,
        message=verdict_message(tracked, reachable, error),
        entity_type=target.entity_type,
        entity_name=target.entity_name,
        route_path=target.route_path,
        status_code=probe.status_code if probe is not None else None,
        response_time_ms=probe.response_time_ms if probe is not None else None,
        observability_sources=list(signal.sources),
        error=error,
    )


__all__ = [
    "VERDICT_MESSAGES",
    "verdict_message",
    "synthesize_verdict",
]
