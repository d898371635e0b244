# ============================================================================
# VERDICT + OBSERVABILITY TESTS
# ============================================================================
# STATUS: Tests - Pure signal combination
# PURPOSE: Verify the observability resolver and the verdict table
# CREATED: 18 OCT 2026
# ============================================================================
"""
Verdict and Observability Tests

Run with:
    pytest tests/test_verdict.py -v
"""

import itertools

import pytest

from core.contracts import EntityType
from core.models import HealthCheckTarget, ObservabilitySignal, ProbeResult
from services.observability import resolve_observability
from services.verdict import VERDICT_MESSAGES, synthesize_verdict, verdict_message


def _target(entity_type=EntityType.HTTP_ENDPOINT, **kwargs):
    return HealthCheckTarget(
        candidate_id=kwargs.pop("candidate_id", 1),
        watcher_id="w-1",
        entity_type=entity_type,
        **kwargs,
    )


# ============================================================================
# OBSERVABILITY
# ============================================================================

class TestResolveObservability:

    @pytest.mark.parametrize("sources", [None, {}])
    def test_no_sources_untracked(self, sources):
        signal = resolve_observability(sources)
        assert signal.tracked is False
        assert signal.sources == []

    def test_sources_are_keys(self):
        signal = resolve_observability(
            {"grafana": "https://g", "datadog": "https://d"}, "/health"
        )
        assert signal.tracked is True
        assert signal.sources == ["grafana", "datadog"]

    def test_route_path_ignored(self):
        sources = {"grafana": "https://g"}
        assert resolve_observability(sources, "/a") == resolve_observability(sources, "/b")


# ============================================================================
# VERDICT TABLE
# ============================================================================

class TestVerdictTable:

    def test_every_combination_listed(self):
        assert set(VERDICT_MESSAGES) == set(itertools.product([True, False], repeat=3))

    @pytest.mark.parametrize("tracked,reachable,expected", [
        (True, True, "Endpoint reachable and tracked by observability"),
        (True, False, "Tracked by observability sources"),
        (False, True, "Endpoint reachable but no observability tracking"),
        (False, False, "No observability sources and endpoint unreachable"),
    ])
    def test_messages(self, tracked, reachable, expected):
        assert verdict_message(tracked, reachable) == expected
        assert verdict_message(tracked, reachable, "Connection timeout") == expected

    def test_messages_never_empty(self):
        assert all(VERDICT_MESSAGES.values())


# ============================================================================
# SYNTHESIS
# ============================================================================

class TestSynthesizeVerdict:

    @pytest.mark.parametrize("tracked,reachable", list(itertools.product([True, False], repeat=2)))
    def test_healthy_is_tracked_or_reachable(self, tracked, reachable):
        signal = ObservabilitySignal(tracked=tracked, sources=["grafana"] if tracked else [])
        probe = ProbeResult(reachable=reachable, status_code=200 if reachable else 503)

        result = synthesize_verdict(_target(application_url="https://a"), signal, probe)

        assert result.healthy == (tracked or reachable)
        assert result.tracked == tracked
        assert result.reachable == reachable

    def test_unprobed_candidate_reachable_iff_tracked(self):
        tracked = synthesize_verdict(
            _target(EntityType.CRON_JOB),
            ObservabilitySignal(tracked=True, sources=["datadog"]),
        )
        assert tracked.reachable is True
        assert tracked.healthy is True
        assert tracked.message == "Endpoint reachable and tracked by observability"

        untracked = synthesize_verdict(
            _target(EntityType.QUEUE_WORKER),
            ObservabilitySignal(tracked=False),
        )
        assert untracked.reachable is False
        assert untracked.healthy is False
        assert untracked.message == "No observability sources and endpoint unreachable"

    def test_probe_error_carried_in_details(self):
        result = synthesize_verdict(
            _target(application_url="https://a", route_path="/health"),
            ObservabilitySignal(tracked=False),
            ProbeResult.unreachable("Connection timeout", url="https://a/health"),
        )
        assert result.healthy is False
        assert result.message == "No observability sources and endpoint unreachable"
        assert result.error == "Connection timeout"
        assert result.to_dict()["details"]["error"] == "Connection timeout"

    def test_probe_details_copied(self):
        result = synthesize_verdict(
            _target(application_url="https://a", entity_name="GET /users"),
            ObservabilitySignal(tracked=True, sources=["grafana"]),
            ProbeResult(reachable=True, status_code=404, response_time_ms=12),
        )
        assert result.status_code == 404
        assert result.response_time_ms == 12
        assert result.observability_sources == ["grafana"]
        assert result.entity_name == "GET /users"
