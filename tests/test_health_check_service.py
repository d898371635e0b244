# ============================================================================
# BATCH HEALTH CHECK SERVICE TESTS
# ============================================================================
# STATUS: Tests - Batch orchestration
# PURPOSE: Verify HealthCheckService with a mocked repository and transport
# CREATED: 18 OCT 2026
# ============================================================================
"""
HealthCheckService Tests

Unit tests with the candidate repository mocked and outbound probes
served by httpx.MockTransport. No database, no network.

Run with:
    pytest tests/test_health_check_service.py -v
"""

import asyncio
import time
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import psycopg
import pytest

from core.config import BatchDefaults, Defaults, ProbeDefaults
from core.contracts import EntityType
from core.errors import InternalError, NotFoundError, ValidationError
from core.models import HealthCheckTarget
from services.health_check_service import HealthCheckService


# ============================================================================
# HELPERS
# ============================================================================

def _make_target(
    candidate_id,
    entity_type=EntityType.HTTP_ENDPOINT,
    application_url="https://api.example.com",
    route_path="/health",
    method="GET",
    observability_sources=None,
):
    """Create a test HealthCheckTarget."""
    return HealthCheckTarget(
        candidate_id=candidate_id,
        watcher_id="w-1",
        entity_type=entity_type,
        entity_name=f"candidate-{candidate_id}",
        route_path=route_path,
        method=method,
        application_url=application_url,
        observability_sources=observability_sources or {},
    )


def _build_service(handler=None, targets=None, timeout_seconds=10.0):
    """Build a HealthCheckService with the repo mocked and a MockTransport."""
    defaults = Defaults(
        probe=ProbeDefaults(timeout_seconds=timeout_seconds),
        batch=BatchDefaults(max_batch_size=50),
    )
    handler = handler or (lambda request: httpx.Response(200))
    svc = HealthCheckService(MagicMock(), defaults, transport=httpx.MockTransport(handler))

    svc.candidate_repo = AsyncMock()
    svc.candidate_repo.list_health_check_targets.return_value = targets or []
    return svc


def _by_id(report):
    return {r.candidate_id: r for r in report.candidates}


# ============================================================================
# VALIDATION
# ============================================================================

class TestValidation:

    def test_empty_batch_rejected(self):
        svc = _build_service()
        with pytest.raises(ValidationError) as exc_info:
            asyncio.run(svc.check_candidates([], "user-1"))
        assert exc_info.value.field == "candidate_ids"
        svc.candidate_repo.list_health_check_targets.assert_not_called()

    def test_missing_ids_rejected(self):
        svc = _build_service()
        with pytest.raises(ValidationError):
            asyncio.run(svc.check_candidates(None, "user-1"))

    def test_fifty_accepted_fifty_one_rejected(self):
        svc = _build_service(targets=[_make_target(1, entity_type=EntityType.CRON_JOB)])
        asyncio.run(svc.check_candidates(list(range(1, 51)), "user-1"))

        with pytest.raises(ValidationError) as exc_info:
            asyncio.run(svc.check_candidates(list(range(1, 52)), "user-1"))
        assert "50" in exc_info.value.message

    @pytest.mark.parametrize("owner_id", [None, "", "   "])
    def test_missing_owner_rejected(self, owner_id):
        svc = _build_service()
        with pytest.raises(ValidationError) as exc_info:
            asyncio.run(svc.check_candidates([1], owner_id))
        assert exc_info.value.field == "owner_id"

    @pytest.mark.parametrize("bad_id", ["1", 1.5, True, None])
    def test_non_integer_ids_rejected(self, bad_id):
        svc = _build_service()
        with pytest.raises(ValidationError):
            asyncio.run(svc.check_candidates([1, bad_id], "user-1"))

    def test_duplicates_removed_before_lookup(self):
        svc = _build_service(targets=[_make_target(1, entity_type=EntityType.CRON_JOB)])
        asyncio.run(svc.check_candidates([1, 2, 1, 2, 3], "user-1"))
        svc.candidate_repo.list_health_check_targets.assert_awaited_once_with([1, 2, 3], "user-1")


# ============================================================================
# LOOKUP
# ============================================================================

class TestLookup:

    def test_nothing_resolved_is_not_found(self):
        svc = _build_service(targets=[])
        with pytest.raises(NotFoundError):
            asyncio.run(svc.check_candidates([1, 2], "user-1"))

    def test_partial_resolution_is_lossy(self):
        svc = _build_service(targets=[_make_target(2, entity_type=EntityType.CRON_JOB)])
        report = asyncio.run(svc.check_candidates([1, 2, 3], "user-1"))
        assert [r.candidate_id for r in report.candidates] == [2]
        assert report.summary.total == 1

    def test_malformed_sources_row_does_not_fail_batch(self):
        row = {
            "watcher_id": "w-1",
            "entity_type": "cron_job",
            "entity_name": "nightly",
            "route_path": None,
            "method": None,
            "application_url": None,
        }
        rows = [
            dict(row, candidate_id=1, observability_urls={"grafana": "https://g"}),
            dict(row, candidate_id=2, observability_urls='"https://g"'),
        ]
        result = MagicMock()
        result.fetchall = AsyncMock(return_value=rows)
        conn = MagicMock()
        conn.execute = AsyncMock(return_value=result)
        connection_cm = MagicMock()
        connection_cm.__aenter__.return_value = conn
        connection_cm.__aexit__.return_value = False
        pool = MagicMock()
        pool.connection.return_value = connection_cm

        svc = HealthCheckService(
            pool,
            Defaults(),
            transport=httpx.MockTransport(lambda request: httpx.Response(200)),
        )
        results = _by_id(asyncio.run(svc.check_candidates([1, 2], "user-1")))

        assert results[1].healthy is True
        assert results[1].tracked is True
        assert results[2].tracked is False
        assert results[2].healthy is False
        assert results[2].message == "No observability sources and endpoint unreachable"

    def test_database_error_wrapped(self):
        svc = _build_service()
        svc.candidate_repo.list_health_check_targets.side_effect = psycopg.OperationalError("down")
        with pytest.raises(InternalError):
            asyncio.run(svc.check_candidates([1], "user-1"))


# ============================================================================
# ASSESSMENT
# ============================================================================

class TestAssessment:

    def test_404_endpoint_and_tracked_cron_job(self):
        targets = [
            _make_target(1, route_path="/legacy"),
            _make_target(
                2,
                entity_type=EntityType.CRON_JOB,
                application_url=None,
                route_path=None,
                method=None,
                observability_sources={"datadog": "https://dd.example.com"},
            ),
        ]
        svc = _build_service(lambda request: httpx.Response(404), targets)

        report = asyncio.run(svc.check_candidates([1, 2], "user-1"))
        results = _by_id(report)

        endpoint = results[1]
        assert endpoint.reachable is True
        assert endpoint.tracked is False
        assert endpoint.healthy is True
        assert endpoint.status_code == 404
        assert endpoint.message == "Endpoint reachable but no observability tracking"

        cron = results[2]
        assert cron.tracked is True
        assert cron.reachable is True
        assert cron.healthy is True
        assert cron.status_code is None
        assert cron.message == "Endpoint reachable and tracked by observability"

        assert report.summary.to_dict() == {
            "total": 2, "healthy": 2, "unhealthy": 0, "tracked": 1, "reachable": 2,
        }

    def test_http_endpoint_without_url_not_probed(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200)

        svc = _build_service(handler, [_make_target(1, application_url=None)])
        report = asyncio.run(svc.check_candidates([1], "user-1"))

        assert calls == []
        result = report.candidates[0]
        assert result.reachable is False
        assert result.healthy is False

    def test_server_error_with_sources_still_healthy(self):
        targets = [_make_target(1, observability_sources={"grafana": "https://g"})]
        svc = _build_service(lambda request: httpx.Response(503), targets)

        result = asyncio.run(svc.check_candidates([1], "user-1")).candidates[0]
        assert result.reachable is False
        assert result.tracked is True
        assert result.healthy is True
        assert result.message == "Tracked by observability sources"

    def test_summary_is_fold_of_results(self):
        def handler(request):
            return httpx.Response(200 if "ok" in request.url.path else 500)

        targets = [
            _make_target(1, route_path="/ok"),
            _make_target(2, route_path="/broken"),
            _make_target(3, route_path="/broken", observability_sources={"g": "x"}),
            _make_target(4, entity_type=EntityType.WEBSOCKET, application_url=None),
        ]
        svc = _build_service(handler, targets)
        report = asyncio.run(svc.check_candidates([1, 2, 3, 4], "user-1"))

        results = report.candidates
        assert report.summary.total == len(results)
        assert report.summary.healthy == sum(1 for r in results if r.healthy)
        assert report.summary.unhealthy == sum(1 for r in results if not r.healthy)
        assert report.summary.tracked == sum(1 for r in results if r.tracked)
        assert report.summary.reachable == sum(1 for r in results if r.reachable)
        assert all(r.healthy == (r.tracked or r.reachable) for r in results)

    def test_one_failing_probe_does_not_affect_siblings(self):
        def handler(request):
            if request.url.path == "/down":
                raise httpx.ConnectError("Connection refused", request=request)
            return httpx.Response(200)

        targets = [_make_target(1, route_path="/down"), _make_target(2, route_path="/up")]
        svc = _build_service(handler, targets)
        results = _by_id(asyncio.run(svc.check_candidates([1, 2], "user-1")))

        assert results[1].reachable is False
        assert results[1].error == "Connection refused"
        assert results[2].reachable is True

    def test_unexpected_probe_exception_contained(self):
        targets = [_make_target(1), _make_target(2, entity_type=EntityType.CRON_JOB)]
        svc = _build_service(targets=targets)

        with patch(
            "services.health_check_service.probe_endpoint",
            AsyncMock(side_effect=RuntimeError("probe exploded")),
        ):
            report = asyncio.run(svc.check_candidates([1, 2], "user-1"))

        results = _by_id(report)
        assert results[1].reachable is False
        assert results[1].error == "probe exploded"
        assert results[1].message == "No observability sources and endpoint unreachable"
        assert results[2].message == "No observability sources and endpoint unreachable"

    def test_timeouts_run_concurrently(self):
        async def slow(request):
            await asyncio.sleep(5)
            return httpx.Response(200)

        targets = [_make_target(i, route_path=f"/slow/{i}") for i in range(1, 11)]
        svc = _build_service(slow, targets, timeout_seconds=0.2)

        start = time.monotonic()
        report = asyncio.run(svc.check_candidates(list(range(1, 11)), "user-1"))
        elapsed = time.monotonic() - start

        assert report.summary.total == 10
        assert report.summary.healthy == 0
        assert all(r.error == "Connection timeout" for r in report.candidates)
        assert all(
            r.message == "No observability sources and endpoint unreachable"
            for r in report.candidates
        )
        # One timeout, not ten
        assert elapsed < 1.5
