# ============================================================================
# REPOSITORY TESTS
# ============================================================================
# STATUS: Tests - Row mapping and write predicates
# PURPOSE: Verify repositories against mocked psycopg connections
# CREATED: 18 OCT 2026
# ============================================================================
"""
Repository Tests

No live database: connections are MagicMocks whose execute() returns a
cursor-like AsyncMock. Checks row -> model mapping, parameters and the
rowcount handling of conditional writes.

Run with:
    pytest tests/test_repositories.py -v
"""

import asyncio
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

from core.contracts import EntityType, ObservationType
from core.models import Candidate, Watcher
from repositories import CandidateRepository, WatcherRepository, deploy_schema, schema_statements


CREATED = datetime(2026, 10, 1, tzinfo=timezone.utc)


# ============================================================================
# HELPERS
# ============================================================================

def _make_result(rows=None, rowcount=0):
    result = MagicMock()
    result.fetchone = AsyncMock(return_value=rows[0] if rows else None)
    result.fetchall = AsyncMock(return_value=rows or [])
    result.rowcount = rowcount
    return result


def _make_conn(result):
    conn = MagicMock()
    conn.execute = AsyncMock(return_value=result)
    return conn


def _make_pool(conn):
    connection_cm = MagicMock()
    connection_cm.__aenter__.return_value = conn
    connection_cm.__aexit__.return_value = False
    pool = MagicMock()
    pool.connection.return_value = connection_cm
    return pool


def _watcher_row(**overrides):
    row = {
        "watcher_id": "w-1",
        "watcher_name": "billing-api",
        "user_id": "user-1",
        "status": "pending_schedule",
        "observation_type": None,
        "scan_frequency_minutes": None,
        "analysis_period_days": None,
        "next_observation_at": None,
        "application_url": "https://billing.example.com",
        "observability_urls": [{"type": "grafana", "url": "https://g"}],
        "created_at": CREATED,
        "updated_at": None,
    }
    row.update(overrides)
    return row


# ============================================================================
# WATCHER REPOSITORY
# ============================================================================

class TestWatcherRepository:

    def test_get_maps_row(self):
        conn = _make_conn(_make_result([_watcher_row()]))
        repo = WatcherRepository(_make_pool(conn))

        watcher = asyncio.run(repo.get("w-1"))

        assert watcher.owner_id == "user-1"
        assert watcher.observability_sources == {"grafana": {"type": "grafana", "url": "https://g"}}
        assert watcher.updated_at == CREATED
        assert conn.execute.await_args[0][1] == ("w-1",)

    def test_get_missing(self):
        repo = WatcherRepository(_make_pool(_make_conn(_make_result([]))))
        assert asyncio.run(repo.get("nope")) is None

    def test_get_for_update_uses_callers_connection(self):
        conn = _make_conn(_make_result([_watcher_row(
            status="scheduled", observation_type="varied",
            scan_frequency_minutes=60, analysis_period_days=30,
        )]))
        repo = WatcherRepository(MagicMock())

        watcher = asyncio.run(repo.get_for_update(conn, "w-1"))

        assert watcher.observation_type == ObservationType.VARIED
        assert watcher.is_scheduled
        repo.pool.connection.assert_not_called()

    def test_save_schedule_returns_false_when_not_pending(self):
        conn = _make_conn(_make_result(rowcount=0))
        repo = WatcherRepository(MagicMock())
        watcher = Watcher(watcher_id="w-1", owner_id="user-1")
        watcher.mark_scheduled(60, 30, ObservationType.UNIFORM)

        assert asyncio.run(repo.save_schedule(conn, watcher)) is False

        params = conn.execute.await_args[0][1]
        assert params["status"] == "scheduled"
        assert params["observation_type"] == "uniform"
        assert params["expected_status"] == "pending_schedule"

    def test_save_schedule_returns_true_on_update(self):
        conn = _make_conn(_make_result(rowcount=1))
        repo = WatcherRepository(MagicMock())
        watcher = Watcher(watcher_id="w-1", owner_id="user-1")
        watcher.mark_scheduled(60, 30, ObservationType.VARIED)

        assert asyncio.run(repo.save_schedule(conn, watcher)) is True


# ============================================================================
# CANDIDATE REPOSITORY
# ============================================================================

class TestCandidateRepository:

    def test_health_check_targets(self):
        rows = [{
            "candidate_id": 7,
            "watcher_id": "w-1",
            "entity_type": "http_endpoint",
            "entity_name": "GET /health",
            "route_path": "/health",
            "method": "GET",
            "application_url": "https://billing.example.com",
            "observability_urls": None,
        }]
        conn = _make_conn(_make_result(rows))
        repo = CandidateRepository(_make_pool(conn))

        targets = asyncio.run(repo.list_health_check_targets([7, 8], "user-1"))

        assert len(targets) == 1
        assert targets[0].entity_type == EntityType.HTTP_ENDPOINT
        assert targets[0].observability_sources == {}
        assert targets[0].probe_applicable
        assert conn.execute.await_args[0][1] == ([7, 8], "user-1")

    def test_health_check_targets_tolerate_bad_sources(self):
        base = {
            "watcher_id": "w-1",
            "entity_type": "http_endpoint",
            "entity_name": "GET /health",
            "route_path": "/health",
            "method": "GET",
            "application_url": "https://billing.example.com",
        }
        rows = [
            dict(base, candidate_id=1, observability_urls={"grafana": "https://g"}),
            dict(base, candidate_id=2,
                 observability_urls='[{"type": "grafana", "url": "https://g"}]'),
            dict(base, candidate_id=3, observability_urls="not json"),
        ]
        repo = CandidateRepository(_make_pool(_make_conn(_make_result(rows))))

        targets = asyncio.run(repo.list_health_check_targets([1, 2, 3], "user-1"))

        assert [t.candidate_id for t in targets] == [1, 2, 3]
        assert list(targets[0].observability_sources) == ["grafana"]
        assert list(targets[1].observability_sources) == ["grafana"]
        assert targets[2].observability_sources == {}

    def test_apply_schedule_defaults_returns_rowcount(self):
        conn = _make_conn(_make_result(rowcount=4))
        repo = CandidateRepository(MagicMock())

        count = asyncio.run(repo.apply_schedule_defaults(conn, "w-1", 15, 14))

        assert count == 4
        assert conn.execute.await_args[0][1] == (15, 14, "w-1")

    def test_list_active_for_watcher(self):
        rows = [{
            "candidate_id": 3,
            "watcher_id": "w-1",
            "entity_type": "cron_job",
            "entity_name": "nightly",
            "route_path": None,
            "method": None,
            "status": "active",
            "scan_frequency_minutes": None,
            "analysis_period_days": 30,
            "discovered_at": CREATED,
            "updated_at": CREATED,
        }]
        conn = _make_conn(_make_result(rows))
        repo = CandidateRepository(_make_pool(conn))

        candidates = asyncio.run(repo.list_active_for_watcher("w-1"))

        assert candidates[0].entity_type == EntityType.CRON_JOB
        assert candidates[0].effective_scan_frequency(60) == 60
        assert conn.execute.await_args[0][1] == ("w-1", "active")

    def test_get_owned_for_update_locks_watcher_row(self):
        rows = [{
            "candidate_id": 3,
            "watcher_id": "w-1",
            "entity_type": "cron_job",
            "entity_name": "nightly",
            "status": "paused",
            "pause_reason": "maintenance",
            "paused_at": CREATED,
            "next_observation_at": None,
            "discovered_at": CREATED,
            "updated_at": CREATED,
        }]
        conn = _make_conn(_make_result(rows))
        repo = CandidateRepository(MagicMock())

        candidate = asyncio.run(repo.get_owned_for_update(conn, 3, "user-1"))

        assert candidate.status == "paused"
        assert candidate.pause_reason == "maintenance"
        query, params = conn.execute.await_args[0]
        assert params == (3, "user-1")
        assert "FOR UPDATE OF w" in query.as_string(None)
        repo.pool.connection.assert_not_called()

    def test_get_owned_for_update_missing(self):
        repo = CandidateRepository(MagicMock())
        conn = _make_conn(_make_result([]))
        assert asyncio.run(repo.get_owned_for_update(conn, 3, "someone-else")) is None

    def test_save_state_checks_previous_status(self):
        conn = _make_conn(_make_result(rowcount=0))
        repo = CandidateRepository(MagicMock())
        candidate = Candidate(candidate_id=3, watcher_id="w-1", entity_type=EntityType.CRON_JOB)
        candidate.pause("maintenance")

        assert asyncio.run(repo.save_state(conn, candidate, "active")) is False

        params = conn.execute.await_args[0][1]
        assert params["status"] == "paused"
        assert params["pause_reason"] == "maintenance"
        assert params["expected_status"] == "active"

    def test_save_state_returns_true_on_update(self):
        conn = _make_conn(_make_result(rowcount=1))
        repo = CandidateRepository(MagicMock())
        candidate = Candidate(candidate_id=3, watcher_id="w-1", entity_type=EntityType.CRON_JOB)
        candidate.customize_schedule(15, 14)

        assert asyncio.run(repo.save_state(conn, candidate, "active")) is True
        assert conn.execute.await_args[0][1]["scan_frequency_minutes"] == 15


# ============================================================================
# SCHEMA
# ============================================================================

class TestSchema:

    def test_statement_order(self):
        rendered = asyncio.run(deploy_schema(MagicMock(), dry_run=True))

        assert len(rendered) == len(schema_statements())
        assert "CREATE SCHEMA IF NOT EXISTS" in rendered[0]
        assert "watchers" in rendered[1]
        assert "zombie_candidates" in rendered[2]
        assert "ON DELETE CASCADE" in rendered[2]
        assert all("IF NOT EXISTS" in stmt for stmt in rendered)

    def test_bounds_in_ddl(self):
        rendered = asyncio.run(deploy_schema(MagicMock(), dry_run=True))
        assert "BETWEEN 5 AND 1440" in rendered[1]
        assert "BETWEEN 7 AND 365" in rendered[1]

    def test_candidate_columns_added_to_existing_tables(self):
        rendered = asyncio.run(deploy_schema(MagicMock(), dry_run=True))
        assert "pause_reason" in rendered[2]
        assert "ALTER TABLE" in rendered[3]
        assert "ADD COLUMN IF NOT EXISTS paused_at" in rendered[3]
