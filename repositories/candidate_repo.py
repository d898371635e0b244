# ============================================================================
# CANDIDATE REPOSITORY
# ============================================================================
# STATUS: Domain - Candidate reads and schedule propagation
# PURPOSE: Database access for the zombie_candidates table
# CREATED: 18 OCT 2026
# ============================================================================
"""
Candidate Repository

Candidates are written by the external discovery workflow. This core:
- reads owner-scoped candidate+watcher rows for batch health checks
- copies schedule defaults onto candidates inside the schedule transaction
- lists active candidates' own settings for the schedule view
- applies one owner action (schedule, pause, resume, opt out) to a candidate
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from psycopg import AsyncConnection, sql
from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool

from core.contracts import CandidateStatus, EntityType
from core.models import Candidate, HealthCheckTarget
from core.models.watcher import normalize_sources
from .database import TABLE_CANDIDATES, TABLE_WATCHERS

logger = logging.getLogger(__name__)


class CandidateRepository:
    """Repository for Candidate entities."""

    def __init__(self, pool: AsyncConnectionPool):
        self.pool = pool

    async def list_health_check_targets(
        self,
        candidate_ids: Sequence[int],
        owner_id: str,
    ) -> List[HealthCheckTarget]:
        """
        Load candidates joined with their watcher, scoped to one owner.

        Ids that do not exist or belong to another owner are simply absent
        from the result.
        """
        async with self.pool.connection() as conn:
            conn.row_factory = dict_row
            result = await conn.execute(
                sql.SQL("""
                    SELECT
                        c.candidate_id, c.watcher_id, c.entity_type, c.entity_name,
                        c.route_path, c.method,
                        w.application_url, w.observability_urls
                    FROM {} c
                    JOIN {} w ON c.watcher_id = w.watcher_id
                    WHERE c.candidate_id = ANY(%s) AND w.user_id = %s
                """).format(TABLE_CANDIDATES, TABLE_WATCHERS),
                (list(candidate_ids), owner_id),
            )
            rows = await result.fetchall()
            return [self._row_to_target(row) for row in rows]

    async def apply_schedule_defaults(
        self,
        conn: AsyncConnection,
        watcher_id: str,
        scan_frequency_minutes: int,
        analysis_period_days: int,
    ) -> int:
        """
        Copy the watcher schedule onto every candidate it owns.

        Runs on the caller's connection so it commits or rolls back together
        with the watcher status change.

        Returns:
            Number of candidates updated
        """
        result = await conn.execute(
            sql.SQL("""
                UPDATE {} SET
                    scan_frequency_minutes = %s,
                    analysis_period_days = %s,
                    updated_at = NOW()
                WHERE watcher_id = %s
            """).format(TABLE_CANDIDATES),
            (scan_frequency_minutes, analysis_period_days, watcher_id),
        )
        count = result.rowcount
        logger.debug(f"Propagated schedule to {count} candidates of watcher {watcher_id}")
        return count

    async def list_active_for_watcher(self, watcher_id: str) -> List[Candidate]:
        """List active candidates of a watcher, ordered by entity type then name."""
        async with self.pool.connection() as conn:
            conn.row_factory = dict_row
            result = await conn.execute(
                sql.SQL("""
                    SELECT * FROM {}
                    WHERE watcher_id = %s AND status = %s
                    ORDER BY entity_type, entity_name
                """).format(TABLE_CANDIDATES),
                (watcher_id, CandidateStatus.ACTIVE.value),
            )
            rows = await result.fetchall()
            return [self._row_to_model(row) for row in rows]

    async def get_owned_for_update(
        self,
        conn: AsyncConnection,
        candidate_id: int,
        owner_id: str,
    ) -> Optional[Candidate]:
        """
        Get one of the owner's candidates and lock its watcher row.

        The watcher row is the lock the watcher schedule transition takes,
        so per-candidate changes and watcher scheduling never interleave.
        """
        conn.row_factory = dict_row
        result = await conn.execute(
            sql.SQL("""
                SELECT c.*
                FROM {} c
                JOIN {} w ON c.watcher_id = w.watcher_id
                WHERE c.candidate_id = %s AND w.user_id = %s
                FOR UPDATE OF w
            """).format(TABLE_CANDIDATES, TABLE_WATCHERS),
            (candidate_id, owner_id),
        )
        row = await result.fetchone()
        return self._row_to_model(row) if row else None

    async def save_state(
        self,
        conn: AsyncConnection,
        candidate: Candidate,
        expected_status: str,
    ) -> bool:
        """
        Persist a candidate action.

        The status predicate repeats the state check at write time.

        Returns:
            True if the row was updated, False if its status had changed.
        """
        result = await conn.execute(
            sql.SQL("""
                UPDATE {} SET
                    status = %(status)s,
                    scan_frequency_minutes = %(scan_frequency_minutes)s,
                    analysis_period_days = %(analysis_period_days)s,
                    next_observation_at = %(next_observation_at)s,
                    pause_reason = %(pause_reason)s,
                    paused_at = %(paused_at)s,
                    updated_at = %(updated_at)s
                WHERE candidate_id = %(candidate_id)s
                  AND status = %(expected_status)s
            """).format(TABLE_CANDIDATES),
            {
                "candidate_id": candidate.candidate_id,
                "status": candidate.status,
                "scan_frequency_minutes": candidate.scan_frequency_minutes,
                "analysis_period_days": candidate.analysis_period_days,
                "next_observation_at": candidate.next_observation_at,
                "pause_reason": candidate.pause_reason,
                "paused_at": candidate.paused_at,
                "updated_at": candidate.updated_at,
                "expected_status": expected_status,
            },
        )

        if result.rowcount == 0:
            logger.warning(
                f"State write for candidate {candidate.candidate_id} matched no "
                f"row in status '{expected_status}'"
            )
            return False

        logger.debug(f"Candidate {candidate.candidate_id} now '{candidate.status}'")
        return True

    def _row_to_target(self, row: Dict[str, Any]) -> HealthCheckTarget:
        """Convert a joined row to a HealthCheckTarget."""
        return HealthCheckTarget(
            candidate_id=row["candidate_id"],
            watcher_id=row["watcher_id"],
            entity_type=EntityType(row["entity_type"]),
            entity_name=row.get("entity_name"),
            route_path=row.get("route_path"),
            method=row.get("method"),
            application_url=row.get("application_url"),
            observability_sources=normalize_sources(row.get("observability_urls")),
        )

    def _row_to_model(self, row: Dict[str, Any]) -> Candidate:
        """Convert a database row to a Candidate instance."""
        return Candidate(
            candidate_id=row["candidate_id"],
            watcher_id=row["watcher_id"],
            entity_type=EntityType(row["entity_type"]),
            entity_name=row.get("entity_name"),
            route_path=row.get("route_path"),
            method=row.get("method"),
            status=row.get("status") or CandidateStatus.ACTIVE.value,
            scan_frequency_minutes=row.get("scan_frequency_minutes"),
            analysis_period_days=row.get("analysis_period_days"),
            next_observation_at=row.get("next_observation_at"),
            pause_reason=row.get("pause_reason"),
            paused_at=row.get("paused_at"),
            discovered_at=row["discovered_at"],
            updated_at=row.get("updated_at") or row["discovered_at"],
        )
