# ============================================================================
# WATCHER REPOSITORY
# ============================================================================
# STATUS: Domain - Watcher reads and schedule writes
# PURPOSE: Database access for the watchers table
# CREATED: 18 OCT 2026
# ============================================================================
"""
Watcher Repository

Watchers are created by the external discovery workflow; this core only
reads them and writes the schedule transition.

Methods taking an explicit `conn` run inside a caller-owned transaction
(the scheduling state machine). All SQL uses psycopg sql.SQL composition
for injection safety.
"""

import logging
from typing import Any, Dict, Optional

from psycopg import AsyncConnection, sql
from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool

from core.contracts import ObservationType, WatcherStatus
from core.models import Watcher
from .database import TABLE_WATCHERS

logger = logging.getLogger(__name__)


class WatcherRepository:
    """Repository for Watcher entities."""

    def __init__(self, pool: AsyncConnectionPool):
        self.pool = pool

    async def get(self, watcher_id: str) -> Optional[Watcher]:
        """Get a watcher by ID."""
        async with self.pool.connection() as conn:
            conn.row_factory = dict_row
            result = await conn.execute(
                sql.SQL("SELECT * FROM {} WHERE watcher_id = %s").format(TABLE_WATCHERS),
                (watcher_id,),
            )
            row = await result.fetchone()
            return self._row_to_model(row) if row else None

    async def get_for_update(
        self, conn: AsyncConnection, watcher_id: str
    ) -> Optional[Watcher]:
        """
        Get a watcher and lock its row until the caller's transaction ends.

        A concurrent caller blocks here until the first transaction commits,
        then reads the already-updated status.
        """
        conn.row_factory = dict_row
        result = await conn.execute(
            sql.SQL("SELECT * FROM {} WHERE watcher_id = %s FOR UPDATE").format(
                TABLE_WATCHERS
            ),
            (watcher_id,),
        )
        row = await result.fetchone()
        return self._row_to_model(row) if row else None

    async def save_schedule(self, conn: AsyncConnection, watcher: Watcher) -> bool:
        """
        Persist the PENDING_SCHEDULE -> SCHEDULED transition.

        The status predicate repeats the state check at write time.

        Returns:
            True if the row was updated, False if it was no longer pending.
        """
        result = await conn.execute(
            sql.SQL("""
                UPDATE {} SET
                    status = %(status)s,
                    observation_type = %(observation_type)s,
                    scan_frequency_minutes = %(scan_frequency_minutes)s,
                    analysis_period_days = %(analysis_period_days)s,
                    next_observation_at = %(next_observation_at)s,
                    updated_at = %(updated_at)s
                WHERE watcher_id = %(watcher_id)s
                  AND status = %(expected_status)s
            """).format(TABLE_WATCHERS),
            {
                "watcher_id": watcher.watcher_id,
                "status": watcher.status,
                "observation_type": (
                    watcher.observation_type.value if watcher.observation_type else None
                ),
                "scan_frequency_minutes": watcher.scan_frequency_minutes,
                "analysis_period_days": watcher.analysis_period_days,
                "next_observation_at": watcher.next_observation_at,
                "updated_at": watcher.updated_at,
                "expected_status": WatcherStatus.PENDING_SCHEDULE.value,
            },
        )

        if result.rowcount == 0:
            logger.warning(
                f"Schedule write for watcher {watcher.watcher_id} matched no "
                f"pending row"
            )
            return False

        logger.debug(
            f"Saved schedule for watcher {watcher.watcher_id} "
            f"(next_observation_at={watcher.next_observation_at})"
        )
        return True

    def _row_to_model(self, row: Dict[str, Any]) -> Watcher:
        """Convert a database row to a Watcher instance."""
        observation_type = row.get("observation_type")
        return Watcher(
            watcher_id=row["watcher_id"],
            watcher_name=row.get("watcher_name"),
            owner_id=row["user_id"],
            status=row.get("status") or WatcherStatus.PENDING_SCHEDULE.value,
            observation_type=ObservationType(observation_type) if observation_type else None,
            scan_frequency_minutes=row.get("scan_frequency_minutes"),
            analysis_period_days=row.get("analysis_period_days"),
            next_observation_at=row.get("next_observation_at"),
            application_url=row.get("application_url"),
            observability_sources=row.get("observability_urls"),
            created_at=row["created_at"],
            updated_at=row.get("updated_at") or row["created_at"],
        )
