# ============================================================================
# BATCH HEALTH CHECK SERVICE
# ============================================================================
# STATUS: Service - Batch health orchestration
# PURPOSE: Validate a batch, load candidates, assess each one concurrently
# CREATED: 18 OCT 2026
# ============================================================================
"""
HealthCheckService

Entry point for on-demand health checks of up to 50 candidates.

Flow:
    1. Validate the request (owner, 1..max ids, integers only)
    2. Load owner-scoped candidates; none found -> NotFoundError
    3. One asyncio task per candidate: resolve observability, probe
       HTTP endpoints, synthesize the verdict
    4. Join all tasks and fold the summary

Read-only against the database. Every task writes only its own result,
and a failure inside one task is contained to that candidate.

Pattern: Constructor injection of AsyncConnectionPool, repos instantiated
in __init__, async methods.
"""

import asyncio
import time
from typing import Any, List, Optional, Sequence

import httpx
import psycopg
from psycopg_pool import AsyncConnectionPool

from core.config import Defaults, get_defaults
from core.errors import InternalError, NotFoundError, ValidationError
from core.logging import ComponentType, get_logger, log_context
from core.models import (
    BatchHealthReport,
    BatchSummary,
    HealthCheckResult,
    HealthCheckTarget,
    ProbeResult,
)
from repositories import CandidateRepository
from services.observability import resolve_observability
from services.reachability import CONNECTION_FAILED, create_probe_client, probe_endpoint
from services.verdict import synthesize_verdict

logger = get_logger(__name__, ComponentType.SERVICE)


class HealthCheckService:
    """Batch health assessment for zombie candidates."""

    def __init__(
        self,
        pool: AsyncConnectionPool,
        defaults: Optional[Defaults] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.pool = pool
        self.defaults = defaults or get_defaults()
        self.candidate_repo = CandidateRepository(pool)
        self._transport = transport

    # ================================================================
    # VALIDATION
    # ================================================================

    def validate_request(self, candidate_ids: Any, owner_id: Any) -> List[int]:
        """
        Validate a batch request and return the de-duplicated ids.

        Raises:
            ValidationError: Missing owner, empty/oversized batch, non-integer ids.
        """
        if not isinstance(owner_id, str) or not owner_id.strip():
            raise ValidationError("Missing owner_id", field="owner_id")

        if not isinstance(candidate_ids, (list, tuple)) or not candidate_ids:
            raise ValidationError(
                "Missing or empty candidate_ids array", field="candidate_ids"
            )

        max_batch = self.defaults.batch.max_batch_size
        if len(candidate_ids) > max_batch:
            raise ValidationError(
                f"Maximum {max_batch} candidates per health check",
                field="candidate_ids",
                value=len(candidate_ids),
            )

        for candidate_id in candidate_ids:
            if isinstance(candidate_id, bool) or not isinstance(candidate_id, int):
                raise ValidationError(
                    "candidate_ids must contain only integers",
                    field="candidate_ids",
                    value=candidate_id,
                )

        return list(dict.fromkeys(candidate_ids))

    # ================================================================
    # BATCH
    # ================================================================

    async def check_candidates(
        self,
        candidate_ids: Sequence[int],
        owner_id: str,
    ) -> BatchHealthReport:
        """
        Assess a batch of candidates.

        Returns:
            BatchHealthReport with one result per resolved candidate
            (unordered) and the summary fold.

        Raises:
            ValidationError: Invalid request.
            NotFoundError: No candidate resolved for this owner.
            InternalError: Database failure during lookup.
        """
        ids = self.validate_request(candidate_ids, owner_id)
        start_time = time.monotonic()

        with log_context(owner_id=owner_id, operation="health_check"):
            try:
                targets = await self.candidate_repo.list_health_check_targets(ids, owner_id)
            except psycopg.Error as e:
                logger.error(f"Candidate lookup failed: {e}")
                raise InternalError(f"Failed to load candidates: {e}") from e

            if not targets:
                raise NotFoundError(
                    "No candidates found for the given IDs",
                    entity="candidate",
                    entity_id=ids,
                )

            if len(targets) < len(ids):
                logger.info(f"Resolved {len(targets)} of {len(ids)} requested candidates")

            async with create_probe_client(self.defaults.probe, self._transport) as client:
                tasks = [
                    asyncio.create_task(self._assess(client, target))
                    for target in targets
                ]
                results = list(await asyncio.gather(*tasks))

            summary = BatchSummary.from_results(results)
            duration_ms = (time.monotonic() - start_time) * 1000
            logger.info(
                f"Health check complete: {summary.healthy}/{summary.total} healthy "
                f"({duration_ms:.0f}ms)"
            )

        return BatchHealthReport(
            summary=summary,
            candidates=results,
            duration_ms=duration_ms,
        )

    async def _assess(
        self,
        client: httpx.AsyncClient,
        target: HealthCheckTarget,
    ) -> HealthCheckResult:
        """Assess one candidate. Never raises."""
        with log_context(candidate_id=target.candidate_id, watcher_id=target.watcher_id):
            signal = resolve_observability(target.observability_sources, target.route_path)

            probe: Optional[ProbeResult] = None
            if target.probe_applicable:
                try:
                    probe = await probe_endpoint(
                        client,
                        target.application_url,
                        target.route_path,
                        target.method,
                        self.defaults.probe,
                    )
                except Exception as e:
                    logger.warning(f"Unexpected probe failure: {e}", exc_info=True)
                    probe = ProbeResult.unreachable(str(e) or CONNECTION_FAILED)

            return synthesize_verdict(target, signal, probe)


__all__ = ["HealthCheckService"]
