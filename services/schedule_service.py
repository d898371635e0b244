# ============================================================================
# WATCHER SCHEDULE SERVICE
# ============================================================================
# STATUS: Service - Watcher scheduling state machine
# PURPOSE: One-shot watcher scheduling, schedule reads, per-candidate actions
# CREATED: 18 OCT 2026
# ============================================================================
"""
ScheduleService

Activates periodic observation of a watcher. The transition is legal
exactly once: a second schedule() against the same watcher fails with
InvalidStateError and leaves the first call's values in place.

The watcher row is locked (SELECT ... FOR UPDATE) for the whole
transaction, so two concurrent calls serialize and the second one sees
status=scheduled. Any failure rolls back the watcher and its candidates
together.

update_candidate() lets the owner of a varied watcher give one candidate
its own cadence, or pause, resume or opt out a single candidate. It takes
the same watcher row lock, so it never interleaves with schedule().

Pattern: Constructor injection of AsyncConnectionPool, repos instantiated
in __init__, async methods.
"""

from datetime import datetime, timezone
from typing import Any, Optional

import psycopg
from psycopg_pool import AsyncConnectionPool

from core.config import ScheduleDefaults, get_defaults
from core.contracts import CandidateAction, ObservationType, WatcherStatus
from core.errors import InternalError, InvalidStateError, NotFoundError, ValidationError
from core.logging import ComponentType, get_logger, log_context
from core.models import (
    CandidateScheduleOutcome,
    CandidateScheduleSetting,
    ScheduleOutcome,
    WatcherSchedule,
)
from repositories import CandidateRepository, WatcherRepository

logger = get_logger(__name__, ComponentType.SERVICE)

MAX_PAUSE_REASON_LENGTH = 500


def _validate_bound(field: str, value: Any, low: int, high: int, unit: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be an integer", field=field, value=value)
    if value < low or value > high:
        raise ValidationError(
            f"{field} must be between {low} and {high} {unit}",
            field=field,
            value=value,
        )
    return value


class ScheduleService:
    """Scheduling state machine for watchers and their candidates."""

    def __init__(
        self,
        pool: AsyncConnectionPool,
        bounds: Optional[ScheduleDefaults] = None,
    ):
        self.pool = pool
        self.bounds = bounds or get_defaults().schedule
        self.watcher_repo = WatcherRepository(pool)
        self.candidate_repo = CandidateRepository(pool)

    def validate(
        self,
        scan_frequency_minutes: Any,
        analysis_period_days: Any,
        for_all_services: Any,
    ) -> None:
        """
        Check scheduling inputs before any state is touched.

        Raises:
            ValidationError: Naming the violated constraint.
        """
        b = self.bounds
        _validate_bound(
            "scan_frequency_minutes", scan_frequency_minutes,
            b.min_scan_frequency_minutes, b.max_scan_frequency_minutes, "minutes",
        )
        _validate_bound(
            "analysis_period_days", analysis_period_days,
            b.min_analysis_period_days, b.max_analysis_period_days, "days",
        )
        if not isinstance(for_all_services, bool):
            raise ValidationError(
                "for_all_services must be a boolean",
                field="for_all_services",
                value=for_all_services,
            )

    # ================================================================
    # SCHEDULE
    # ================================================================

    async def schedule(
        self,
        watcher_id: str,
        scan_frequency_minutes: int,
        analysis_period_days: int,
        for_all_services: bool,
        now: Optional[datetime] = None,
    ) -> ScheduleOutcome:
        """
        Move a watcher from PENDING_SCHEDULE to SCHEDULED.

        When for_all_services is False the watcher becomes "varied" and its
        frequency/period are copied onto every candidate so they can be
        customized later. "uniform" watchers leave candidates untouched.

        Raises:
            ValidationError: Out-of-bound or non-integer input.
            NotFoundError: Unknown watcher.
            InvalidStateError: Watcher is not pending_schedule.
            InternalError: Database failure (nothing is persisted).
        """
        self.validate(scan_frequency_minutes, analysis_period_days, for_all_services)
        observation_type = ObservationType.for_all_services(for_all_services)
        now = now or datetime.now(timezone.utc)

        with log_context(watcher_id=watcher_id, operation="schedule"):
            try:
                async with self.pool.connection() as conn:
                    async with conn.transaction():
                        watcher = await self.watcher_repo.get_for_update(conn, watcher_id)
                        if watcher is None:
                            raise NotFoundError(
                                f"Watcher {watcher_id} not found",
                                entity="watcher",
                                entity_id=watcher_id,
                            )

                        watcher.mark_scheduled(
                            scan_frequency_minutes,
                            analysis_period_days,
                            observation_type,
                            now=now,
                        )

                        if not await self.watcher_repo.save_schedule(conn, watcher):
                            raise InvalidStateError(
                                f"Watcher {watcher_id} is no longer awaiting a schedule",
                                required_state=WatcherStatus.PENDING_SCHEDULE.value,
                            )

                        candidates_updated = 0
                        if observation_type == ObservationType.VARIED:
                            candidates_updated = await self.candidate_repo.apply_schedule_defaults(
                                conn,
                                watcher_id,
                                scan_frequency_minutes,
                                analysis_period_days,
                            )
            except psycopg.Error as e:
                logger.error(f"Schedule transaction failed: {e}")
                raise InternalError(f"Failed to schedule watcher {watcher_id}: {e}") from e

            logger.info(
                f"Watcher {watcher_id} scheduled ({observation_type.value}, "
                f"every {scan_frequency_minutes} min, {analysis_period_days} days, "
                f"{candidates_updated} candidates updated)"
            )

        return ScheduleOutcome(
            watcher_id=watcher_id,
            status=watcher.status,
            observation_type=observation_type,
            scan_frequency_minutes=scan_frequency_minutes,
            analysis_period_days=analysis_period_days,
            next_observation_at=watcher.next_observation_at,
            candidates_updated=candidates_updated,
        )

    # ================================================================
    # READ
    # ================================================================

    async def get_schedule(self, watcher_id: str) -> WatcherSchedule:
        """
        Current schedule of a watcher.

        For varied watchers, also lists active candidates ordered by entity
        type then name. A candidate without its own value shows the
        watcher's.

        Raises:
            NotFoundError: Unknown watcher.
            InternalError: Database failure.
        """
        try:
            watcher = await self.watcher_repo.get(watcher_id)
            if watcher is None:
                raise NotFoundError(
                    f"Watcher {watcher_id} not found",
                    entity="watcher",
                    entity_id=watcher_id,
                )

            settings = None
            if watcher.observation_type == ObservationType.VARIED:
                candidates = await self.candidate_repo.list_active_for_watcher(watcher_id)
                settings = [
                    CandidateScheduleSetting(
                        candidate_id=c.candidate_id,
                        entity_type=c.entity_type,
                        entity_name=c.entity_name,
                        scan_frequency_minutes=c.effective_scan_frequency(
                            watcher.scan_frequency_minutes
                        ),
                        analysis_period_days=c.effective_analysis_period(
                            watcher.analysis_period_days
                        ),
                    )
                    for c in candidates
                ]
        except psycopg.Error as e:
            logger.error(f"Schedule read for watcher {watcher_id} failed: {e}")
            raise InternalError(f"Failed to read schedule of watcher {watcher_id}: {e}") from e

        return WatcherSchedule(
            watcher_id=watcher.watcher_id,
            watcher_name=watcher.watcher_name,
            status=watcher.status,
            observation_type=watcher.observation_type,
            scan_frequency_minutes=watcher.scan_frequency_minutes,
            analysis_period_days=watcher.analysis_period_days,
            next_observation_at=watcher.next_observation_at,
            candidate_settings=settings,
        )

    # ================================================================
    # PER-CANDIDATE
    # ================================================================

    def validate_candidate_request(
        self,
        candidate_id: Any,
        owner_id: Any,
        action: Any,
        scan_frequency_minutes: Any = None,
        analysis_period_days: Any = None,
        pause_reason: Any = None,
    ) -> CandidateAction:
        """
        Check a per-candidate request before any state is touched.

        Frequency and period are only required (and checked) for the
        schedule action; the other actions ignore them.

        Returns:
            The parsed action
        """
        if isinstance(candidate_id, bool) or not isinstance(candidate_id, int) or candidate_id < 1:
            raise ValidationError(
                "candidate_id must be a positive integer",
                field="candidate_id",
                value=candidate_id,
            )
        if not isinstance(owner_id, str) or not owner_id.strip():
            raise ValidationError("owner_id is required", field="owner_id")

        try:
            parsed = CandidateAction(action)
        except ValueError:
            allowed = ", ".join(a.value for a in CandidateAction)
            raise ValidationError(
                f"action must be one of: {allowed}", field="action", value=action
            ) from None

        if pause_reason is not None and (
            not isinstance(pause_reason, str) or len(pause_reason) > MAX_PAUSE_REASON_LENGTH
        ):
            raise ValidationError(
                f"pause_reason must be a string of at most {MAX_PAUSE_REASON_LENGTH} characters",
                field="pause_reason",
            )

        if parsed == CandidateAction.SCHEDULE:
            for field, value in (
                ("scan_frequency_minutes", scan_frequency_minutes),
                ("analysis_period_days", analysis_period_days),
            ):
                if value is None:
                    raise ValidationError(
                        f"{field} is required for action '{parsed.value}'", field=field
                    )
            b = self.bounds
            _validate_bound(
                "scan_frequency_minutes", scan_frequency_minutes,
                b.min_scan_frequency_minutes, b.max_scan_frequency_minutes, "minutes",
            )
            _validate_bound(
                "analysis_period_days", analysis_period_days,
                b.min_analysis_period_days, b.max_analysis_period_days, "days",
            )
        return parsed

    async def update_candidate(
        self,
        candidate_id: int,
        owner_id: str,
        action: str = CandidateAction.SCHEDULE.value,
        scan_frequency_minutes: Optional[int] = None,
        analysis_period_days: Optional[int] = None,
        pause_reason: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> CandidateScheduleOutcome:
        """
        Apply one owner action to a single candidate.

        schedule gives the candidate its own cadence and is only legal
        under a watcher scheduled as "varied" (uniform watchers own the
        cadence of every candidate). pause, resume and opt_out only move
        the candidate's status.

        Raises:
            ValidationError: Malformed request or out-of-bound values.
            NotFoundError: Candidate unknown or owned by someone else.
            InvalidStateError: Action not legal from the current status,
                or schedule on a watcher that is not varied.
            InternalError: Database failure (nothing is persisted).
        """
        parsed = self.validate_candidate_request(
            candidate_id, owner_id, action,
            scan_frequency_minutes, analysis_period_days, pause_reason,
        )
        now = now or datetime.now(timezone.utc)

        with log_context(candidate_id=candidate_id, owner_id=owner_id,
                         operation=f"candidate_{parsed.value}"):
            try:
                async with self.pool.connection() as conn:
                    async with conn.transaction():
                        candidate = await self.candidate_repo.get_owned_for_update(
                            conn, candidate_id, owner_id
                        )
                        if candidate is None:
                            raise NotFoundError(
                                f"Candidate {candidate_id} not found",
                                entity="candidate",
                                entity_id=candidate_id,
                            )
                        watcher = await self.watcher_repo.get_for_update(
                            conn, candidate.watcher_id
                        )
                        previous_status = candidate.status

                        if parsed == CandidateAction.SCHEDULE:
                            observation_type = watcher.observation_type if watcher else None
                            if observation_type != ObservationType.VARIED:
                                raise InvalidStateError(
                                    f"Watcher {candidate.watcher_id} is not scheduled as "
                                    f"'{ObservationType.VARIED.value}'; its candidates "
                                    f"follow the watcher schedule",
                                    current_state=observation_type.value if observation_type else None,
                                    required_state=ObservationType.VARIED.value,
                                )
                            candidate.customize_schedule(
                                scan_frequency_minutes, analysis_period_days, now=now
                            )
                        elif parsed == CandidateAction.PAUSE:
                            candidate.pause(pause_reason, now=now)
                        elif parsed == CandidateAction.RESUME:
                            candidate.resume(
                                watcher.scan_frequency_minutes if watcher else None, now=now
                            )
                        else:
                            candidate.opt_out(pause_reason, now=now)

                        if not await self.candidate_repo.save_state(
                            conn, candidate, previous_status
                        ):
                            raise InvalidStateError(
                                f"Candidate {candidate_id} changed while being updated",
                                required_state=previous_status,
                            )
            except psycopg.Error as e:
                logger.error(f"Candidate {parsed.value} transaction failed: {e}")
                raise InternalError(f"Failed to update candidate {candidate_id}: {e}") from e

            logger.info(f"Candidate {candidate_id} {parsed.value}: now '{candidate.status}'")

        return CandidateScheduleOutcome(
            candidate_id=candidate.candidate_id,
            watcher_id=candidate.watcher_id,
            action=parsed,
            status=candidate.status,
            scan_frequency_minutes=candidate.scan_frequency_minutes,
            analysis_period_days=candidate.analysis_period_days,
            next_observation_at=candidate.next_observation_at,
            pause_reason=candidate.pause_reason,
        )


__all__ = ["ScheduleService"]
