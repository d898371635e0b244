# ============================================================================
# SERVICES MODULE
# ============================================================================
# STATUS: Core - Business logic layer
# PURPOSE: Batch health checks and watcher scheduling
# CREATED: 18 OCT 2026
# ============================================================================
"""
Services Module

Business logic for Zombie Watch.
Services coordinate between repositories and outbound probes.

Usage:
    from services import HealthCheckService, ScheduleService

    health_service = HealthCheckService(pool)
    report = await health_service.check_candidates([1, 2, 3], owner_id="u-1")
"""

from .health_check_service import HealthCheckService
from .schedule_service import ScheduleService

__all__ = [
    "HealthCheckService",
    "ScheduleService",
]
