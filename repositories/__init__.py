# ============================================================================
# REPOSITORIES MODULE
# ============================================================================
# STATUS: Core - Database access layer
# PURPOSE: Reads and schedule writes for watchers and candidates
# CREATED: 18 OCT 2026
# ============================================================================
"""
Repositories Module

Provides database access for Zombie Watch entities.
Uses psycopg3 async with connection pooling.

Usage:
    from repositories import DatabasePool, WatcherRepository

    async with DatabasePool() as pool:
        watcher_repo = WatcherRepository(pool)
        watcher = await watcher_repo.get(watcher_id)
"""

from .database import DatabasePool, create_pool, get_connection_string
from .watcher_repo import WatcherRepository
from .candidate_repo import CandidateRepository
from .schema import deploy_schema, schema_statements

__all__ = [
    "DatabasePool",
    "create_pool",
    "get_connection_string",
    "WatcherRepository",
    "CandidateRepository",
    "deploy_schema",
    "schema_statements",
]
