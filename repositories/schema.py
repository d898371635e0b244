# ============================================================================
# SCHEMA DDL
# ============================================================================
# STATUS: Core - Table bootstrap for local and test databases
# PURPOSE: Idempotent DDL for the zombiewatch schema
# CREATED: 18 OCT 2026
# EXPORTS: schema_statements, deploy_schema
# DEPENDENCIES: psycopg
# ============================================================================
"""
Schema DDL

The production tables are owned by the discovery workflow's migrations.
These statements create a compatible copy (same column names) so the
service can run against an empty database. Every statement is
IF NOT EXISTS / OR REPLACE, so deploying twice is harmless.

All statements are psycopg.sql.Composed objects; no string concatenation.
"""

import logging
from typing import List

from psycopg import sql
from psycopg_pool import AsyncConnectionPool

from .database import SCHEMA

logger = logging.getLogger(__name__)


def _create_watchers() -> sql.Composed:
    return sql.SQL("""
        CREATE TABLE IF NOT EXISTS {schema}.watchers (
            watcher_id VARCHAR(255) PRIMARY KEY,
            watcher_name VARCHAR(500),
            user_id VARCHAR(255) NOT NULL,
            status VARCHAR(50) NOT NULL DEFAULT 'pending_schedule',
            observation_type VARCHAR(20),
            scan_frequency_minutes INTEGER
                CHECK (scan_frequency_minutes BETWEEN 5 AND 1440),
            analysis_period_days INTEGER
                CHECK (analysis_period_days BETWEEN 7 AND 365),
            next_observation_at TIMESTAMPTZ,
            application_url TEXT,
            observability_urls JSONB NOT NULL DEFAULT '{{}}'::jsonb,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """).format(schema=sql.Identifier(SCHEMA))


def _create_candidates() -> sql.Composed:
    return sql.SQL("""
        CREATE TABLE IF NOT EXISTS {schema}.zombie_candidates (
            candidate_id SERIAL PRIMARY KEY,
            watcher_id VARCHAR(255) NOT NULL
                REFERENCES {schema}.watchers (watcher_id) ON DELETE CASCADE,
            entity_type VARCHAR(50) NOT NULL,
            entity_name VARCHAR(500),
            route_path TEXT,
            method VARCHAR(16),
            status VARCHAR(20) NOT NULL DEFAULT 'active',
            scan_frequency_minutes INTEGER
                CHECK (scan_frequency_minutes BETWEEN 5 AND 1440),
            analysis_period_days INTEGER
                CHECK (analysis_period_days BETWEEN 7 AND 365),
            next_observation_at TIMESTAMPTZ,
            pause_reason VARCHAR(500),
            paused_at TIMESTAMPTZ,
            discovered_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """).format(schema=sql.Identifier(SCHEMA))


def _upgrade_candidates() -> sql.Composed:
    """Columns added after the first release of the candidates table."""
    return sql.SQL("""
        ALTER TABLE {schema}.zombie_candidates
            ADD COLUMN IF NOT EXISTS next_observation_at TIMESTAMPTZ,
            ADD COLUMN IF NOT EXISTS pause_reason VARCHAR(500),
            ADD COLUMN IF NOT EXISTS paused_at TIMESTAMPTZ
    """).format(schema=sql.Identifier(SCHEMA))


def _index(table: str, columns: List[str]) -> sql.Composed:
    name = f"idx_{table}_{'_'.join(columns)}"
    return sql.SQL("CREATE INDEX IF NOT EXISTS {name} ON {schema}.{table} ({columns})").format(
        name=sql.Identifier(name),
        schema=sql.Identifier(SCHEMA),
        table=sql.Identifier(table),
        columns=sql.SQL(", ").join(sql.Identifier(c) for c in columns),
    )


def schema_statements() -> List[sql.Composed]:
    """All DDL statements, in execution order."""
    return [
        sql.SQL("CREATE SCHEMA IF NOT EXISTS {}").format(sql.Identifier(SCHEMA)),
        _create_watchers(),
        _create_candidates(),
        _upgrade_candidates(),
        _index("watchers", ["user_id"]),
        _index("watchers", ["status"]),
        _index("zombie_candidates", ["watcher_id", "status"]),
    ]


async def deploy_schema(pool: AsyncConnectionPool, dry_run: bool = False) -> List[str]:
    """
    Create the schema, tables and indexes in one transaction.

    Args:
        pool: Open connection pool
        dry_run: Render the statements without executing them

    Returns:
        Rendered SQL of every statement
    """
    statements = schema_statements()

    if dry_run:
        return [stmt.as_string(None) for stmt in statements]

    rendered: List[str] = []
    async with pool.connection() as conn:
        async with conn.transaction():
            for stmt in statements:
                rendered.append(stmt.as_string(conn))
                await conn.execute(stmt)

    logger.info(f"Deployed schema '{SCHEMA}' ({len(statements)} statements)")
    return rendered


__all__ = ["schema_statements", "deploy_schema"]
