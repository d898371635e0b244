#!/usr/bin/env python
# ============================================================================
# SCHEMA DEPLOYMENT SCRIPT
# ============================================================================
# PURPOSE: Deploy the zombiewatch schema to PostgreSQL
# USAGE:
#   python scripts/deploy_schema.py --dry-run    # Preview SQL
#   python scripts/deploy_schema.py              # Execute deployment
# ============================================================================

import sys
import os
import argparse
import asyncio
import logging

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from repositories import DatabasePool, deploy_schema, schema_statements
from repositories.database import SCHEMA, get_connection_string, mask_conninfo


async def _deploy(connection_string: str) -> int:
    async with DatabasePool(min_size=1, max_size=1, connection_string=connection_string) as pool:
        statements = await deploy_schema(pool)
    return len(statements)


def main():
    parser = argparse.ArgumentParser(
        description="Deploy zombiewatch schema to PostgreSQL",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/deploy_schema.py --dry-run     # Preview DDL without executing
  python scripts/deploy_schema.py               # Deploy schema

Environment Variables:
  DATABASE_URL          Full PostgreSQL connection string
  POSTGRES_HOST         Database host (default: localhost)
  POSTGRES_DB           Database name (default: postgres)
  POSTGRES_USER         Database user (default: postgres)
  POSTGRES_PASSWORD     Database password
  POSTGRES_PORT         Database port (default: 5432)
  POSTGRES_SSLMODE      SSL mode (default: prefer)
        """
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print DDL without executing"
    )
    parser.add_argument(
        "--connection",
        type=str,
        help="PostgreSQL connection string (overrides environment)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    print("=" * 70)
    print("ZOMBIE WATCH - Schema Deployment")
    print("=" * 70)

    if args.dry_run:
        print(f"Schema: {SCHEMA}")
        print("Mode: DRY RUN")
        print("=" * 70)
        for stmt in schema_statements():
            print(stmt.as_string(None).strip() + ";\n")
        return

    connection_string = args.connection or get_connection_string()
    print(f"Target: {mask_conninfo(connection_string)}")
    print(f"Schema: {SCHEMA}")
    print("Mode: EXECUTE")
    print("=" * 70)

    try:
        count = asyncio.run(_deploy(connection_string))
    except Exception as e:
        print(f"Deployment failed: {e}")
        sys.exit(1)

    print(f"Deployment completed successfully ({count} statements)")
    print("=" * 70)


if __name__ == "__main__":
    main()
