"""
Database connectivity check.

Opens a dedicated connection (not from the pool) so the check still reports
something useful when the pool itself cannot be created.
"""

from __future__ import annotations

import logging
from typing import Any

import asyncpg

from core.db import DatabaseSettings

logger = logging.getLogger(__name__)

REQUIRED_TABLES = ("menu_item", "order_item")
CHECK_TIMEOUT_S = 10.0


def describe_failure(exc: BaseException, settings: DatabaseSettings) -> tuple[str, str]:
    """
    Return (message, error_code) for a failed connectivity check.
    """
    config = settings.public_config()
    if isinstance(exc, ConnectionRefusedError):
        return (
            f"Connection refused. Make sure PostgreSQL is running on {config['host']}:{config['port']}",
            "ECONNREFUSED",
        )
    if isinstance(exc, asyncpg.InvalidPasswordError):
        return "Access denied. Check your username and password", str(exc.sqlstate)
    if isinstance(exc, asyncpg.InvalidCatalogNameError):
        return f"Database '{config['database']}' does not exist", str(exc.sqlstate)
    code = getattr(exc, "sqlstate", None) or type(exc).__name__
    return str(exc) or "Unknown error", str(code)


async def check_database(settings: DatabaseSettings) -> dict[str, Any]:
    conn = await asyncpg.connect(**{**settings.connect_kwargs(), "timeout": CHECK_TIMEOUT_S})
    try:
        await conn.fetchval("SELECT 1")
        rows = await conn.fetch(
            """
            SELECT table_name
            FROM information_schema.tables
            WHERE table_schema = 'public'
            ORDER BY table_name ASC
            """
        )
    finally:
        await conn.close()

    tables = [str(row["table_name"]) for row in rows]
    missing = [name for name in REQUIRED_TABLES if name not in tables]
    logger.info("db_check_ok tables=%s missing=%s", len(tables), missing)
    return {
        "database": settings.public_config()["database"],
        "tables": tables,
        "missing_tables": missing,
    }
