"""
Async database access helpers (raw SQL) using asyncpg.

The pool is owned by a `Database` instance. FastAPI constructs one in the
lifespan handler (see `api/main.py`), keeps it on `app.state.db` and closes
it on shutdown. Repository functions receive it explicitly.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg
from fastapi import Request

logger = logging.getLogger(__name__)


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


@dataclass(frozen=True)
class DatabaseSettings:
    host: str = "localhost"
    port: int = 5432
    user: str = "postgres"
    password: str = ""
    database: str = "menu"
    dsn: str | None = None
    min_size: int = 1
    max_size: int = 10
    connect_timeout: float = 60.0
    command_timeout: float = 30.0

    @classmethod
    def from_env(cls) -> DatabaseSettings:
        url = os.environ.get("DATABASE_URL", "").strip()
        max_size = _env_int("DB_POOL_MAX", _env_int("DB_CONNECTION_LIMIT", 10))
        return cls(
            host=os.environ.get("DB_HOST", "").strip() or "localhost",
            port=_env_int("DB_PORT", 5432),
            user=os.environ.get("DB_USER", "").strip() or "postgres",
            password=os.environ.get("DB_PASSWORD", ""),
            database=os.environ.get("DB_NAME", "").strip() or "menu",
            dsn=_sanitize_database_url(url) if url else None,
            min_size=max(0, min(_env_int("DB_POOL_MIN", 1), max_size)),
            max_size=max(1, max_size),
            connect_timeout=float(_env_int("DB_CONNECT_TIMEOUT", 60)),
            command_timeout=float(_env_int("DB_COMMAND_TIMEOUT", 30)),
        )

    def connect_kwargs(self) -> dict[str, Any]:
        if self.dsn:
            return {"dsn": self.dsn, "timeout": self.connect_timeout}
        return {
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "password": self.password,
            "database": self.database,
            "timeout": self.connect_timeout,
        }

    def public_config(self) -> dict[str, Any]:
        """
        Connection parameters that are safe to log or return to an operator.
        """
        if self.dsn:
            parts = urlsplit(self.dsn)
            return {
                "host": parts.hostname,
                "port": parts.port,
                "database": parts.path.lstrip("/") or None,
                "user": parts.username,
            }
        return {
            "host": self.host,
            "port": self.port,
            "database": self.database,
            "user": self.user,
        }


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


def _affected_rows(status: str) -> int:
    # asyncpg returns the command tag, e.g. "UPDATE 1" or "INSERT 0 1".
    try:
        return int((status or "").rsplit(" ", 1)[-1])
    except ValueError:
        return 0


class Database:
    def __init__(self, settings: DatabaseSettings) -> None:
        self.settings = settings
        self._pool: asyncpg.Pool | None = None

    async def connect(self) -> None:
        if self._pool is not None:
            return None
        logger.info("db_pool_init %s", self.settings.public_config())
        self._pool = await asyncpg.create_pool(
            min_size=self.settings.min_size,
            max_size=self.settings.max_size,
            command_timeout=self.settings.command_timeout,
            **self.settings.connect_kwargs(),
        )

    async def close(self) -> None:
        if self._pool is None:
            return None
        await self._pool.close()
        self._pool = None
        logger.info("db_pool_closed")

    @property
    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise RuntimeError("DB pool is not initialized. Call connect() on startup.")
        return self._pool

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        """
        Run a query and return a single row as a dict (or None).
        """
        row = await self.pool.fetchrow(sql, *args)
        return _record_to_dict(row) if row is not None else None

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        """
        Run a query and return all rows as a list of dicts.
        """
        rows = await self.pool.fetch(sql, *args)
        return [_record_to_dict(r) for r in rows]

    async def execute(self, sql: str, *args: Any) -> int:
        """
        Run a statement (INSERT/UPDATE/DELETE/DDL) and return the affected row count.
        """
        status = await self.pool.execute(sql, *args)
        return _affected_rows(status)


def get_db(request: Request) -> Database:
    return request.app.state.db
