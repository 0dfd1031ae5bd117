"""
Async database access helpers (raw SQL) using asyncpg.

`Database` owns the connection pool. FastAPI connects it on startup and
closes it on shutdown (see `api/main.py`); handlers receive it through a
dependency instead of importing a module global.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import asyncio
import logging
import os
import ssl
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg

from . import config
from .errors import StoreError

logger = logging.getLogger(__name__)

# asyncpg and the OS raise these for connectivity and execution failures.
STORE_EXCEPTIONS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError)


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url() -> str:
    url = os.environ.get("DATABASE_URL", "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    return _sanitize_database_url(url)


def ssl_context() -> ssl.SSLContext | bool:
    """
    Production talks TLS to the store but does not verify the server cert.
    """
    if not config.is_production():
        return False
    ctx = ssl.create_default_context()
    ctx.check_hostname = False
    ctx.verify_mode = ssl.CERT_NONE
    return ctx


def affected_rows(status: str) -> int:
    """
    Parse the row count out of a command tag such as "DELETE 1" or "INSERT 0 1".
    """
    tail = (status or "").rsplit(" ", 1)[-1]
    try:
        return int(tail)
    except ValueError:
        return 0


class Database:
    def __init__(self, dsn: str | None = None) -> None:
        self._dsn = dsn
        self._pool: asyncpg.Pool | None = None

    @property
    def is_connected(self) -> bool:
        return self._pool is not None

    async def connect(self) -> None:
        """
        Create the pool and prove it works with one acquire/release.

        Raises StoreError when the store cannot be reached.
        """
        if self._pool is not None:
            return None
        dsn = self._dsn or database_url()
        try:
            pool = await asyncpg.create_pool(
                dsn=dsn,
                min_size=config.pool_min_size(),
                max_size=config.pool_max_size(),
                command_timeout=config.command_timeout(),
                ssl=ssl_context(),
            )
            async with pool.acquire() as conn:
                await conn.execute("SELECT 1")
        except STORE_EXCEPTIONS as exc:
            raise StoreError("Could not connect to the database.") from exc
        self._pool = pool
        logger.info("db_connected min_size=%s max_size=%s", config.pool_min_size(), config.pool_max_size())

    async def close(self) -> None:
        if self._pool is None:
            return None
        await self._pool.close()
        self._pool = None
        logger.info("db_pool_closed")

    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise StoreError("DB pool is not initialized. Call connect() on startup.")
        return self._pool

    def _acquire(self):
        return self.pool().acquire(timeout=config.acquire_timeout())

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        """
        Run a query and return a single row as a dict (or None).
        """
        try:
            async with self._acquire() as conn:
                row = await conn.fetchrow(sql, *args)
        except STORE_EXCEPTIONS as exc:
            raise StoreError("Query failed.") from exc
        return dict(row) if row is not None else None

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        """
        Run a query and return all rows as a list of dicts.
        """
        try:
            async with self._acquire() as conn:
                rows = await conn.fetch(sql, *args)
        except STORE_EXCEPTIONS as exc:
            raise StoreError("Query failed.") from exc
        return [dict(r) for r in rows]

    async def fetch_val(self, sql: str, *args: Any) -> Any:
        try:
            async with self._acquire() as conn:
                return await conn.fetchval(sql, *args)
        except STORE_EXCEPTIONS as exc:
            raise StoreError("Query failed.") from exc

    async def execute(self, sql: str, *args: Any) -> int:
        """
        Run a statement (INSERT/UPDATE/DELETE) and return the affected row count.
        """
        try:
            async with self._acquire() as conn:
                status = await conn.execute(sql, *args)
        except STORE_EXCEPTIONS as exc:
            raise StoreError("Statement failed.") from exc
        return affected_rows(status)
