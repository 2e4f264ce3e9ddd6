"""
Async database access helpers (raw SQL) using asyncpg.

There is no pool: every unit of work opens its own connection through
`connect()` and the connection is closed when the block exits, whether it
succeeded or raised.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import asyncpg

from .config import DatabaseSettings

logger = logging.getLogger(__name__)

# A database round trip failed (server error, dropped socket, timeout).
DATABASE_ERRORS: tuple[type[BaseException], ...] = (
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
    OSError,
    asyncio.TimeoutError,
)


async def open_connection(settings: DatabaseSettings) -> asyncpg.Connection:
    return await asyncpg.connect(
        host=settings.host,
        port=settings.port,
        user=settings.user,
        password=settings.password,
        database=settings.name,
        ssl=settings.sslmode,
        timeout=settings.connect_timeout_s,
        command_timeout=settings.command_timeout_s,
    )


@asynccontextmanager
async def connect(settings: DatabaseSettings) -> AsyncIterator[asyncpg.Connection]:
    """
    Open a connection for the duration of the `async with` block.
    """
    conn = await open_connection(settings)
    try:
        yield conn
    finally:
        await conn.close()


async def ping(settings: DatabaseSettings) -> None:
    """
    Verify the database is reachable. Raises one of DATABASE_ERRORS if not.
    """
    try:
        async with connect(settings) as conn:
            await conn.fetchval("SELECT 1")
    except DATABASE_ERRORS:
        logger.exception(
            "database_unreachable host=%s port=%s db=%s",
            settings.host,
            settings.port,
            settings.name,
        )
        raise
    logger.info("database_reachable host=%s port=%s db=%s", settings.host, settings.port, settings.name)


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


async def fetch_one(conn: asyncpg.Connection, sql: str, *args: Any) -> dict[str, Any] | None:
    """
    Run a query and return a single row as a dict (or None).
    """
    row = await conn.fetchrow(sql, *args)
    return _record_to_dict(row) if row is not None else None


async def fetch_all(conn: asyncpg.Connection, sql: str, *args: Any) -> list[dict[str, Any]]:
    """
    Run a query and return all rows as a list of dicts.
    """
    rows = await conn.fetch(sql, *args)
    return [_record_to_dict(r) for r in rows]
