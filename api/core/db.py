"""
Async database access helpers (raw SQL) using asyncpg.

The connection pool is process-scoped: `main.lifespan` creates it on startup,
stores it on `app.state.pool`, and closes it on shutdown. Handlers receive it
through the `get_pool` dependency and pass it down to repositories.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import json
import os
from typing import Any
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

import asyncpg
from fastapi import Request

from . import settings


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url() -> str:
    """
    DATABASE_URL wins when set; otherwise build a DSN from DB_HOST/DB_PORT/
    DB_USER/DB_PASSWORD/DB_NAME.
    """
    url = os.environ.get("DATABASE_URL", "").strip()
    if url:
        return _sanitize_database_url(url)

    user = quote(settings.db_user(), safe="")
    password = settings.db_password()
    auth = f"{user}:{quote(password, safe='')}" if password else user
    return f"postgresql://{auth}@{settings.db_host()}:{settings.db_port()}/{settings.db_name()}"


async def create_pool() -> asyncpg.Pool:
    # min_size=0 keeps connections lazy: an unreachable database surfaces on
    # first use (bootstrap logs it) instead of aborting startup.
    return await asyncpg.create_pool(
        dsn=database_url(),
        min_size=0,
        max_size=settings.pool_max_size(),
        command_timeout=settings.command_timeout(),
    )


async def close_pool(pool: asyncpg.Pool | None) -> None:
    if pool is None:
        return None
    await pool.close()


def get_pool(request: Request) -> asyncpg.Pool:
    """
    FastAPI dependency returning the pool created by the lifespan.
    """
    pool = getattr(request.app.state, "pool", None)
    if pool is None:
        raise RuntimeError("DB pool is not initialized. It is created in the app lifespan.")
    return pool


def json_arg(value: Any) -> str:
    """
    asyncpg does not encode Python dicts for json/jsonb parameters.
    We pass JSON as a string and cast to jsonb in SQL.
    """
    return json.dumps(value, ensure_ascii=False)


def json_value(value: Any) -> Any:
    """
    Decode a json/jsonb column. asyncpg returns these as text by default.
    """
    if value is None:
        return None
    if isinstance(value, (bytes, str)):
        return json.loads(value)
    return value


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


async def fetch_one(pool: asyncpg.Pool, sql: str, *args: Any) -> dict[str, Any] | None:
    """
    Run a query and return a single row as a dict (or None).
    """
    row = await pool.fetchrow(sql, *args)
    return _record_to_dict(row) if row is not None else None


async def fetch_all(pool: asyncpg.Pool, sql: str, *args: Any) -> list[dict[str, Any]]:
    """
    Run a query and return all rows as a list of dicts.
    """
    rows = await pool.fetch(sql, *args)
    return [_record_to_dict(r) for r in rows]


async def execute(pool: asyncpg.Pool, sql: str, *args: Any) -> str:
    """
    Run a statement (INSERT/UPDATE/DELETE/DDL) and return asyncpg's status tag,
    e.g. "DELETE 0".
    """
    return await pool.execute(sql, *args)


def affected_rows(status: str) -> int:
    """
    Parse the row count out of a command status tag ("UPDATE 3" -> 3).
    """
    try:
        return int((status or "").rsplit(" ", 1)[-1])
    except ValueError:
        return 0
