"""
Idempotent schema bootstrap, run once from the app lifespan.

Creates the three tables if they are absent and seeds the default column
metadata with insert-or-ignore semantics.
"""

from __future__ import annotations

import logging

import asyncpg

logger = logging.getLogger(__name__)

CREATE_UPLOADED_DATA = """
CREATE TABLE IF NOT EXISTS uploaded_data (
  id bigserial PRIMARY KEY,
  data jsonb,
  created_at timestamptz NOT NULL DEFAULT now()
)
"""

CREATE_SCHOOLS = """
CREATE TABLE IF NOT EXISTS schools (
  id serial PRIMARY KEY,
  name varchar(255) NOT NULL,
  status varchar(16) DEFAULT 'pending'
    CHECK (status IN ('pending', 'started', 'completed')),
  start_date date,
  deadline date,
  priority integer NOT NULL DEFAULT 1,
  created_at timestamptz NOT NULL DEFAULT now(),
  updated_at timestamptz NOT NULL DEFAULT now()
)
"""

CREATE_TABLE_COLUMNS = """
CREATE TABLE IF NOT EXISTS table_columns (
  id serial PRIMARY KEY,
  column_name varchar(255) NOT NULL UNIQUE,
  data_type varchar(50) DEFAULT 'VARCHAR(255)',
  is_core boolean NOT NULL DEFAULT false,
  created_at timestamptz NOT NULL DEFAULT now()
)
"""

# (column_name, is_core)
DEFAULT_COLUMNS: tuple[tuple[str, bool], ...] = (
    ("id", True),
    ("name", True),
    ("email", True),
    ("school", False),
)

CORE_COLUMNS = frozenset(name for name, is_core in DEFAULT_COLUMNS if is_core)

SEED_COLUMN = """
INSERT INTO table_columns (column_name, is_core)
VALUES ($1, $2)
ON CONFLICT (column_name) DO NOTHING
"""


async def create_tables(conn: asyncpg.Connection) -> None:
    await conn.execute(CREATE_UPLOADED_DATA)
    await conn.execute(CREATE_SCHOOLS)
    await conn.execute(CREATE_TABLE_COLUMNS)


async def seed_columns(conn: asyncpg.Connection) -> None:
    await conn.executemany(SEED_COLUMN, list(DEFAULT_COLUMNS))


async def bootstrap(pool: asyncpg.Pool) -> bool:
    """
    Create tables and seed default columns.

    Never raises: a failure is logged and the service keeps starting, so the
    schema may be partially initialized. Returns True on success.
    """
    try:
        async with pool.acquire() as conn:  # type: asyncpg.Connection
            await create_tables(conn)
            await seed_columns(conn)
    except Exception:
        logger.exception("schema_bootstrap_failed")
        return False

    logger.info("schema_bootstrap_complete tables=3 seeded_columns=%s", len(DEFAULT_COLUMNS))
    return True
