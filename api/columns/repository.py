"""
Column registry persistence (raw SQL over `table_columns`).
"""

from __future__ import annotations

import asyncpg

from core import db

COLUMN_FIELDS = "id, column_name, data_type, is_core, created_at"


async def list_columns(pool: asyncpg.Pool) -> list[dict]:
    return await db.fetch_all(
        pool,
        f"""
        SELECT {COLUMN_FIELDS}
        FROM table_columns
        ORDER BY id ASC
        """,
    )


async def create_column(pool: asyncpg.Pool, column_name: str) -> dict:
    """
    Plain insert: a duplicate name raises asyncpg.UniqueViolationError.
    """
    row = await db.fetch_one(
        pool,
        f"""
        INSERT INTO table_columns (column_name, is_core)
        VALUES ($1, false)
        RETURNING {COLUMN_FIELDS}
        """,
        column_name,
    )
    if row is None:
        raise RuntimeError("Failed to create column.")
    return row


async def register_column(pool: asyncpg.Pool, column_name: str) -> bool:
    """
    Insert-or-ignore. Returns True when a new row was created.
    """
    row = await db.fetch_one(
        pool,
        """
        INSERT INTO table_columns (column_name)
        VALUES ($1)
        ON CONFLICT (column_name) DO NOTHING
        RETURNING id
        """,
        column_name,
    )
    return row is not None


async def delete_column(pool: asyncpg.Pool, column_name: str) -> bool:
    """
    Delete a non-core column. Returns False when nothing matched.
    """
    row = await db.fetch_one(
        pool,
        """
        DELETE FROM table_columns
        WHERE column_name = $1
          AND is_core = false
        RETURNING id
        """,
        column_name,
    )
    return row is not None
