"""
School persistence (raw SQL over `schools`).
"""

from __future__ import annotations

from datetime import date

import asyncpg

from core import db

SCHOOL_FIELDS = "id, name, status, start_date, deadline, priority, created_at, updated_at"


async def list_schools(pool: asyncpg.Pool) -> list[dict]:
    return await db.fetch_all(
        pool,
        f"""
        SELECT {SCHOOL_FIELDS}
        FROM schools
        ORDER BY id ASC
        """,
    )


async def create_school(
    pool: asyncpg.Pool,
    *,
    name: str,
    status: str,
    start_date: date | None,
    deadline: date | None,
    priority: int,
) -> dict:
    row = await db.fetch_one(
        pool,
        f"""
        INSERT INTO schools (name, status, start_date, deadline, priority)
        VALUES ($1, $2, $3, $4, $5)
        RETURNING {SCHOOL_FIELDS}
        """,
        name,
        status,
        start_date,
        deadline,
        priority,
    )
    if row is None:
        raise RuntimeError("Failed to create school.")
    return row


async def update_school(
    pool: asyncpg.Pool,
    school_id: int,
    *,
    status: str | None,
    start_date: date | None,
    deadline: date | None,
) -> int:
    """
    Overwrite status and dates. Returns the number of rows affected.
    """
    result = await db.execute(
        pool,
        """
        UPDATE schools
        SET status = $2,
            start_date = $3,
            deadline = $4,
            updated_at = now()
        WHERE id = $1
        """,
        school_id,
        status,
        start_date,
        deadline,
    )
    return db.affected_rows(result)


async def delete_school(pool: asyncpg.Pool, school_id: int) -> int:
    result = await db.execute(pool, "DELETE FROM schools WHERE id = $1", school_id)
    return db.affected_rows(result)


async def list_started_with_deadline(pool: asyncpg.Pool) -> list[dict]:
    """
    Started schools that have a deadline, soonest first. The service picks the window.
    """
    return await db.fetch_all(
        pool,
        f"""
        SELECT {SCHOOL_FIELDS}
        FROM schools
        WHERE status = 'started'
          AND deadline IS NOT NULL
        ORDER BY deadline ASC, id ASC
        """,
    )
