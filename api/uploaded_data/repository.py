"""
Uploaded row queries (raw SQL over `uploaded_data`).
"""

from __future__ import annotations

from typing import Any

import asyncpg

from core import db


async def list_rows(pool: asyncpg.Pool, *, newest_first: bool = True) -> list[dict[str, Any]]:
    """
    Every stored row with its JSON document decoded into `data`.
    """
    order = "DESC" if newest_first else "ASC"
    rows = await db.fetch_all(
        pool,
        f"""
        SELECT id, data, created_at
        FROM uploaded_data
        ORDER BY id {order}
        """,
    )
    for row in rows:
        row["data"] = db.json_value(row["data"])
    return rows
