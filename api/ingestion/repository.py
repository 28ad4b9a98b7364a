"""
Ingestion persistence.
This module is where the SQL that writes `uploaded_data` lives.
"""

from __future__ import annotations

from typing import Any

import asyncpg

from core import db


async def insert_rows(pool: asyncpg.Pool, records: list[dict[str, Any]]) -> int:
    """
    Insert every row of one upload in a single transaction.

    Either all rows are stored or none are. Returns the number of rows stored.
    """
    if not records:
        return 0

    payloads = [(db.json_arg(record),) for record in records]

    async with pool.acquire() as conn:  # type: asyncpg.Connection
        async with conn.transaction():
            await conn.executemany(
                "INSERT INTO uploaded_data (data) VALUES ($1::jsonb)",
                payloads,
            )

    return len(payloads)
