"""
Column registry business logic.

Scope:
- list/create/delete column metadata
- insert-or-ignore registration of spreadsheet headers (used by ingestion)
"""

from __future__ import annotations

import logging

import asyncpg

from core import schema

from . import repository

logger = logging.getLogger(__name__)


async def list_columns(pool: asyncpg.Pool) -> list[dict]:
    return await repository.list_columns(pool)


async def create_column(pool: asyncpg.Pool, column_name: str) -> dict:
    row = await repository.create_column(pool, column_name)
    logger.info("column_created column_name=%s id=%s", row["column_name"], row["id"])
    return row


async def register_headers(pool: asyncpg.Pool, headers: list[str]) -> list[str]:
    """
    Register every header as a column, skipping names that already exist.

    A failure on one header is logged and the rest still get registered.
    Returns the headers that were newly created.
    """
    created: list[str] = []
    for header in headers:
        try:
            if await repository.register_column(pool, header):
                created.append(header)
        except Exception:
            logger.exception("column_register_failed column_name=%s", header)
    if created:
        logger.info("columns_registered count=%s names=%s", len(created), created)
    return created


async def delete_column(pool: asyncpg.Pool, column_name: str) -> bool:
    """
    Core columns and unknown names are left alone; callers still report success.
    """
    if column_name in schema.CORE_COLUMNS:
        logger.info("column_delete_noop column_name=%s reason=core", column_name)
        return False

    deleted = await repository.delete_column(pool, column_name)
    if not deleted:
        logger.info("column_delete_noop column_name=%s", column_name)
    return deleted
