"""
Schools business logic.

Scope:
- CRUD over the fixed-schema `schools` table
- list ordering by status precedence, then priority
- deadline notifications for started schools
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from datetime import date, datetime, time, timedelta
from typing import Any

import asyncpg

from . import repository, schemas

logger = logging.getLogger(__name__)

DEFAULT_STATUS = "pending"
DEFAULT_PRIORITY = 1

# Lower rank lists first. Not alphabetical on purpose.
STATUS_RANK: dict[str, int] = {
    "started": 1,
    "pending": 2,
    "completed": 3,
}

NOTIFY_WINDOW_DAYS = 7
SECONDS_PER_DAY = 24 * 60 * 60


def school_sort_key(row: Mapping[str, Any]) -> tuple[int, int, int]:
    # Unknown or NULL status (possible after a full-overwrite update) sorts last.
    rank = STATUS_RANK.get(row.get("status") or "", len(STATUS_RANK) + 1)
    return rank, int(row.get("priority") or 0), int(row["id"])


def order_schools(rows: list[dict]) -> list[dict]:
    return sorted(rows, key=school_sort_key)


def notification_window(today: date) -> tuple[date, date]:
    """
    Returns (after, until): a deadline qualifies when after < deadline <= until.
    """
    return today, today + timedelta(days=NOTIFY_WINDOW_DAYS)


def is_due_soon(row: Mapping[str, Any], today: date) -> bool:
    if row.get("status") != "started" or row.get("deadline") is None:
        return False
    after, until = notification_window(today)
    return after < row["deadline"] <= until


def days_until(deadline: date, now: datetime) -> int:
    """
    Whole days left, rounding up, counting from `now` to local midnight of `deadline`.
    """
    remaining = datetime.combine(deadline, time.min) - now
    return math.ceil(remaining.total_seconds() / SECONDS_PER_DAY)


def deadline_message(name: str, days: int) -> str:
    return f"{name}: {days} days until deadline"


async def list_schools(pool: asyncpg.Pool) -> list[dict]:
    return order_schools(await repository.list_schools(pool))


async def create_school(pool: asyncpg.Pool, request: schemas.CreateSchoolRequest) -> dict:
    row = await repository.create_school(
        pool,
        name=request.name,
        status=request.status or DEFAULT_STATUS,
        start_date=request.start_date,
        deadline=request.deadline,
        priority=request.priority or DEFAULT_PRIORITY,
    )
    logger.info("school_created id=%s status=%s", row["id"], row["status"])
    return row


async def update_school(pool: asyncpg.Pool, school_id: int, request: schemas.UpdateSchoolRequest) -> int:
    # Any status may follow any other; there is no transition check.
    affected = await repository.update_school(
        pool,
        school_id,
        status=request.status,
        start_date=request.start_date,
        deadline=request.deadline,
    )
    if not affected:
        logger.info("school_update_noop id=%s", school_id)
    return affected


async def delete_school(pool: asyncpg.Pool, school_id: int) -> int:
    affected = await repository.delete_school(pool, school_id)
    if not affected:
        logger.info("school_delete_noop id=%s", school_id)
    return affected


async def notifications(pool: asyncpg.Pool, *, now: datetime | None = None) -> list[dict]:
    """
    One message per started school whose deadline is 1 to 7 days away.
    """
    now = now or datetime.now()
    today = now.date()
    rows = await repository.list_started_with_deadline(pool)
    return [
        {
            "id": int(row["id"]),
            "message": deadline_message(str(row["name"]), days_until(row["deadline"], now)),
        }
        for row in rows
        if is_due_soon(row, today)
    ]
