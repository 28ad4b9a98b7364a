"""
Listing and filtering of uploaded rows.

Filtering is an in-memory scan: every row is loaded, then each criterion
narrows the set with a case-insensitive substring match. Fine for the small
datasets this dashboard handles; there is no index behind it.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import asyncpg

from . import repository


def flatten_row(row: Mapping[str, Any]) -> dict[str, Any]:
    """
    Spread the JSON document alongside `id` and `created_at`.

    Document keys may shadow `id`; `created_at` always comes from the row.
    """
    data = row.get("data")
    document = data if isinstance(data, dict) else {}
    return {"id": row["id"], **document, "created_at": row.get("created_at")}


def _as_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def field_matches(item: Mapping[str, Any], key: str, needle: str) -> bool:
    value = item.get(key)
    if value is None:
        return False
    return needle in _as_text(value).lower()


def filter_rows(items: list[dict[str, Any]], criteria: Mapping[str, Any]) -> list[dict[str, Any]]:
    """
    AND-combine every criterion with a truthy value; empty ones are ignored.
    A row missing the field never matches.
    """
    result = list(items)
    for key, expected in criteria.items():
        if not expected:
            continue
        needle = _as_text(expected).lower()
        result = [item for item in result if field_matches(item, key, needle)]
    return result


async def list_all(pool: asyncpg.Pool) -> list[dict[str, Any]]:
    rows = await repository.list_rows(pool, newest_first=True)
    return [flatten_row(row) for row in rows]


async def filter_data(pool: asyncpg.Pool, criteria: Mapping[str, Any]) -> list[dict[str, Any]]:
    rows = await repository.list_rows(pool, newest_first=False)
    return filter_rows([flatten_row(row) for row in rows], criteria)
