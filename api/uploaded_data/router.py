"""
Uploaded data API endpoints.
"""

from __future__ import annotations

from typing import Any

import asyncpg
from fastapi import APIRouter, Body, Depends

from core import db

from . import service

router = APIRouter()


@router.get("/api/data")
async def list_data(pool: asyncpg.Pool = Depends(db.get_pool)) -> list[dict[str, Any]]:
    return await service.list_all(pool)


@router.post("/api/data/filter")
async def filter_data(
    criteria: dict[str, Any] | None = Body(default=None),
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> list[dict[str, Any]]:
    return await service.filter_data(pool, criteria or {})
