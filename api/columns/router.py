"""
Column registry API endpoints.
"""

from __future__ import annotations

import asyncpg
from fastapi import APIRouter, Depends

from core import db

from . import schemas, service

router = APIRouter()


@router.get("/api/columns")
async def list_columns(pool: asyncpg.Pool = Depends(db.get_pool)) -> list[dict]:
    return await service.list_columns(pool)


@router.post("/api/columns")
async def create_column(
    request: schemas.CreateColumnRequest,
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> dict:
    return await service.create_column(pool, request.column_name)


@router.delete("/api/columns/{name}")
async def delete_column(name: str, pool: asyncpg.Pool = Depends(db.get_pool)) -> dict:
    await service.delete_column(pool, name)
    return {"success": True}
