"""
School and notification API endpoints.
"""

from __future__ import annotations

import asyncpg
from fastapi import APIRouter, Depends

from core import db

from . import schemas, service

router = APIRouter()


@router.get("/api/schools")
async def list_schools(pool: asyncpg.Pool = Depends(db.get_pool)) -> list[dict]:
    return await service.list_schools(pool)


@router.post("/api/schools")
async def create_school(
    request: schemas.CreateSchoolRequest,
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> dict:
    return await service.create_school(pool, request)


@router.put("/api/schools/{school_id}")
async def update_school(
    school_id: int,
    request: schemas.UpdateSchoolRequest,
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> dict:
    await service.update_school(pool, school_id, request)
    return {"success": True}


@router.delete("/api/schools/{school_id}")
async def delete_school(school_id: int, pool: asyncpg.Pool = Depends(db.get_pool)) -> dict:
    await service.delete_school(pool, school_id)
    return {"success": True}


@router.get("/api/notifications")
async def list_notifications(pool: asyncpg.Pool = Depends(db.get_pool)) -> list[dict]:
    return await service.notifications(pool)
