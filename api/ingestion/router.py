"""
FastAPI router for ingestion endpoints.
"""

from __future__ import annotations

import asyncpg
from fastapi import APIRouter, Depends, File, UploadFile

from core import db

from . import service

router = APIRouter()


@router.post("/api/upload")
async def upload_spreadsheet(
    file: UploadFile | None = File(default=None),
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> dict:
    """
    Upload a spreadsheet (.xlsx, .xlsm or .csv).

    - headers of the first data row are registered as columns (insert-or-ignore)
    - every row is stored as one JSON document in `uploaded_data`
    """
    result = await service.ingest_upload(pool, file)
    return {"success": True, "count": result.count}
