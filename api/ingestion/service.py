"""
Ingestion "service layer".

This file contains logic that is independent of FastAPI's routing layer:
- Validate uploads
- Read file bytes with a size limit
- Parse the spreadsheet into row objects
- Register headers as columns and store every row
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import asyncpg
from fastapi import UploadFile

from columns import service as columns_service
from core import settings

from . import repository, spreadsheet

logger = logging.getLogger(__name__)


class UploadError(ValueError):
    """
    The uploaded file was missing, too large, of an unsupported type, or unreadable.
    """


@dataclass(frozen=True)
class IngestResult:
    filename: str
    size_bytes: int
    headers: list[str]
    registered_columns: list[str]
    count: int


def _file_ext(filename: str) -> str:
    return Path(filename).suffix.lower()


def validate_upload(file: UploadFile | None) -> str:
    """
    Lower-cased extension of an accepted upload.

    Browsers send `application/octet-stream` for CSV and ODS as often as not,
    so the filename is what decides the parser.
    """
    if file is None or not file.filename:
        raise UploadError("No file uploaded.")

    ext = _file_ext(file.filename)
    if ext not in spreadsheet.SUPPORTED_EXTENSIONS:
        raise UploadError(
            f"Unsupported file type '{ext}'. Allowed: {sorted(spreadsheet.SUPPORTED_EXTENSIONS)}"
        )

    return ext


async def read_upload_bytes(file: UploadFile, max_bytes: int) -> bytes:
    """
    Buffer the whole upload, giving up as soon as it passes `max_bytes`.
    """
    chunk_size = 1024 * 1024  # 1 MiB
    buf = bytearray()

    while True:
        chunk = await file.read(chunk_size)
        if not chunk:
            break
        buf.extend(chunk)
        if len(buf) > max_bytes:
            raise UploadError(f"File too large. Max is {max_bytes} bytes.")

    return bytes(buf)


def parse_upload(ext: str, data: bytes) -> list[dict[str, Any]]:
    try:
        return spreadsheet.parse_records(ext, data)
    except spreadsheet.SpreadsheetError as exc:
        raise UploadError(str(exc)) from exc


def header_set(records: list[dict[str, Any]]) -> list[str]:
    """
    The first row's keys drive column registration for the whole upload.
    """
    if not records:
        return []
    return list(records[0].keys())


async def ingest_upload(pool: asyncpg.Pool, file: UploadFile | None) -> IngestResult:
    """
    High-level ingestion step for a single uploaded spreadsheet.

    This is what the FastAPI router should call.
    """
    ext = validate_upload(file)
    data = await read_upload_bytes(file, max_bytes=settings.max_upload_bytes())
    records = parse_upload(ext, data)

    headers = header_set(records)
    registered = await columns_service.register_headers(pool, headers)

    count = await repository.insert_rows(pool, records)
    logger.info(
        "upload_stored filename=%s size_bytes=%s rows=%s new_columns=%s",
        file.filename,
        len(data),
        count,
        len(registered),
    )

    return IngestResult(
        filename=file.filename or "",
        size_bytes=len(data),
        headers=headers,
        registered_columns=registered,
        count=count,
    )
