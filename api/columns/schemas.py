"""
Pydantic schemas for column registry endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class CreateColumnRequest(BaseModel):
    column_name: str = Field(..., min_length=1, max_length=255)
