"""
Pydantic schemas for school endpoints.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

SchoolStatus = Literal["pending", "started", "completed"]


def _blank_to_none(value: Any) -> Any:
    # HTML date inputs post "" when cleared.
    if isinstance(value, str) and not value.strip():
        return None
    return value


class CreateSchoolRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    status: SchoolStatus | None = None
    start_date: date | None = None
    deadline: date | None = None
    priority: int | None = None

    @field_validator("status", "start_date", "deadline", "priority", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        return _blank_to_none(value)


class UpdateSchoolRequest(BaseModel):
    """
    Full overwrite: a field left out is stored as NULL.
    """

    status: SchoolStatus | None = None
    start_date: date | None = None
    deadline: date | None = None

    @field_validator("status", "start_date", "deadline", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        return _blank_to_none(value)
