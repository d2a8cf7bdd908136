"""Availability domain schemas - Pydantic models for validation"""

import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_length

AVAILABILITY_STATUSES = ("available", "hold", "na")
CONFLICT_STATUSES = ("hold", "na")


def _check_status(value: str) -> str:
    value = (value or "").strip().lower()
    if value not in AVAILABILITY_STATUSES:
        raise ValueError(f"Status must be one of: {', '.join(AVAILABILITY_STATUSES)}")
    return value


class AvailabilityUpsert(BaseModel):
    date: datetime.date
    status: str
    note: Optional[str] = None

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        return _check_status(v)

    @field_validator("note")
    @classmethod
    def validate_note(cls, v):
        return validate_length(v, "Note", 0, 255) or None


class AvailabilityBulk(BaseModel):
    """One status applied to several days of a month, e.g. "Sep 2025" / "1-5, 10" """

    month: str
    days: str
    status: str
    note: Optional[str] = None

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        return _check_status(v)

    @field_validator("note")
    @classmethod
    def validate_note(cls, v):
        return validate_length(v, "Note", 0, 255) or None
