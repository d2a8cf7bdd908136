"""Gig domain schemas - Pydantic models for validation"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...shared.validators import validate_length, validate_url
from ...utils.calendar_utils import (
    days_in_month,
    format_day_ranges,
    format_month_label,
    parse_day_ranges,
    parse_month_label,
)
from ...utils.sanitization import clean_text

APPLICATION_STATUSES = ("pending", "shortlisted", "confirmed", "released")
GIG_STATUSES = ("draft", "active", "closed")

MAX_LOCATIONS = 10


class GigDateInput(BaseModel):
    """A month plus the days worked in it, e.g. {"month": "Sep 2025", "days": "1-5, 10"}"""

    month: str
    days: str
    label: Optional[str] = None

    @model_validator(mode="after")
    def normalize(self):
        parsed = parse_month_label(self.month)
        if parsed is None:
            raise ValueError(f"Invalid month '{self.month}', expected e.g. 'Sep 2025'")

        year, month_index = parsed
        days = parse_day_ranges(self.days, max_day=days_in_month(year, month_index))
        if not days:
            raise ValueError(f"No valid days in '{self.days}' for {self.month}")

        self.month = format_month_label(year, month_index)
        self.days = format_day_ranges(days)
        self.label = clean_text(self.label, max_length=100) if self.label else None
        return self


def _clean_locations(locations: Optional[list[str]]) -> Optional[list[str]]:
    if locations is None:
        return None
    cleaned = []
    for location in locations:
        value = clean_text(location, max_length=255)
        if value and value not in cleaned:
            cleaned.append(value)
    if len(cleaned) > MAX_LOCATIONS:
        raise ValueError(f"A maximum of {MAX_LOCATIONS} locations is allowed")
    return cleaned


class GigCreate(BaseModel):
    """Schema for posting a new gig"""

    title: str
    description: Optional[str] = None
    qualifying_criteria: Optional[str] = None
    budget_amount: Optional[float] = Field(default=None, ge=0)
    currency: str = "AED"
    request_quote: bool = False
    application_deadline: Optional[date] = None
    status: str = "active"
    dates: list[GigDateInput]
    locations: list[str] = []

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return validate_length(v, "Title", 3, 200)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        return validate_length(v, "Description", 0, 10000)

    @field_validator("qualifying_criteria")
    @classmethod
    def validate_criteria(cls, v):
        return validate_length(v, "Qualifying criteria", 0, 2000)

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v):
        v = (v or "").strip().upper()
        if len(v) != 3 or not v.isalpha():
            raise ValueError("Currency must be a 3-letter ISO code")
        return v

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        if v not in ("draft", "active"):
            raise ValueError("New gigs must be 'draft' or 'active'")
        return v

    @field_validator("dates")
    @classmethod
    def validate_dates(cls, v):
        if not v:
            raise ValueError("At least one date entry is required")
        return v

    @field_validator("locations")
    @classmethod
    def validate_locations(cls, v):
        return _clean_locations(v)


class GigUpdate(BaseModel):
    """Schema for updating a gig; related dates/locations are replaced when given"""

    title: Optional[str] = None
    description: Optional[str] = None
    qualifying_criteria: Optional[str] = None
    budget_amount: Optional[float] = Field(default=None, ge=0)
    currency: Optional[str] = None
    request_quote: Optional[bool] = None
    application_deadline: Optional[date] = None
    status: Optional[str] = None
    dates: Optional[list[GigDateInput]] = None
    locations: Optional[list[str]] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return validate_length(v, "Title", 3, 200) if v is not None else v

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        return validate_length(v, "Description", 0, 10000)

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v):
        if v is None:
            return v
        v = v.strip().upper()
        if len(v) != 3 or not v.isalpha():
            raise ValueError("Currency must be a 3-letter ISO code")
        return v

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        if v is not None and v not in GIG_STATUSES:
            raise ValueError(f"Status must be one of: {', '.join(GIG_STATUSES)}")
        return v

    @field_validator("dates")
    @classmethod
    def validate_dates(cls, v):
        if v is not None and not v:
            raise ValueError("At least one date entry is required")
        return v

    @field_validator("locations")
    @classmethod
    def validate_locations(cls, v):
        return _clean_locations(v)


class ApplicationCreate(BaseModel):
    """Schema for applying to a gig"""

    cover_note: Optional[str] = None
    portfolio_url: Optional[str] = None
    resume_url: Optional[str] = None

    @field_validator("cover_note")
    @classmethod
    def validate_cover_note(cls, v):
        return validate_length(v, "Cover note", 0, 5000)

    @field_validator("portfolio_url", "resume_url")
    @classmethod
    def validate_urls(cls, v):
        return validate_url(v)


class ApplicationStatusUpdate(BaseModel):
    """Schema for moving an application through the hiring pipeline"""

    status: str

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        if v not in APPLICATION_STATUSES:
            raise ValueError(f"Status must be one of: {', '.join(APPLICATION_STATUSES)}")
        return v
