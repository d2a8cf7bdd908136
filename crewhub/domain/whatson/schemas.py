"""What's On domain schemas - Pydantic models for validation"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...shared.validators import validate_length, validate_time_24h, validate_url
from ...utils.sanitization import normalize_tags

EVENT_STATUSES = ("draft", "published", "cancelled")
MAX_SCHEDULE_ENTRIES = 60


class ScheduleEntryInput(BaseModel):
    event_date: date
    start_time: str
    end_time: str
    timezone: str = "IST"

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_times(cls, v):
        return validate_time_24h(v)

    @model_validator(mode="after")
    def check_order(self):
        # "HH:MM" strings compare correctly as text
        if self.end_time <= self.start_time:
            raise ValueError("End time must be after start time")
        return self


def _check_schedule(schedule):
    if schedule is None:
        return schedule
    if len(schedule) > MAX_SCHEDULE_ENTRIES:
        raise ValueError(f"A maximum of {MAX_SCHEDULE_ENTRIES} schedule entries is allowed")
    seen = set()
    for entry in schedule:
        key = (entry.event_date, entry.start_time)
        if key in seen:
            raise ValueError(f"Duplicate schedule entry for {entry.event_date} {entry.start_time}")
        seen.add(key)
    return schedule


class EventCreate(BaseModel):
    """Schema for creating a What's On event"""

    title: str
    description: Optional[str] = None
    thumbnail_url: Optional[str] = None
    is_online: bool = False
    location: Optional[str] = None
    online_link: Optional[str] = None
    is_paid: bool = False
    price: Optional[float] = Field(default=None, ge=0)
    currency: str = "AED"
    is_unlimited: bool = False
    total_spots: Optional[int] = None
    max_spots_per_person: int = 1
    status: str = "published"
    schedule: list[ScheduleEntryInput]
    tags: list[str] = []

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return validate_length(v, "Title", 3, 200)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        return validate_length(v, "Description", 0, 10000)

    @field_validator("location")
    @classmethod
    def validate_location(cls, v):
        return validate_length(v, "Location", 0, 255) or None

    @field_validator("thumbnail_url", "online_link")
    @classmethod
    def validate_links(cls, v):
        return validate_url(v)

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v):
        v = (v or "").strip().upper()
        if len(v) != 3:
            raise ValueError("Currency must be a 3-letter code")
        return v

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        if v not in EVENT_STATUSES:
            raise ValueError(f"Status must be one of: {', '.join(EVENT_STATUSES)}")
        return v

    @field_validator("max_spots_per_person")
    @classmethod
    def validate_max_spots(cls, v):
        if v < 1:
            raise ValueError("Max spots per person must be at least 1")
        return v

    @field_validator("schedule")
    @classmethod
    def validate_schedule(cls, v):
        if not v:
            raise ValueError("At least one schedule entry is required")
        return _check_schedule(v)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v):
        return normalize_tags(v)

    @model_validator(mode="after")
    def check_event_rules(self):
        if not self.is_online and not self.location:
            raise ValueError("Location is required for in-person events")
        if self.is_unlimited:
            self.total_spots = None
        elif self.total_spots is None or self.total_spots < 1:
            raise ValueError("Total spots must be at least 1 unless spots are unlimited")
        if not self.is_paid:
            self.price = None
        return self


class EventUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    thumbnail_url: Optional[str] = None
    is_online: Optional[bool] = None
    location: Optional[str] = None
    online_link: Optional[str] = None
    is_paid: Optional[bool] = None
    price: Optional[float] = Field(default=None, ge=0)
    is_unlimited: Optional[bool] = None
    total_spots: Optional[int] = Field(default=None, ge=1)
    max_spots_per_person: Optional[int] = Field(default=None, ge=1)
    status: Optional[str] = None
    schedule: Optional[list[ScheduleEntryInput]] = None
    tags: Optional[list[str]] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return validate_length(v, "Title", 3, 200) if v is not None else v

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        return validate_length(v, "Description", 0, 10000)

    @field_validator("thumbnail_url", "online_link")
    @classmethod
    def validate_links(cls, v):
        return validate_url(v)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        if v is not None and v not in EVENT_STATUSES:
            raise ValueError(f"Status must be one of: {', '.join(EVENT_STATUSES)}")
        return v

    @field_validator("schedule")
    @classmethod
    def validate_schedule(cls, v):
        if v is not None and not v:
            raise ValueError("At least one schedule entry is required")
        return _check_schedule(v)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v):
        return normalize_tags(v) if v is not None else v


class RsvpCreate(BaseModel):
    """Spots requested plus the schedule entries the attendee picked"""

    number_of_spots: int = 1
    schedule_ids: list[int] = []
