"""Profile domain schemas - Pydantic models for validation"""

from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_handle, validate_length, validate_url


class ProfileUpdate(BaseModel):
    """Schema for updating the current user's profile"""

    full_name: Optional[str] = None
    handle: Optional[str] = None
    primary_role: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    avatar_url: Optional[str] = None
    banner_url: Optional[str] = None
    resume_url: Optional[str] = None
    portfolio_url: Optional[str] = None
    day_rate: Optional[float] = None
    currency: Optional[str] = None
    experience_level: Optional[str] = None
    phone: Optional[str] = None
    visible_in_explore: Optional[bool] = None

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v):
        return validate_length(v, "Full name", 1, 255) if v is not None else v

    @field_validator("bio")
    @classmethod
    def validate_bio(cls, v):
        return validate_length(v, "Bio", 0, 2000) if v is not None else v

    @field_validator("handle")
    @classmethod
    def validate_handle(cls, v):
        return validate_handle(v)

    @field_validator("avatar_url", "banner_url", "resume_url", "portfolio_url")
    @classmethod
    def validate_urls(cls, v):
        return validate_url(v)

    @field_validator("day_rate")
    @classmethod
    def validate_day_rate(cls, v):
        if v is not None and v < 0:
            raise ValueError("Day rate cannot be negative")
        return v

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v):
        if v is None:
            return v
        v = v.strip().upper()
        if len(v) != 3 or not v.isalpha():
            raise ValueError("Currency must be a 3-letter ISO code")
        return v

    @field_validator("experience_level")
    @classmethod
    def validate_experience_level(cls, v):
        if v is not None and v not in ("entry", "mid", "senior"):
            raise ValueError("Experience level must be one of: entry, mid, senior")
        return v
