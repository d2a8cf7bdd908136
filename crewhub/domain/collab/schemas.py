"""Collab domain schemas - Pydantic models for validation"""

from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_length, validate_url
from ...utils.sanitization import normalize_tags


class CollabCreate(BaseModel):
    """Schema for a new call for collaborators"""

    title: str
    summary: str
    cover_image_url: Optional[str] = None
    location: Optional[str] = None
    tags: list[str] = []

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return validate_length(v, "Title", 3, 200)

    @field_validator("summary")
    @classmethod
    def validate_summary(cls, v):
        return validate_length(v, "Summary", 10, 5000)

    @field_validator("cover_image_url")
    @classmethod
    def validate_cover(cls, v):
        return validate_url(v)

    @field_validator("location")
    @classmethod
    def validate_location(cls, v):
        return validate_length(v, "Location", 0, 255)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v):
        return normalize_tags(v)


class CollabUpdate(BaseModel):
    title: Optional[str] = None
    summary: Optional[str] = None
    cover_image_url: Optional[str] = None
    location: Optional[str] = None
    tags: Optional[list[str]] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return validate_length(v, "Title", 3, 200) if v is not None else v

    @field_validator("summary")
    @classmethod
    def validate_summary(cls, v):
        return validate_length(v, "Summary", 10, 5000) if v is not None else v

    @field_validator("cover_image_url")
    @classmethod
    def validate_cover(cls, v):
        return validate_url(v)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v):
        return normalize_tags(v) if v is not None else v


class InterestCreate(BaseModel):
    message: Optional[str] = None

    @field_validator("message")
    @classmethod
    def validate_message(cls, v):
        return validate_length(v, "Message", 0, 1000)
