"""Shared validation utilities"""

import re
from typing import Optional

from ..utils.sanitization import clean_text

_TIME_24H = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
_HANDLE = re.compile(r"^@?[a-zA-Z0-9_.]{2,30}$")


def validate_length(
    value: Optional[str], field: str, min_length: int = 0, max_length: Optional[int] = None
) -> Optional[str]:
    """
    Clean a text field and enforce its length bounds.

    Raises:
        ValueError: If the cleaned value is shorter or longer than allowed
    """
    if value is None:
        if min_length:
            raise ValueError(f"{field} is required")
        return value

    value = clean_text(value)

    if len(value) < min_length:
        raise ValueError(f"{field} must be at least {min_length} characters")
    if max_length is not None and len(value) > max_length:
        raise ValueError(f"{field} must be at most {max_length} characters")

    return value


def validate_time_24h(value: str) -> str:
    """Validate an "HH:MM" 24-hour time string"""
    value = (value or "").strip()
    if not _TIME_24H.match(value):
        raise ValueError("Time must be in HH:MM 24-hour format")
    return value


def validate_handle(handle: Optional[str]) -> Optional[str]:
    """Normalize a profile handle to "@name" form"""
    if not handle:
        return handle

    handle = handle.strip()
    if not _HANDLE.match(handle):
        raise ValueError("Handle may only contain letters, digits, '.' and '_' (2-30 chars)")

    return handle if handle.startswith("@") else f"@{handle}"


def validate_url(url: Optional[str]) -> Optional[str]:
    """Only absolute http(s) URLs are accepted for media and links"""
    if not url:
        return url

    url = url.strip()
    if not re.match(r"^https?://[^\s/$.?#].[^\s]*$", url, re.IGNORECASE):
        raise ValueError("Invalid URL")

    return url
