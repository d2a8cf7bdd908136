import re
from typing import Iterable, Optional

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
_WHITESPACE = re.compile(r"\s+")

MAX_TAGS = 10
MAX_TAG_LENGTH = 50

# Cells starting with these are evaluated as formulas by spreadsheet apps
_FORMULA_PREFIXES = ("=", "+", "-", "@", "\t", "\r")


def strip_control_chars(value: Optional[str]) -> Optional[str]:
    """Remove non-printable control characters, keeping newlines and tabs"""
    if value is None:
        return None
    return _CONTROL_CHARS.sub("", str(value))


def clean_text(value: Optional[str], max_length: Optional[int] = None) -> Optional[str]:
    """
    Trim user input and drop control characters.

    Args:
        value: Input string to clean
        max_length: Maximum allowed length after trimming

    Returns:
        Cleaned string, or None when the input was None

    Raises:
        ValueError: If input exceeds max_length
    """
    if value is None:
        return None

    value = strip_control_chars(value).strip()

    if max_length is not None and len(value) > max_length:
        raise ValueError(f"Input exceeds maximum length of {max_length} characters")

    return value


def normalize_tags(tags: Optional[Iterable[str]]) -> list[str]:
    """
    Normalize a tag list: trimmed, lowercase, inner whitespace collapsed,
    duplicates dropped (first occurrence wins).

    Raises:
        ValueError: If there are too many tags or a tag is too long
    """
    normalized: list[str] = []
    for raw in tags or []:
        tag = _WHITESPACE.sub(" ", strip_control_chars(raw) or "").strip().lstrip("#").lower()
        if not tag or tag in normalized:
            continue
        if len(tag) > MAX_TAG_LENGTH:
            raise ValueError(f"Tag exceeds maximum length of {MAX_TAG_LENGTH} characters")
        normalized.append(tag)

    if len(normalized) > MAX_TAGS:
        raise ValueError(f"A maximum of {MAX_TAGS} tags is allowed")

    return normalized


def csv_safe(value: Optional[str]) -> str:
    """Neutralise spreadsheet formulas in user text written to CSV exports"""
    if not value:
        return ""
    value = str(value)
    if value[0] in _FORMULA_PREFIXES:
        return f"'{value}"
    return value
