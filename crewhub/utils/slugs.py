"""
URL slug helpers for gigs, collab posts and What's On events
"""

import logging
import re
import time
from threading import Lock
from typing import Callable

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^a-z0-9]+")

EMPTY_SLUG = "untitled"

_timestamp_lock = Lock()
_last_timestamp = 0


def slugify(title: str) -> str:
    """
    Derive a URL-safe slug from a human readable title.

    Example: "4 Video Editors for Shortfilm!" -> "4-video-editors-for-shortfilm"

    Args:
        title: Title as typed by the user

    Returns:
        Lowercase slug with single hyphens and no leading/trailing hyphens
    """
    slug = _NON_ALNUM.sub("-", (title or "").lower()).strip("-")
    return slug or EMPTY_SLUG


def unique_timestamp() -> int:
    """Epoch milliseconds, strictly increasing across calls in this process"""
    global _last_timestamp

    with _timestamp_lock:
        now = int(time.time() * 1000)
        if now <= _last_timestamp:
            now = _last_timestamp + 1
        _last_timestamp = now
        return now


def generate_unique_slug(title: str, exists: Callable[[str], bool]) -> str:
    """
    Generate a slug that is not taken yet.

    Appends a timestamp when the base slug already exists.

    Args:
        title: Title to derive the slug from
        exists: Callback returning True when a slug is already used
    """
    slug = slugify(title)

    if exists(slug):
        candidate = f"{slug}-{unique_timestamp()}"
        logger.debug(f"🔁 Slug '{slug}' taken, using '{candidate}'")
        return candidate

    return slug
