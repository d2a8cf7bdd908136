"""
Calendar helpers shared by gigs, availability and What's On scheduling.

Gig dates are stored the way organisers type them: a month label ("Sep 2025")
plus a day-range string ("1-5, 10, 15-20"). The frontend calendar widget wants
zero-based month indexes with a flat list of highlighted days, and the event
editor renders a Monday-first 6x7 month grid.
"""

import calendar
import logging
import re
from datetime import MAXYEAR, MINYEAR, date
from typing import Any, Iterable, Optional

logger = logging.getLogger(__name__)

_SINGLE_DAY = re.compile(r"^(\d+)$", re.ASCII)
_DAY_RANGE = re.compile(r"^(\d+)\s*[-–]\s*(\d+)$", re.ASCII)
_YEAR = re.compile(r"^\d{1,4}$", re.ASCII)
_TIME_LABEL = re.compile(r"(\d{1,2}):(\d{2})\s*(AM|PM)", re.IGNORECASE)

_MONTH_NAMES = [name.lower() for name in calendar.month_name]  # index 0 is ""

GRID_CELLS = 42
DEFAULT_START_TIME = "21:00"
DEFAULT_END_TIME = "22:00"


def parse_day_ranges(text: Optional[str], max_day: int = 31) -> list[int]:
    """
    Parse a comma separated day-range string.

    "1-5, 10, 15-20" -> [1, 2, 3, 4, 5, 10, 15, 16, 17, 18, 19, 20]

    Tokens that do not parse (garbage, reversed ranges, days outside
    1..max_day) are skipped; a range running past max_day is cut at max_day.
    Never raises.
    """
    if not text:
        return []

    days: set[int] = set()
    for token in str(text).split(","):
        token = token.strip()
        if not token:
            continue

        single = _SINGLE_DAY.match(token)
        if single:
            day = int(single.group(1))
            if 1 <= day <= max_day:
                days.add(day)
            continue

        span = _DAY_RANGE.match(token)
        if span:
            start, end = int(span.group(1)), int(span.group(2))
            if 1 <= start <= end and start <= max_day:
                days.update(range(start, min(end, max_day) + 1))
            continue

        logger.debug(f"Ignoring unparseable day token: {token!r}")

    return sorted(days)


def format_day_ranges(days: Iterable[int]) -> str:
    """Collapse days back into range notation: [1, 2, 3, 5] -> "1-3, 5" """
    ordered = sorted(set(days))
    if not ordered:
        return ""

    parts = []
    start = prev = ordered[0]
    for day in ordered[1:]:
        if day == prev + 1:
            prev = day
            continue
        parts.append(f"{start}-{prev}" if start != prev else str(start))
        start = prev = day
    parts.append(f"{start}-{prev}" if start != prev else str(start))
    return ", ".join(parts)


def parse_month_label(label: Optional[str]) -> Optional[tuple[int, int]]:
    """
    Parse "Sep 2025" / "September 2025" into (year, zero-based month index).

    Returns None for anything that is not a month name followed by a year
    in 1..9999.
    """
    if not label:
        return None

    parts = str(label).replace(",", " ").split()
    if len(parts) != 2:
        return None

    name, year_raw = parts[0].lower(), parts[1]
    if not _YEAR.match(year_raw) or len(name) < 3:
        return None

    year = int(year_raw)
    if not MINYEAR <= year <= MAXYEAR:
        return None

    for number, full_name in enumerate(_MONTH_NAMES):
        if number and full_name.startswith(name):
            return year, number - 1

    return None


def format_month_label(year: int, month_index: int) -> str:
    """(2025, 8) -> "Sep 2025" """
    return f"{calendar.month_abbr[month_index + 1]} {year}"


def days_in_month(year: int, month_index: int) -> int:
    return calendar.monthrange(year, month_index + 1)[1]


def _entry_field(entry: Any, name: str) -> Any:
    if isinstance(entry, dict):
        return entry.get(name)
    return getattr(entry, name, None)


def transform_calendar_months(entries: Iterable[Any]) -> list[dict]:
    """
    Transform stored month/day-range rows into the calendar widget format.

    Args:
        entries: dicts or objects with ``month`` ("Sep 2025") and ``days``
            ("1-5, 10") fields

    Returns:
        [{"month": 8, "year": 2025, "highlightedDays": [1, 2, 3, 4, 5, 10]}]
        Entries for the same month are merged, in order of first appearance.
    """
    months: dict[tuple[int, int], set[int]] = {}

    for entry in entries or []:
        parsed = parse_month_label(_entry_field(entry, "month"))
        if parsed is None:
            logger.debug(f"Skipping calendar entry with invalid month: {entry!r}")
            continue

        year, month_index = parsed
        days = parse_day_ranges(
            _entry_field(entry, "days"), max_day=days_in_month(year, month_index)
        )
        months.setdefault((year, month_index), set()).update(days)

    return [
        {"month": month_index, "year": year, "highlightedDays": sorted(days)}
        for (year, month_index), days in months.items()
    ]


def group_dates_by_month(dates: Iterable[date]) -> list[dict]:
    """Build calendar months directly from concrete dates, in date order"""
    entries = [
        {"month": format_month_label(d.year, d.month - 1), "days": str(d.day)}
        for d in sorted(dates)
    ]
    return transform_calendar_months(entries)


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move a 1-based (year, month) pair by delta months"""
    total = year * 12 + (month - 1) + delta
    return total // 12, total % 12 + 1


def build_calendar_cells(year: int, month: int) -> list[dict]:
    """
    Build the 42 cell, Monday-first month grid used by the event editor.

    Args:
        year: Calendar year
        month: 1-based month

    Returns:
        List of {"day": int, "type": "prev" | "current" | "next"}
    """
    shift = calendar.weekday(year, month, 1)  # Monday == 0
    month_length = calendar.monthrange(year, month)[1]
    prev_year, prev_month = shift_month(year, month, -1)
    prev_length = calendar.monthrange(prev_year, prev_month)[1]

    cells = []
    for index in range(GRID_CELLS):
        day_number = index - shift + 1
        if day_number < 1:
            cells.append({"day": prev_length + day_number, "type": "prev"})
        elif day_number > month_length:
            cells.append({"day": day_number - month_length, "type": "next"})
        else:
            cells.append({"day": day_number, "type": "current"})
    return cells


def time_to_parts(value: str) -> tuple[int, int, str]:
    """Split "21:05" into (9, 5, "PM")"""
    hours_raw, _, minutes_raw = (value or "00:00").partition(":")
    hours = int(hours_raw) if hours_raw.isdigit() else 0
    minutes = int(minutes_raw) if minutes_raw.isdigit() else 0
    period = "PM" if hours >= 12 else "AM"
    return hours % 12 or 12, minutes, period


def parts_to_time(hours: int, minutes: int, period: str) -> str:
    """Convert 12-hour parts to "HH:MM", clamping out of range values"""
    safe_hours = min(max(hours or 1, 1), 12)
    safe_minutes = min(max(minutes or 0, 0), 59)
    hour24 = safe_hours % 12
    if period.upper() == "PM":
        hour24 += 12
    return f"{hour24:02d}:{safe_minutes:02d}"


def readable_time(value: str) -> str:
    """Format "21:00" as "9:00 PM" """
    hours, minutes, period = time_to_parts(value)
    return f"{hours}:{minutes:02d} {period}"


def label_to_24h(label: Optional[str], fallback: str = DEFAULT_START_TIME) -> str:
    """Convert "9:05 pm" to "21:05", or return fallback when the label does not parse"""
    if not label:
        return fallback

    match = _TIME_LABEL.search(label.strip())
    if not match:
        return fallback

    hours = int(match.group(1)) % 12
    if match.group(3).upper() == "PM":
        hours += 12
    return f"{hours:02d}:{int(match.group(2)):02d}"


def split_time_range(value: Optional[str]) -> list[str]:
    """Split "9:00 PM - 10:00 PM" into its start and end labels"""
    if not value:
        return []
    return [part.strip() for part in value.split("-")]


def format_time_range(start_time: str, end_time: str) -> str:
    return f"{readable_time(start_time)} - {readable_time(end_time)}"


def build_schedule_entries(
    year: int,
    month: int,
    days: Iterable[int],
    start_time: str = DEFAULT_START_TIME,
    end_time: str = DEFAULT_END_TIME,
    timezone: str = "IST",
) -> list[dict]:
    """Expand days picked on the month grid into schedule rows"""
    month_length = calendar.monthrange(year, month)[1]
    entries = []
    for day in sorted(set(days)):
        if not 1 <= day <= month_length:
            continue
        full_date = date(year, month, day)
        entries.append(
            {
                "date": full_date.isoformat(),
                "dateLabel": full_date.strftime("%a, %b %d %Y"),
                "timeRange": format_time_range(start_time, end_time),
                "timezone": timezone,
            }
        )
    return entries
