"""Availability service - Business logic for crew availability calendars"""

import logging
from datetime import date
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import CrewAvailability, UserProfile
from ...utils.calendar_utils import (
    days_in_month,
    group_dates_by_month,
    parse_day_ranges,
    parse_month_label,
)
from .repository import AvailabilityRepository
from .schemas import CONFLICT_STATUSES, AvailabilityBulk, AvailabilityUpsert

logger = logging.getLogger(__name__)


def serialize_availability(entry: CrewAvailability) -> dict:
    return {
        "date": entry.availability_date.isoformat(),
        "status": entry.status,
        "note": entry.note,
    }


class AvailabilityService:
    """Service layer for crew availability"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AvailabilityRepository()

    def list_availability(
        self, user: UserProfile, start: Optional[date] = None, end: Optional[date] = None
    ) -> dict:
        if start and end and end < start:
            raise HTTPException(status_code=400, detail="End date must be on or after start date")

        entries = self.repo.list_for_user(self.db, user.id, start, end)
        by_status = {}
        for entry in entries:
            by_status.setdefault(entry.status, []).append(entry.availability_date)

        return {
            "entries": [serialize_availability(e) for e in entries],
            "calendarMonths": group_dates_by_month(e.availability_date for e in entries),
            "calendarMonthsByStatus": {
                status: group_dates_by_month(dates) for status, dates in by_status.items()
            },
        }

    def set_availability(self, data: AvailabilityUpsert, user: UserProfile) -> dict:
        entry = self.repo.upsert(self.db, user.id, data.date, data.status, data.note)
        self.db.commit()
        self.db.refresh(entry)
        logger.info(f"📅 User {user.id} marked {data.date} as {data.status}")
        return serialize_availability(entry)

    def set_bulk_availability(self, data: AvailabilityBulk, user: UserProfile) -> dict:
        parsed = parse_month_label(data.month)
        if parsed is None:
            raise HTTPException(
                status_code=400, detail=f"Invalid month '{data.month}', expected e.g. 'Sep 2025'"
            )

        year, month_index = parsed
        days = parse_day_ranges(data.days, max_day=days_in_month(year, month_index))
        if not days:
            raise HTTPException(status_code=400, detail=f"No valid days in '{data.days}'")

        entries = [
            self.repo.upsert(self.db, user.id, date(year, month_index + 1, day), data.status, data.note)
            for day in days
        ]
        self.db.commit()

        logger.info(
            f"📅 User {user.id} marked {len(entries)} days of {data.month} as {data.status}"
        )
        return {
            "updated": len(entries),
            "entries": [serialize_availability(e) for e in entries],
        }

    def delete_availability(self, day: date, user: UserProfile) -> None:
        entry = self.repo.get_for_date(self.db, user.id, day)
        if not entry:
            raise HTTPException(status_code=404, detail="No availability set for this date")
        self.repo.delete(self.db, entry)

    def check_conflict(self, day: date, user: UserProfile) -> dict:
        """A date conflicts when the crew member has it on hold or marked not available"""
        entry = self.repo.get_for_date(self.db, user.id, day)
        status = entry.status if entry else None
        return {
            "date": day.isoformat(),
            "hasConflict": status in CONFLICT_STATUSES,
            "status": status,
        }
