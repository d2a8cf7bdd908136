"""Availability repository - Database operations for crew availability"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ...models import CrewAvailability


class AvailabilityRepository:
    @staticmethod
    def list_for_user(
        db: Session, user_id: int, start: Optional[date] = None, end: Optional[date] = None
    ) -> list[CrewAvailability]:
        query = db.query(CrewAvailability).filter(CrewAvailability.user_id == user_id)
        if start:
            query = query.filter(CrewAvailability.availability_date >= start)
        if end:
            query = query.filter(CrewAvailability.availability_date <= end)
        return query.order_by(CrewAvailability.availability_date.asc()).all()

    @staticmethod
    def get_for_date(db: Session, user_id: int, day: date) -> Optional[CrewAvailability]:
        return (
            db.query(CrewAvailability)
            .filter(CrewAvailability.user_id == user_id, CrewAvailability.availability_date == day)
            .first()
        )

    @staticmethod
    def upsert(
        db: Session, user_id: int, day: date, status: str, note: Optional[str]
    ) -> CrewAvailability:
        """Insert or update one day; the caller commits"""
        entry = AvailabilityRepository.get_for_date(db, user_id, day)
        if entry is None:
            entry = CrewAvailability(user_id=user_id, availability_date=day)
            db.add(entry)
        entry.status = status
        entry.note = note
        db.flush()
        return entry

    @staticmethod
    def delete(db: Session, entry: CrewAvailability) -> None:
        db.delete(entry)
        db.commit()
