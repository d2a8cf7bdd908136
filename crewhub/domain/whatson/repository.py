"""What's On repository - Database operations for events and RSVPs"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from ...models import WhatsOnEvent, WhatsOnRsvp, WhatsOnRsvpDate, WhatsOnSchedule, WhatsOnTag

ACTIVE_RSVP = "confirmed"


class WhatsOnRepository:
    """Repository for What's On database operations"""

    @staticmethod
    def slug_exists(db: Session, slug: str) -> bool:
        return db.query(WhatsOnEvent.id).filter(WhatsOnEvent.slug == slug).first() is not None

    @staticmethod
    def get_by_id(db: Session, event_id: int) -> Optional[WhatsOnEvent]:
        return db.query(WhatsOnEvent).filter(WhatsOnEvent.id == event_id).first()

    @staticmethod
    def get_by_id_or_slug(db: Session, id_or_slug: str) -> Optional[WhatsOnEvent]:
        query = db.query(WhatsOnEvent).options(
            selectinload(WhatsOnEvent.schedule), selectinload(WhatsOnEvent.tags)
        )
        if id_or_slug.isdigit():
            return query.filter(WhatsOnEvent.id == int(id_or_slug)).first()
        return query.filter(WhatsOnEvent.slug == id_or_slug).first()

    @staticmethod
    def list_events(
        db: Session,
        status: str,
        is_paid: Optional[bool],
        is_online: Optional[bool],
        page: int,
        limit: int,
    ) -> tuple[list[WhatsOnEvent], int]:
        query = db.query(WhatsOnEvent).filter(WhatsOnEvent.status == status)
        if is_paid is not None:
            query = query.filter(WhatsOnEvent.is_paid == is_paid)
        if is_online is not None:
            query = query.filter(WhatsOnEvent.is_online == is_online)

        total = query.count()
        events = (
            query.options(
                selectinload(WhatsOnEvent.schedule),
                selectinload(WhatsOnEvent.tags),
                selectinload(WhatsOnEvent.creator),
            )
            .order_by(WhatsOnEvent.created_at.desc(), WhatsOnEvent.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return events, total

    @staticmethod
    def list_by_creator(db: Session, creator_id: int) -> list[WhatsOnEvent]:
        return (
            db.query(WhatsOnEvent)
            .options(selectinload(WhatsOnEvent.schedule), selectinload(WhatsOnEvent.tags))
            .filter(WhatsOnEvent.creator_id == creator_id)
            .order_by(WhatsOnEvent.created_at.desc(), WhatsOnEvent.id.desc())
            .all()
        )

    @staticmethod
    def create(
        db: Session, creator_id: int, schedule: list[dict], tags: list[str], **event_data
    ) -> WhatsOnEvent:
        event = WhatsOnEvent(creator_id=creator_id, **event_data)
        event.schedule = [WhatsOnSchedule(**entry) for entry in schedule]
        event.tags = [WhatsOnTag(tag=tag) for tag in tags]
        db.add(event)
        db.commit()
        db.refresh(event)
        return event

    @staticmethod
    def update(
        db: Session,
        event: WhatsOnEvent,
        schedule: Optional[list[dict]] = None,
        tags: Optional[list[str]] = None,
        **updates,
    ) -> WhatsOnEvent:
        for key, value in updates.items():
            if hasattr(event, key):
                setattr(event, key, value)
        if schedule is not None:
            old_ids = [entry.id for entry in event.schedule]
            if old_ids:
                db.query(WhatsOnRsvpDate).filter(
                    WhatsOnRsvpDate.schedule_id.in_(old_ids)
                ).delete(synchronize_session=False)
            event.schedule = [WhatsOnSchedule(**entry) for entry in schedule]
        if tags is not None:
            event.tags = [WhatsOnTag(tag=tag) for tag in tags]
        db.commit()
        db.refresh(event)
        return event

    @staticmethod
    def delete(db: Session, event: WhatsOnEvent) -> None:
        db.delete(event)
        db.commit()

    # RSVP Methods
    @staticmethod
    def rsvp_counts(db: Session, event_ids: list[int]) -> dict[int, tuple[int, int]]:
        """Map event id to (active rsvp count, spots taken)"""
        if not event_ids:
            return {}
        rows = (
            db.query(
                WhatsOnRsvp.event_id,
                func.count(WhatsOnRsvp.id),
                func.coalesce(func.sum(WhatsOnRsvp.number_of_spots), 0),
            )
            .filter(WhatsOnRsvp.event_id.in_(event_ids), WhatsOnRsvp.status == ACTIVE_RSVP)
            .group_by(WhatsOnRsvp.event_id)
            .all()
        )
        return {event_id: (int(count), int(spots)) for event_id, count, spots in rows}

    @staticmethod
    def get_rsvp(db: Session, event_id: int, user_id: int) -> Optional[WhatsOnRsvp]:
        return (
            db.query(WhatsOnRsvp)
            .filter(WhatsOnRsvp.event_id == event_id, WhatsOnRsvp.user_id == user_id)
            .first()
        )

    @staticmethod
    def last_ticket_number(db: Session, prefix: str) -> Optional[str]:
        """Highest ticket issued with the given year prefix"""
        # Zero padded sequences sort correctly as text
        row = (
            db.query(WhatsOnRsvp.ticket_number)
            .filter(WhatsOnRsvp.ticket_number.like(f"{prefix}%"))
            .order_by(WhatsOnRsvp.ticket_number.desc())
            .first()
        )
        return row[0] if row else None

    @staticmethod
    def reference_exists(db: Session, reference_number: str) -> bool:
        return (
            db.query(WhatsOnRsvp.id)
            .filter(WhatsOnRsvp.reference_number == reference_number)
            .first()
            is not None
        )

    @staticmethod
    def save_rsvp(db: Session, rsvp: WhatsOnRsvp, schedule_ids: list[int]) -> WhatsOnRsvp:
        """Stage an RSVP and its selected dates; the caller commits"""
        rsvp.dates = [WhatsOnRsvpDate(schedule_id=schedule_id) for schedule_id in schedule_ids]
        db.add(rsvp)
        db.flush()
        return rsvp

    @staticmethod
    def list_rsvps(db: Session, event_id: int) -> list[WhatsOnRsvp]:
        return (
            db.query(WhatsOnRsvp)
            .options(selectinload(WhatsOnRsvp.user), selectinload(WhatsOnRsvp.dates))
            .filter(WhatsOnRsvp.event_id == event_id, WhatsOnRsvp.status == ACTIVE_RSVP)
            .order_by(WhatsOnRsvp.created_at.asc(), WhatsOnRsvp.id.asc())
            .all()
        )

    @staticmethod
    def list_rsvps_for_user(db: Session, user_id: int) -> list[WhatsOnRsvp]:
        return (
            db.query(WhatsOnRsvp)
            .options(
                selectinload(WhatsOnRsvp.event),
                selectinload(WhatsOnRsvp.dates).selectinload(WhatsOnRsvpDate.schedule),
            )
            .filter(WhatsOnRsvp.user_id == user_id)
            .order_by(WhatsOnRsvp.created_at.desc(), WhatsOnRsvp.id.desc())
            .all()
        )
