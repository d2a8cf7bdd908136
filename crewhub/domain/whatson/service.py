"""What's On service - Business logic for events, RSVPs and ticketing"""

import csv
import logging
from datetime import date, datetime
from io import StringIO
from typing import Optional

from fastapi import HTTPException
from fastapi.responses import StreamingResponse
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import UserProfile, WhatsOnEvent, WhatsOnRsvp, WhatsOnSchedule
from ...shared.responses import normalize_pagination, pagination_meta
from ...utils.calendar_utils import format_time_range, group_dates_by_month
from ...utils.formatting import format_budget_label
from ...utils.sanitization import csv_safe
from ...utils.slugs import generate_unique_slug
from ...utils.tickets import generate_reference_number, next_ticket_number, ticket_prefix
from ..profiles.service import serialize_profile_summary
from .repository import ACTIVE_RSVP, WhatsOnRepository
from .schemas import EventCreate, EventUpdate, RsvpCreate

logger = logging.getLogger(__name__)

CANCELLED_RSVP = "cancelled"
MAX_TICKET_ATTEMPTS = 5
MAX_REFERENCE_ATTEMPTS = 10

EXPORT_COLUMNS = [
    "Name",
    "Email",
    "Ticket Number",
    "Reference",
    "Spots",
    "Payment Status",
    "RSVP Date",
]


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


def _sorted_schedule(entries) -> list[WhatsOnSchedule]:
    return sorted(entries, key=lambda s: (s.event_date, s.start_time))


def serialize_schedule_entry(entry: WhatsOnSchedule) -> dict:
    return {
        "id": entry.id,
        "event_date": _iso(entry.event_date),
        "dateLabel": entry.event_date.strftime("%a, %b %d %Y"),
        "start_time": entry.start_time,
        "end_time": entry.end_time,
        "timeRange": format_time_range(entry.start_time, entry.end_time),
        "timezone": entry.timezone,
    }


def available_spots(event: WhatsOnEvent, spots_taken: int) -> Optional[int]:
    """Remaining capacity, or None for unlimited events"""
    if event.is_unlimited:
        return None
    return max((event.total_spots or 0) - spots_taken, 0)


def serialize_event(
    event: WhatsOnEvent, rsvp_count: int = 0, spots_taken: int = 0, include_creator: bool = True
) -> dict:
    schedule = _sorted_schedule(event.schedule)
    data = {
        "id": event.id,
        "slug": event.slug,
        "title": event.title,
        "description": event.description,
        "thumbnail_url": event.thumbnail_url,
        "is_online": event.is_online,
        "location": event.location,
        "online_link": event.online_link,
        "is_paid": event.is_paid,
        "price": event.price,
        "currency": event.currency,
        "priceLabel": format_budget_label(event.price, event.currency, False) if event.is_paid else "Free",
        "is_unlimited": event.is_unlimited,
        "total_spots": event.total_spots,
        "max_spots_per_person": event.max_spots_per_person,
        "status": event.status,
        "schedule": [serialize_schedule_entry(s) for s in schedule],
        "calendarMonths": group_dates_by_month({s.event_date for s in schedule}),
        "tags": [t.tag for t in event.tags],
        "rsvpCount": rsvp_count,
        "availableSpots": available_spots(event, spots_taken),
        "created_at": _iso(event.created_at),
    }
    if include_creator:
        data["creator"] = serialize_profile_summary(event.creator)
    return data


def serialize_rsvp(rsvp: WhatsOnRsvp, include_event: bool = False) -> dict:
    data = {
        "id": rsvp.id,
        "event_id": rsvp.event_id,
        "number_of_spots": rsvp.number_of_spots,
        "ticket_number": rsvp.ticket_number,
        "reference_number": rsvp.reference_number,
        "payment_status": rsvp.payment_status,
        "status": rsvp.status,
        "dates": [
            serialize_schedule_entry(s)
            for s in _sorted_schedule(d.schedule for d in rsvp.dates if d.schedule is not None)
        ],
        "created_at": _iso(rsvp.created_at),
    }
    if include_event and rsvp.event is not None:
        event = rsvp.event
        data["event"] = {
            "id": event.id,
            "slug": event.slug,
            "title": event.title,
            "thumbnail_url": event.thumbnail_url,
            "is_online": event.is_online,
            "location": event.location,
            "status": event.status,
        }
    else:
        data["attendee"] = serialize_profile_summary(rsvp.user)
    return data


class WhatsOnService:
    """Service layer for What's On business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = WhatsOnRepository()

    def _get_event(self, event_id: int) -> WhatsOnEvent:
        event = self.repo.get_by_id(self.db, event_id)
        if not event:
            raise HTTPException(status_code=404, detail="Event not found")
        return event

    def _get_own_event(self, event_id: int, user: UserProfile) -> WhatsOnEvent:
        event = self._get_event(event_id)
        if event.creator_id != user.id:
            raise HTTPException(status_code=403, detail="Only the event creator can do this")
        return event

    def _serialize_many(self, events: list[WhatsOnEvent], include_creator: bool = True) -> list[dict]:
        counts = self.repo.rsvp_counts(self.db, [e.id for e in events])
        return [
            serialize_event(e, *counts.get(e.id, (0, 0)), include_creator=include_creator)
            for e in events
        ]

    def _spots_taken(self, event_id: int) -> int:
        return self.repo.rsvp_counts(self.db, [event_id]).get(event_id, (0, 0))[1]

    def list_events(
        self,
        page: Optional[int],
        limit: Optional[int],
        status: str = "published",
        is_paid: Optional[bool] = None,
        is_online: Optional[bool] = None,
    ) -> dict:
        page, limit = normalize_pagination(page, limit)
        events, total = self.repo.list_events(self.db, status, is_paid, is_online, page, limit)
        return {
            "events": self._serialize_many(events),
            "pagination": pagination_meta(page, limit, total),
        }

    def list_my_events(self, user: UserProfile) -> list[dict]:
        return self._serialize_many(self.repo.list_by_creator(self.db, user.id), include_creator=False)

    def get_event(self, id_or_slug: str) -> dict:
        event = self.repo.get_by_id_or_slug(self.db, id_or_slug)
        if not event:
            raise HTTPException(status_code=404, detail="Event not found")
        return self._serialize_many([event])[0]

    def create_event(self, data: EventCreate, user: UserProfile) -> dict:
        slug = generate_unique_slug(data.title, lambda s: self.repo.slug_exists(self.db, s))
        event = self.repo.create(
            self.db,
            user.id,
            schedule=[entry.model_dump() for entry in data.schedule],
            tags=data.tags,
            slug=slug,
            **data.model_dump(exclude={"schedule", "tags"}),
        )
        logger.info(f"✅ Event {event.id} '{event.slug}' created by user {user.id}")
        return serialize_event(event)

    def update_event(self, event_id: int, data: EventUpdate, user: UserProfile) -> dict:
        event = self._get_own_event(event_id, user)

        updates = {
            key: value
            for key, value in data.model_dump(exclude_unset=True, exclude={"schedule", "tags"}).items()
            if value is not None
        }

        is_online = updates.get("is_online", event.is_online)
        location = updates.get("location", event.location)
        if not is_online and not location:
            raise HTTPException(status_code=400, detail="Location is required for in-person events")

        if updates.get("is_unlimited", event.is_unlimited):
            updates["total_spots"] = None
        else:
            total_spots = updates.get("total_spots", event.total_spots)
            if not total_spots:
                raise HTTPException(
                    status_code=400, detail="Total spots must be at least 1 unless spots are unlimited"
                )
            if total_spots < self._spots_taken(event.id):
                raise HTTPException(
                    status_code=400, detail="Total spots cannot be lower than spots already booked"
                )

        if updates.get("is_paid") is False:
            updates["price"] = None

        schedule = [s.model_dump() for s in data.schedule] if data.schedule is not None else None
        event = self.repo.update(self.db, event, schedule=schedule, tags=data.tags, **updates)
        logger.info(f"✅ Event {event.id} updated by user {user.id}")
        return self._serialize_many([event])[0]

    def delete_event(self, event_id: int, user: UserProfile) -> None:
        event = self._get_own_event(event_id, user)
        self.repo.delete(self.db, event)
        logger.info(f"🗑️ Event {event_id} deleted by user {user.id}")

    # RSVP Methods
    def _new_reference_number(self) -> str:
        for _ in range(MAX_REFERENCE_ATTEMPTS):
            reference = generate_reference_number()
            if not self.repo.reference_exists(self.db, reference):
                return reference
            logger.warning(f"⚠️ Reference number collision on {reference}, regenerating")
        raise HTTPException(status_code=503, detail="Could not issue a reference number")

    def _selected_schedule_ids(self, event: WhatsOnEvent, requested: list[int]) -> list[int]:
        event_ids = [s.id for s in _sorted_schedule(event.schedule)]
        if not requested:
            return event_ids

        selected = list(dict.fromkeys(requested))
        unknown = [schedule_id for schedule_id in selected if schedule_id not in event_ids]
        if unknown:
            raise HTTPException(
                status_code=400, detail="Selected dates do not belong to this event"
            )
        return selected

    def rsvp(self, event_id: int, data: RsvpCreate, user: UserProfile) -> dict:
        """
        Reserve spots on an event and issue a ticket.

        Tickets are numbered WO-<year>-NNNNNN, sequential per year across all
        events. A concurrent booking that grabs the same ticket number fails
        the unique constraint, so issuance is retried with a fresh number.
        """
        for attempt in range(1, MAX_TICKET_ATTEMPTS + 1):
            event = self._get_event(event_id)
            if event.status != "published":
                raise HTTPException(status_code=400, detail="This event is not open for RSVPs")

            spots = data.number_of_spots
            if not 1 <= spots <= event.max_spots_per_person:
                raise HTTPException(
                    status_code=400,
                    detail=f"You can reserve between 1 and {event.max_spots_per_person} spots",
                )

            rsvp = self.repo.get_rsvp(self.db, event.id, user.id)
            if rsvp and rsvp.status == ACTIVE_RSVP:
                raise HTTPException(status_code=409, detail="You have already RSVP'd to this event")

            remaining = available_spots(event, self._spots_taken(event.id))
            if remaining is not None and spots > remaining:
                raise HTTPException(status_code=409, detail="Not enough spots")

            schedule_ids = self._selected_schedule_ids(event, data.schedule_ids)

            year = date.today().year
            last_ticket = self.repo.last_ticket_number(self.db, ticket_prefix(year))
            if rsvp is None:
                rsvp = WhatsOnRsvp(event_id=event.id, user_id=user.id)
            else:
                # Re-booking a cancelled RSVP is a new booking
                rsvp.created_at = func.now()
            rsvp.number_of_spots = spots
            rsvp.ticket_number = next_ticket_number(last_ticket, year)
            rsvp.reference_number = self._new_reference_number()
            rsvp.payment_status = "pending" if event.is_paid else "not_required"
            rsvp.status = ACTIVE_RSVP

            try:
                self.repo.save_rsvp(self.db, rsvp, schedule_ids)
                self.db.commit()
            except IntegrityError:
                self.db.rollback()
                logger.warning(
                    f"⚠️ RSVP issuance conflict for event {event_id} (attempt {attempt}), retrying"
                )
                continue

            logger.info(
                f"🎟️ User {user.id} RSVP'd to event {event.id}: {rsvp.ticket_number} ({spots} spots)"
            )
            return {
                "ticket_number": rsvp.ticket_number,
                "reference_number": rsvp.reference_number,
            }

        logger.error(f"❌ Could not issue a ticket for event {event_id} after {MAX_TICKET_ATTEMPTS} attempts")
        raise HTTPException(status_code=503, detail="Could not issue a ticket, please try again")

    def cancel_rsvp(self, event_id: int, user: UserProfile) -> None:
        event = self._get_event(event_id)
        rsvp = self.repo.get_rsvp(self.db, event.id, user.id)
        if not rsvp or rsvp.status != ACTIVE_RSVP:
            raise HTTPException(status_code=404, detail="RSVP not found")

        rsvp.status = CANCELLED_RSVP
        self.db.commit()
        logger.info(f"🚫 User {user.id} cancelled RSVP {rsvp.ticket_number}")

    def list_my_rsvps(self, user: UserProfile) -> list[dict]:
        return [
            serialize_rsvp(r, include_event=True)
            for r in self.repo.list_rsvps_for_user(self.db, user.id)
        ]

    def list_rsvps(self, event_id: int, user: UserProfile) -> list[dict]:
        event = self._get_own_event(event_id, user)
        return [serialize_rsvp(r) for r in self.repo.list_rsvps(self.db, event.id)]

    def export_rsvps_csv(self, event_id: int, user: UserProfile) -> StreamingResponse:
        """Export the active RSVPs of an event as CSV"""
        event = self._get_own_event(event_id, user)
        rsvps = self.repo.list_rsvps(self.db, event.id)
        logger.info(f"📊 RSVP export for event {event.id} requested by user {user.id}")

        output = StringIO()
        writer = csv.writer(output)
        writer.writerow(EXPORT_COLUMNS)
        for rsvp in rsvps:
            attendee = rsvp.user
            writer.writerow(
                [
                    csv_safe(attendee.full_name),
                    csv_safe(attendee.email),
                    rsvp.ticket_number,
                    rsvp.reference_number,
                    rsvp.number_of_spots,
                    rsvp.payment_status,
                    rsvp.created_at.strftime("%Y-%m-%d %H:%M:%S") if rsvp.created_at else "",
                ]
            )

        output.seek(0)
        filename = f"{event.slug}_rsvps_{datetime.now().strftime('%Y%m%d_%H%M%S')}.csv"
        logger.info(f"✅ RSVP export successful: {filename} ({len(rsvps)} rsvps)")

        return StreamingResponse(
            iter([output.getvalue()]),
            media_type="text/csv",
            headers={
                "Content-Disposition": f"attachment; filename={filename}",
                "Cache-Control": "no-cache",
            },
        )
