"""What's On router - FastAPI endpoints for events and RSVPs"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import UserProfile
from ...rate_limiter import create_rate_limiter
from ...shared.responses import success_response
from .schemas import EventCreate, EventUpdate, RsvpCreate
from .service import WhatsOnService

router = APIRouter(prefix="/whatson", tags=["What's On"])

rate_limit_rsvp = create_rate_limiter(limit=20, window_seconds=3600, key_prefix="whatson_rsvp")


def get_whatson_service(db: Session = Depends(get_db)) -> WhatsOnService:
    """Dependency injection for WhatsOnService"""
    return WhatsOnService(db)


# ============================================================================
# EVENTS
# ============================================================================


@router.get("")
async def list_events(
    page: Optional[int] = Query(1),
    limit: Optional[int] = Query(None),
    status: str = Query("published"),
    is_paid: Optional[bool] = Query(None, alias="isPaid"),
    is_online: Optional[bool] = Query(None, alias="isOnline"),
    service: WhatsOnService = Depends(get_whatson_service),
):
    """Public listing of events, published only unless another status is requested"""
    return success_response(
        service.list_events(page, limit, status, is_paid, is_online), "Events retrieved"
    )


@router.get("/my")
async def list_my_events(
    current_user: UserProfile = Depends(get_current_user),
    service: WhatsOnService = Depends(get_whatson_service),
):
    return success_response(service.list_my_events(current_user), "Events retrieved")


@router.get("/rsvps/my")
async def list_my_rsvps(
    current_user: UserProfile = Depends(get_current_user),
    service: WhatsOnService = Depends(get_whatson_service),
):
    """Tickets held by the current user, newest first"""
    return success_response(service.list_my_rsvps(current_user), "RSVPs retrieved")


@router.get("/{id_or_slug}")
async def get_event(id_or_slug: str, service: WhatsOnService = Depends(get_whatson_service)):
    return success_response(service.get_event(id_or_slug), "Event retrieved")


@router.post("", status_code=201)
async def create_event(
    data: EventCreate,
    current_user: UserProfile = Depends(get_current_user),
    service: WhatsOnService = Depends(get_whatson_service),
):
    return success_response(service.create_event(data, current_user), "Event created successfully")


@router.patch("/{event_id}")
async def update_event(
    event_id: int,
    data: EventUpdate,
    current_user: UserProfile = Depends(get_current_user),
    service: WhatsOnService = Depends(get_whatson_service),
):
    return success_response(service.update_event(event_id, data, current_user), "Event updated")


@router.delete("/{event_id}")
async def delete_event(
    event_id: int,
    current_user: UserProfile = Depends(get_current_user),
    service: WhatsOnService = Depends(get_whatson_service),
):
    service.delete_event(event_id, current_user)
    return success_response(None, "Event deleted")


# ============================================================================
# RSVPS
# ============================================================================


@router.post("/{event_id}/rsvp", status_code=201)
async def create_rsvp(
    event_id: int,
    data: RsvpCreate,
    current_user: UserProfile = Depends(get_current_user),
    service: WhatsOnService = Depends(get_whatson_service),
    _: None = Depends(rate_limit_rsvp),
):
    return success_response(service.rsvp(event_id, data, current_user), "RSVP confirmed")


@router.delete("/{event_id}/rsvp")
async def cancel_rsvp(
    event_id: int,
    current_user: UserProfile = Depends(get_current_user),
    service: WhatsOnService = Depends(get_whatson_service),
):
    service.cancel_rsvp(event_id, current_user)
    return success_response(None, "RSVP cancelled")


@router.get("/{event_id}/rsvp/list")
async def list_event_rsvps(
    event_id: int,
    current_user: UserProfile = Depends(get_current_user),
    service: WhatsOnService = Depends(get_whatson_service),
):
    """Attendees of an event (creator only)"""
    return success_response(service.list_rsvps(event_id, current_user), "RSVPs retrieved")


@router.get("/{event_id}/rsvp/export")
async def export_event_rsvps(
    event_id: int,
    current_user: UserProfile = Depends(get_current_user),
    service: WhatsOnService = Depends(get_whatson_service),
):
    """Download attendees as CSV (creator only)"""
    return service.export_rsvps_csv(event_id, current_user)
