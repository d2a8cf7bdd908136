"""Availability router - FastAPI endpoints for crew availability"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import UserProfile
from ...shared.responses import success_response
from .schemas import AvailabilityBulk, AvailabilityUpsert
from .service import AvailabilityService

router = APIRouter(prefix="/availability", tags=["Availability"])


def get_availability_service(db: Session = Depends(get_db)) -> AvailabilityService:
    """Dependency injection for AvailabilityService"""
    return AvailabilityService(db)


@router.get("")
async def list_availability(
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    current_user: UserProfile = Depends(get_current_user),
    service: AvailabilityService = Depends(get_availability_service),
):
    return success_response(
        service.list_availability(current_user, start, end), "Availability retrieved"
    )


@router.get("/check")
async def check_availability(
    day: date = Query(..., alias="date"),
    current_user: UserProfile = Depends(get_current_user),
    service: AvailabilityService = Depends(get_availability_service),
):
    """Whether the current user is booked (hold/na) on a date"""
    return success_response(service.check_conflict(day, current_user), "Availability checked")


@router.post("")
async def set_availability(
    data: AvailabilityUpsert,
    current_user: UserProfile = Depends(get_current_user),
    service: AvailabilityService = Depends(get_availability_service),
):
    return success_response(service.set_availability(data, current_user), "Availability saved")


@router.post("/bulk")
async def set_bulk_availability(
    data: AvailabilityBulk,
    current_user: UserProfile = Depends(get_current_user),
    service: AvailabilityService = Depends(get_availability_service),
):
    return success_response(
        service.set_bulk_availability(data, current_user), "Availability saved"
    )


@router.delete("/{availability_date}")
async def delete_availability(
    availability_date: date,
    current_user: UserProfile = Depends(get_current_user),
    service: AvailabilityService = Depends(get_availability_service),
):
    service.delete_availability(availability_date, current_user)
    return success_response(None, "Availability removed")
