"""Gig router - FastAPI endpoints for gigs and gig applications"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import UserProfile
from ...rate_limiter import create_rate_limiter
from ...shared.responses import success_response
from .schemas import ApplicationCreate, ApplicationStatusUpdate, GigCreate, GigUpdate
from .service import GigService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/gigs", tags=["Gigs"])
applications_router = APIRouter(prefix="/applications", tags=["Applications"])

rate_limit_apply = create_rate_limiter(limit=30, window_seconds=3600, key_prefix="gig_apply")


def get_gig_service(db: Session = Depends(get_db)) -> GigService:
    """Dependency injection for GigService"""
    return GigService(db)


# ============================================================================
# GIGS
# ============================================================================


@router.get("")
async def list_gigs(
    page: Optional[int] = Query(1),
    limit: Optional[int] = Query(None),
    service: GigService = Depends(get_gig_service),
):
    """Public feed of active gigs"""
    return success_response(service.list_gigs(page, limit), "Gigs retrieved")


@router.get("/my")
async def list_my_gigs(
    current_user: UserProfile = Depends(get_current_user),
    service: GigService = Depends(get_gig_service),
):
    """Gigs posted by the current user, all statuses"""
    return success_response(service.list_my_gigs(current_user), "Gigs retrieved")


@router.get("/{id_or_slug}")
async def get_gig(id_or_slug: str, service: GigService = Depends(get_gig_service)):
    return success_response(service.get_gig(id_or_slug), "Gig retrieved")


@router.post("", status_code=201)
async def create_gig(
    data: GigCreate,
    current_user: UserProfile = Depends(get_current_user),
    service: GigService = Depends(get_gig_service),
):
    """Post a new gig (requires a complete profile)"""
    return success_response(service.create_gig(data, current_user), "Gig created successfully")


@router.patch("/{gig_id}")
async def update_gig(
    gig_id: int,
    data: GigUpdate,
    current_user: UserProfile = Depends(get_current_user),
    service: GigService = Depends(get_gig_service),
):
    return success_response(service.update_gig(gig_id, data, current_user), "Gig updated")


@router.delete("/{gig_id}")
async def delete_gig(
    gig_id: int,
    current_user: UserProfile = Depends(get_current_user),
    service: GigService = Depends(get_gig_service),
):
    service.delete_gig(gig_id, current_user)
    return success_response(None, "Gig deleted")


# ============================================================================
# APPLICATIONS
# ============================================================================


@router.post("/{gig_id}/apply", status_code=201)
async def apply_to_gig(
    gig_id: int,
    data: ApplicationCreate,
    current_user: UserProfile = Depends(get_current_user),
    service: GigService = Depends(get_gig_service),
    _: None = Depends(rate_limit_apply),
):
    return success_response(service.apply(gig_id, data, current_user), "Application submitted")


@router.get("/{gig_id}/applications")
async def list_gig_applications(
    gig_id: int,
    current_user: UserProfile = Depends(get_current_user),
    service: GigService = Depends(get_gig_service),
):
    """Applications received for a gig (creator only)"""
    return success_response(
        service.list_applications(gig_id, current_user), "Applications retrieved"
    )


@router.patch("/{gig_id}/applications/{application_id}/status")
async def update_application_status(
    gig_id: int,
    application_id: int,
    data: ApplicationStatusUpdate,
    current_user: UserProfile = Depends(get_current_user),
    service: GigService = Depends(get_gig_service),
):
    """Move an application to pending/shortlisted/confirmed/released (creator only)"""
    return success_response(
        service.update_application_status(gig_id, application_id, data, current_user),
        "Application status updated",
    )


@applications_router.get("/my")
async def list_my_applications(
    current_user: UserProfile = Depends(get_current_user),
    service: GigService = Depends(get_gig_service),
):
    return success_response(service.list_my_applications(current_user), "Applications retrieved")


@applications_router.get("/{application_id}")
async def get_application(
    application_id: int,
    current_user: UserProfile = Depends(get_current_user),
    service: GigService = Depends(get_gig_service),
):
    """Visible to the applicant and the gig creator"""
    return success_response(
        service.get_application(application_id, current_user), "Application retrieved"
    )
