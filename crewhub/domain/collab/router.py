"""Collab router - FastAPI endpoints for collab posts"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user, get_optional_user
from ...database import get_db
from ...models import UserProfile
from ...rate_limiter import create_rate_limiter
from ...shared.responses import success_response
from .schemas import CollabCreate, CollabUpdate, InterestCreate
from .service import CollabService

router = APIRouter(prefix="/collab", tags=["Collab"])

rate_limit_interest = create_rate_limiter(limit=60, window_seconds=3600, key_prefix="collab_interest")


def get_collab_service(db: Session = Depends(get_db)) -> CollabService:
    """Dependency injection for CollabService"""
    return CollabService(db)


@router.get("")
async def list_collab_posts(
    page: Optional[int] = Query(1),
    limit: Optional[int] = Query(None),
    status: str = Query("open"),
    tag: Optional[str] = Query(None),
    service: CollabService = Depends(get_collab_service),
):
    """Public feed of collab posts"""
    return success_response(service.list_posts(page, limit, status, tag), "Collab posts retrieved")


@router.get("/my")
async def list_my_collab_posts(
    current_user: UserProfile = Depends(get_current_user),
    service: CollabService = Depends(get_collab_service),
):
    return success_response(service.list_my_posts(current_user), "Collab posts retrieved")


@router.get("/{id_or_slug}")
async def get_collab_post(
    id_or_slug: str,
    current_user: Optional[UserProfile] = Depends(get_optional_user),
    service: CollabService = Depends(get_collab_service),
):
    return success_response(service.get_post(id_or_slug, current_user), "Collab post retrieved")


@router.post("", status_code=201)
async def create_collab_post(
    data: CollabCreate,
    current_user: UserProfile = Depends(get_current_user),
    service: CollabService = Depends(get_collab_service),
):
    return success_response(service.create_post(data, current_user), "Collab post created")


@router.patch("/{collab_id}/close")
async def close_collab_post(
    collab_id: int,
    current_user: UserProfile = Depends(get_current_user),
    service: CollabService = Depends(get_collab_service),
):
    return success_response(service.close_post(collab_id, current_user), "Collab post closed")


@router.patch("/{collab_id}")
async def update_collab_post(
    collab_id: int,
    data: CollabUpdate,
    current_user: UserProfile = Depends(get_current_user),
    service: CollabService = Depends(get_collab_service),
):
    return success_response(service.update_post(collab_id, data, current_user), "Collab post updated")


@router.delete("/{collab_id}")
async def delete_collab_post(
    collab_id: int,
    current_user: UserProfile = Depends(get_current_user),
    service: CollabService = Depends(get_collab_service),
):
    service.delete_post(collab_id, current_user)
    return success_response(None, "Collab post deleted")


@router.post("/{collab_id}/interest", status_code=201)
async def express_interest(
    collab_id: int,
    data: Optional[InterestCreate] = None,
    current_user: UserProfile = Depends(get_current_user),
    service: CollabService = Depends(get_collab_service),
    _: None = Depends(rate_limit_interest),
):
    return success_response(
        service.express_interest(collab_id, data or InterestCreate(), current_user),
        "Interest expressed",
    )


@router.delete("/{collab_id}/interest")
async def remove_interest(
    collab_id: int,
    current_user: UserProfile = Depends(get_current_user),
    service: CollabService = Depends(get_collab_service),
):
    service.remove_interest(collab_id, current_user)
    return success_response(None, "Interest removed")


@router.get("/{collab_id}/interests")
async def list_interests(
    collab_id: int,
    current_user: UserProfile = Depends(get_current_user),
    service: CollabService = Depends(get_collab_service),
):
    """People interested in a post (owner only)"""
    return success_response(service.list_interests(collab_id, current_user), "Interests retrieved")
