"""Profile router - FastAPI endpoints for the current user's profile"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import UserProfile
from ...shared.responses import success_response
from .schemas import ProfileUpdate
from .service import ProfileService

router = APIRouter(prefix="/profile", tags=["Profile"])


def get_profile_service(db: Session = Depends(get_db)) -> ProfileService:
    """Dependency injection for ProfileService"""
    return ProfileService(db)


@router.get("/me")
async def get_my_profile(
    current_user: UserProfile = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
):
    return success_response(service.get_profile(current_user), "Profile retrieved")


@router.patch("/me")
async def update_my_profile(
    data: ProfileUpdate,
    current_user: UserProfile = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
):
    """Update profile fields and recompute the completion percentage"""
    return success_response(service.update_profile(data, current_user), "Profile updated")


@router.get("/me/completeness")
async def get_profile_completeness(
    current_user: UserProfile = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
):
    return success_response(service.get_completeness(current_user), "Profile completeness")
