"""Profile service - Business logic for the current user's crew profile"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import UserProfile
from ...utils.formatting import compute_profile_completion, is_profile_complete
from .repository import ProfileRepository
from .schemas import ProfileUpdate

logger = logging.getLogger(__name__)


def serialize_profile_summary(profile: Optional[UserProfile]) -> Optional[dict]:
    """Compact author/applicant card embedded in other resources"""
    if profile is None:
        return None
    return {
        "id": profile.id,
        "full_name": profile.full_name,
        "handle": profile.handle,
        "primary_role": profile.primary_role,
        "avatar_url": profile.avatar_url,
    }


def serialize_profile(profile: UserProfile) -> dict:
    percentage = profile.profile_completion_percentage or 0
    return {
        "id": profile.id,
        "email": profile.email,
        "full_name": profile.full_name,
        "handle": profile.handle,
        "primary_role": profile.primary_role,
        "bio": profile.bio,
        "location": profile.location,
        "avatar_url": profile.avatar_url,
        "banner_url": profile.banner_url,
        "resume_url": profile.resume_url,
        "portfolio_url": profile.portfolio_url,
        "day_rate": profile.day_rate,
        "currency": profile.currency,
        "experience_level": profile.experience_level,
        "phone": profile.phone,
        "visible_in_explore": profile.visible_in_explore,
        "profileCompletion": percentage,
        "isComplete": is_profile_complete(percentage),
    }


def check_profile_complete(profile: UserProfile) -> dict:
    percentage = profile.profile_completion_percentage or 0
    return {"isComplete": is_profile_complete(percentage), "percentage": percentage}


def require_complete_profile(profile: UserProfile, action: str) -> None:
    """Raise 403 unless the profile is complete enough for ``action``"""
    status = check_profile_complete(profile)
    if not status["isComplete"]:
        logger.warning(
            f"⚠️ User {profile.id} tried to {action} with a {status['percentage']}% complete profile"
        )
        raise HTTPException(
            status_code=403,
            detail=f"Please complete your profile before you {action}",
            headers={"X-Profile-Incomplete": "true"},
        )


class ProfileService:
    """Service layer for profile business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ProfileRepository()

    def get_profile(self, user: UserProfile) -> dict:
        return serialize_profile(user)

    def update_profile(self, data: ProfileUpdate, user: UserProfile) -> dict:
        updates = data.model_dump(exclude_unset=True)

        if updates.get("handle") and self.repo.handle_taken(self.db, updates["handle"], user.id):
            raise HTTPException(status_code=409, detail="This handle is already taken")

        for key, value in updates.items():
            setattr(user, key, value)
        updates["profile_completion_percentage"] = compute_profile_completion(user)

        profile = self.repo.update(self.db, user, **updates)
        logger.info(
            f"✅ Profile {profile.id} updated ({profile.profile_completion_percentage}% complete)"
        )
        return serialize_profile(profile)

    def get_completeness(self, user: UserProfile) -> dict:
        return check_profile_complete(user)
