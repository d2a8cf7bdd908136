"""Profile repository - Database operations for user profiles"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import UserProfile


class ProfileRepository:
    """Repository for profile database operations"""

    @staticmethod
    def get_by_id(db: Session, profile_id: int) -> Optional[UserProfile]:
        return db.query(UserProfile).filter(UserProfile.id == profile_id).first()

    @staticmethod
    def handle_taken(db: Session, handle: str, exclude_id: int) -> bool:
        return (
            db.query(UserProfile.id)
            .filter(UserProfile.handle == handle, UserProfile.id != exclude_id)
            .first()
            is not None
        )

    @staticmethod
    def update(db: Session, profile: UserProfile, **updates) -> UserProfile:
        for key, value in updates.items():
            if hasattr(profile, key):
                setattr(profile, key, value)
        db.commit()
        db.refresh(profile)
        return profile
