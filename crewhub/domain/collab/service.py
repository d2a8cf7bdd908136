"""Collab service - Business logic for calls for collaborators"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import CollabPost, UserProfile
from ...shared.responses import normalize_pagination, pagination_meta
from ...utils.slugs import generate_unique_slug
from ..profiles.service import serialize_profile_summary
from .repository import CollabRepository
from .schemas import CollabCreate, CollabUpdate, InterestCreate

logger = logging.getLogger(__name__)

LISTABLE_STATUSES = {"open": ["open"], "closed": ["closed"], "all": ["open", "closed"]}


def serialize_collab(post: CollabPost, interest_count: int = 0) -> dict:
    return {
        "id": post.id,
        "slug": post.slug,
        "title": post.title,
        "summary": post.summary,
        "cover_image_url": post.cover_image_url,
        "location": post.location,
        "status": post.status,
        "tags": [t.tag for t in post.tags],
        "interestCount": interest_count,
        "author": serialize_profile_summary(post.owner),
        "created_at": post.created_at.isoformat() if post.created_at else None,
    }


class CollabService:
    """Service layer for collab post business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = CollabRepository()

    def _get_post(self, collab_id: int) -> CollabPost:
        post = self.repo.get_by_id(self.db, collab_id)
        if not post:
            raise HTTPException(status_code=404, detail="Collab post not found")
        return post

    def _get_own_post(self, collab_id: int, user: UserProfile) -> CollabPost:
        post = self._get_post(collab_id)
        if post.owner_id != user.id:
            raise HTTPException(status_code=403, detail="Only the post owner can do this")
        return post

    def _serialize_many(self, posts: list[CollabPost]) -> list[dict]:
        counts = self.repo.interest_counts(self.db, [p.id for p in posts])
        return [serialize_collab(p, counts.get(p.id, 0)) for p in posts]

    def list_posts(
        self, page: Optional[int], limit: Optional[int], status: str = "open", tag: Optional[str] = None
    ) -> dict:
        statuses = LISTABLE_STATUSES.get(status)
        if statuses is None:
            raise HTTPException(status_code=400, detail="Status must be one of: open, closed, all")

        page, limit = normalize_pagination(page, limit)
        tag = tag.strip().lstrip("#").lower() if tag else None
        posts, total = self.repo.list_posts(self.db, statuses, tag, page, limit)
        return {"posts": self._serialize_many(posts), "pagination": pagination_meta(page, limit, total)}

    def list_my_posts(self, user: UserProfile) -> list[dict]:
        return self._serialize_many(self.repo.list_by_owner(self.db, user.id))

    def get_post(self, id_or_slug: str, user: Optional[UserProfile] = None) -> dict:
        post = self.repo.get_by_id_or_slug(self.db, id_or_slug)
        if not post:
            raise HTTPException(status_code=404, detail="Collab post not found")

        data = self._serialize_many([post])[0]
        if user is not None:
            data["hasExpressedInterest"] = (
                self.repo.get_interest(self.db, post.id, user.id) is not None
            )
        return data

    def create_post(self, data: CollabCreate, user: UserProfile) -> dict:
        slug = generate_unique_slug(data.title, lambda s: self.repo.slug_exists(self.db, s))
        post = self.repo.create(
            self.db,
            user.id,
            tags=data.tags,
            title=data.title,
            slug=slug,
            summary=data.summary,
            cover_image_url=data.cover_image_url,
            location=data.location,
        )
        logger.info(f"✅ Collab post {post.id} '{post.slug}' created by user {user.id}")
        return serialize_collab(post)

    def update_post(self, collab_id: int, data: CollabUpdate, user: UserProfile) -> dict:
        post = self._get_own_post(collab_id, user)
        updates = data.model_dump(exclude_unset=True, exclude={"tags"})
        post = self.repo.update(self.db, post, tags=data.tags, **updates)
        return self._serialize_many([post])[0]

    def close_post(self, collab_id: int, user: UserProfile) -> dict:
        post = self._get_own_post(collab_id, user)
        post = self.repo.update(self.db, post, status="closed")
        logger.info(f"🔒 Collab post {post.id} closed")
        return self._serialize_many([post])[0]

    def delete_post(self, collab_id: int, user: UserProfile) -> None:
        post = self._get_own_post(collab_id, user)
        self.repo.delete(self.db, post)

    # Interest Methods
    def express_interest(self, collab_id: int, data: InterestCreate, user: UserProfile) -> dict:
        post = self._get_post(collab_id)
        if post.owner_id == user.id:
            raise HTTPException(status_code=400, detail="You cannot express interest in your own post")
        if post.status != "open":
            raise HTTPException(status_code=400, detail="This collab post is closed")
        if self.repo.get_interest(self.db, post.id, user.id):
            raise HTTPException(status_code=409, detail="You have already expressed interest")

        try:
            interest = self.repo.add_interest(self.db, post.id, user.id, data.message)
        except IntegrityError as e:
            self.db.rollback()
            raise HTTPException(status_code=409, detail="You have already expressed interest") from e

        return {"id": interest.id, "collab_id": post.id, "message": interest.message}

    def remove_interest(self, collab_id: int, user: UserProfile) -> None:
        post = self._get_post(collab_id)
        interest = self.repo.get_interest(self.db, post.id, user.id)
        if not interest:
            raise HTTPException(status_code=404, detail="Interest not found")
        self.repo.delete_interest(self.db, interest)

    def list_interests(self, collab_id: int, user: UserProfile) -> list[dict]:
        post = self._get_own_post(collab_id, user)
        return [
            {
                "id": i.id,
                "message": i.message,
                "user": serialize_profile_summary(i.user),
                "created_at": i.created_at.isoformat() if i.created_at else None,
            }
            for i in self.repo.list_interests(self.db, post.id)
        ]
