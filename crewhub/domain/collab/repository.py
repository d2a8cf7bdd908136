"""Collab repository - Database operations for collab posts and interests"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from ...models import CollabInterest, CollabPost, CollabTag


class CollabRepository:
    """Repository for collab post database operations"""

    @staticmethod
    def slug_exists(db: Session, slug: str) -> bool:
        return db.query(CollabPost.id).filter(CollabPost.slug == slug).first() is not None

    @staticmethod
    def get_by_id(db: Session, collab_id: int) -> Optional[CollabPost]:
        return db.query(CollabPost).filter(CollabPost.id == collab_id).first()

    @staticmethod
    def get_by_id_or_slug(db: Session, id_or_slug: str) -> Optional[CollabPost]:
        query = db.query(CollabPost).options(selectinload(CollabPost.tags))
        if id_or_slug.isdigit():
            return query.filter(CollabPost.id == int(id_or_slug)).first()
        return query.filter(CollabPost.slug == id_or_slug).first()

    @staticmethod
    def list_posts(
        db: Session, statuses: list[str], tag: Optional[str], page: int, limit: int
    ) -> tuple[list[CollabPost], int]:
        query = db.query(CollabPost).filter(CollabPost.status.in_(statuses))
        if tag:
            query = query.filter(CollabPost.tags.any(CollabTag.tag == tag))

        total = query.count()
        posts = (
            query.options(selectinload(CollabPost.tags), selectinload(CollabPost.owner))
            .order_by(CollabPost.created_at.desc(), CollabPost.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return posts, total

    @staticmethod
    def list_by_owner(db: Session, owner_id: int) -> list[CollabPost]:
        return (
            db.query(CollabPost)
            .options(selectinload(CollabPost.tags))
            .filter(CollabPost.owner_id == owner_id)
            .order_by(CollabPost.created_at.desc(), CollabPost.id.desc())
            .all()
        )

    @staticmethod
    def interest_counts(db: Session, collab_ids: list[int]) -> dict[int, int]:
        if not collab_ids:
            return {}
        rows = (
            db.query(CollabInterest.collab_id, func.count(CollabInterest.id))
            .filter(CollabInterest.collab_id.in_(collab_ids))
            .group_by(CollabInterest.collab_id)
            .all()
        )
        return dict(rows)

    @staticmethod
    def create(db: Session, owner_id: int, tags: list[str], **post_data) -> CollabPost:
        post = CollabPost(owner_id=owner_id, **post_data)
        post.tags = [CollabTag(tag=tag) for tag in tags]
        db.add(post)
        db.commit()
        db.refresh(post)
        return post

    @staticmethod
    def update(db: Session, post: CollabPost, tags: Optional[list[str]] = None, **updates) -> CollabPost:
        for key, value in updates.items():
            if value is not None and hasattr(post, key):
                setattr(post, key, value)
        if tags is not None:
            post.tags = [CollabTag(tag=tag) for tag in tags]
        db.commit()
        db.refresh(post)
        return post

    @staticmethod
    def delete(db: Session, post: CollabPost) -> None:
        db.delete(post)
        db.commit()

    # Interest Methods
    @staticmethod
    def get_interest(db: Session, collab_id: int, user_id: int) -> Optional[CollabInterest]:
        return (
            db.query(CollabInterest)
            .filter(CollabInterest.collab_id == collab_id, CollabInterest.user_id == user_id)
            .first()
        )

    @staticmethod
    def add_interest(db: Session, collab_id: int, user_id: int, message: Optional[str]) -> CollabInterest:
        interest = CollabInterest(collab_id=collab_id, user_id=user_id, message=message)
        db.add(interest)
        db.commit()
        db.refresh(interest)
        return interest

    @staticmethod
    def delete_interest(db: Session, interest: CollabInterest) -> None:
        db.delete(interest)
        db.commit()

    @staticmethod
    def list_interests(db: Session, collab_id: int) -> list[CollabInterest]:
        return (
            db.query(CollabInterest)
            .options(selectinload(CollabInterest.user))
            .filter(CollabInterest.collab_id == collab_id)
            .order_by(CollabInterest.created_at.desc(), CollabInterest.id.desc())
            .all()
        )
