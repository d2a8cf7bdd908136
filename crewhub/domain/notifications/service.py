"""Notification service - in-app notifications raised by other domains"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Notification, UserProfile
from .repository import NotificationRepository

logger = logging.getLogger(__name__)

APPLICATION_RECEIVED = "application_received"
STATUS_CHANGED = "status_changed"
REFERRAL_RECEIVED = "referral_received"

NOTIFICATION_TYPES = {APPLICATION_RECEIVED, STATUS_CHANGED, REFERRAL_RECEIVED}


def notify(
    db: Session,
    user_id: int,
    type: str,
    title: str,
    message: Optional[str] = None,
    link: Optional[str] = None,
) -> Notification:
    """Queue a notification in the current session (committed by the caller)"""
    if type not in NOTIFICATION_TYPES:
        raise ValueError(f"Unknown notification type: {type}")

    logger.info(f"🔔 Notifying user {user_id}: {type}")
    return NotificationRepository.create(
        db, user_id, type=type, title=title, message=message, link=link
    )


def serialize_notification(notification: Notification) -> dict:
    return {
        "id": notification.id,
        "type": notification.type,
        "title": notification.title,
        "message": notification.message,
        "link": notification.link,
        "is_read": notification.is_read,
        "created_at": notification.created_at.isoformat() if notification.created_at else None,
    }


class NotificationService:
    """Service layer for the notification inbox"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = NotificationRepository()

    def list_notifications(self, user: UserProfile, unread_only: bool = False) -> dict:
        notifications = self.repo.list_for_user(self.db, user.id, unread_only)
        return {
            "notifications": [serialize_notification(n) for n in notifications],
            "unreadCount": self.repo.count_unread(self.db, user.id),
        }

    def mark_read(self, notification_id: int, user: UserProfile) -> dict:
        notification = self.repo.get_for_user(self.db, notification_id, user.id)
        if not notification:
            raise HTTPException(status_code=404, detail="Notification not found")
        return serialize_notification(self.repo.mark_read(self.db, notification))
