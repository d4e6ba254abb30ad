"""Notification repository for database operations."""

import logging
from datetime import datetime

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from plumbprep import models

logger = logging.getLogger(__name__)


class NotificationRepository:
    """Repository for Notification database operations."""

    def __init__(self, db: Session) -> None:
        """Initialize repository with database session."""
        self.db = db

    def create(
        self,
        user_id: int,
        notification_type: str,
        title: str,
        message: str,
        link: str | None = None,
    ) -> models.Notification:
        notification = models.Notification(
            user_id=user_id,
            notification_type=notification_type,
            title=title,
            message=message,
            link=link,
            is_read=False,
        )
        self.db.add(notification)
        self.db.flush()
        self.db.refresh(notification)
        logger.info(
            f"Created notification: type={notification_type} "
            f"(id={notification.id}, user_id={user_id})"
        )
        return notification

    def get_by_id(self, notification_id: int, user_id: int) -> models.Notification | None:
        """Get a notification by its ID, verifying user ownership."""
        stmt = select(models.Notification).where(
            models.Notification.id == notification_id,
            models.Notification.user_id == user_id,
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_by_user(
        self, user_id: int, unread_only: bool = False, limit: int = 50
    ) -> list[models.Notification]:
        stmt = select(models.Notification).where(models.Notification.user_id == user_id)
        if unread_only:
            stmt = stmt.where(models.Notification.is_read.is_(False))
        stmt = stmt.order_by(
            models.Notification.created_at.desc(), models.Notification.id.desc()
        ).limit(limit)
        return list(self.db.execute(stmt).scalars().all())

    def count_unread(self, user_id: int) -> int:
        stmt = select(func.count(models.Notification.id)).where(
            models.Notification.user_id == user_id,
            models.Notification.is_read.is_(False),
        )
        return self.db.execute(stmt).scalar() or 0

    def mark_read(self, notification: models.Notification, read_at: datetime) -> models.Notification:
        if not notification.is_read:
            notification.is_read = True
            notification.read_at = read_at
            self.db.flush()
            self.db.refresh(notification)
        return notification

    def mark_all_read(self, user_id: int, read_at: datetime) -> int:
        """Mark every unread notification of a user as read; returns the count."""
        stmt = (
            update(models.Notification)
            .where(
                models.Notification.user_id == user_id,
                models.Notification.is_read.is_(False),
            )
            .values(is_read=True, read_at=read_at)
            .execution_options(synchronize_session="fetch")
        )
        result = self.db.execute(stmt)
        self.db.flush()
        return result.rowcount or 0
