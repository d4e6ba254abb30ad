"""Service layer for in-app notifications."""

import structlog
from sqlalchemy.orm import Session

from plumbprep import repositories, schemas
from plumbprep.exceptions import NotFoundError
from plumbprep.utils import utc_now

logger = structlog.get_logger(__name__)


class NotificationNotFoundError(NotFoundError):
    """Notification not found error."""

    def __init__(self, notification_id: int) -> None:
        """Initialize with notification ID."""
        self.notification_id = notification_id
        super().__init__(f"Notification with id {notification_id} not found")


class NotificationService:
    """Service for creating and reading user notifications."""

    def __init__(self, db: Session) -> None:
        """Initialize service with database session."""
        self.db = db
        self.notification_repo = repositories.NotificationRepository(db)

    def notify(
        self,
        user_id: int,
        notification_type: str,
        title: str,
        message: str,
        link: str | None = None,
    ) -> schemas.Notification:
        """
        Queue a notification for a user.

        The caller owns the transaction; nothing is committed here so the
        notification lands together with the change that caused it.
        """
        notification = self.notification_repo.create(
            user_id=user_id,
            notification_type=notification_type,
            title=title,
            message=message,
            link=link,
        )
        logger.info("notification_created", user_id=user_id, notification_type=notification_type)
        return schemas.Notification.model_validate(notification)

    def list_notifications(
        self, user_id: int, unread_only: bool = False, limit: int = 50
    ) -> schemas.NotificationListResponse:
        notifications = self.notification_repo.get_by_user(user_id, unread_only, limit)
        return schemas.NotificationListResponse(
            notifications=[schemas.Notification.model_validate(n) for n in notifications],
            unread_count=self.notification_repo.count_unread(user_id),
        )

    def unread_count(self, user_id: int) -> int:
        return self.notification_repo.count_unread(user_id)

    def mark_read(self, notification_id: int, user_id: int) -> schemas.Notification:
        notification = self.notification_repo.get_by_id(notification_id, user_id)
        if notification is None:
            raise NotificationNotFoundError(notification_id)
        notification = self.notification_repo.mark_read(notification, utc_now())
        self.db.commit()
        return schemas.Notification.model_validate(notification)

    def mark_all_read(self, user_id: int) -> int:
        updated = self.notification_repo.mark_all_read(user_id, utc_now())
        self.db.commit()
        logger.info("notifications_marked_read", user_id=user_id, count=updated)
        return updated
