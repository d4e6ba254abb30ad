"""API routes for in-app notifications."""

from fastapi import APIRouter, Query

from plumbprep import schemas
from plumbprep.database import DatabaseSession
from plumbprep.dependencies import CurrentUser
from plumbprep.services import NotificationService

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=schemas.NotificationListResponse)
def list_notifications(
    db: DatabaseSession,
    current_user: CurrentUser,
    unread_only: bool = False,
    limit: int = Query(50, ge=1, le=200),
) -> schemas.NotificationListResponse:
    """The current user's notifications, newest first."""
    return NotificationService(db).list_notifications(current_user.id, unread_only, limit)


@router.get("/unread-count", response_model=schemas.UnreadCountResponse)
def get_unread_count(db: DatabaseSession, current_user: CurrentUser) -> schemas.UnreadCountResponse:
    """Polled by the notification bell."""
    return schemas.UnreadCountResponse(
        unread_count=NotificationService(db).unread_count(current_user.id)
    )


@router.post("/{notification_id}/read", response_model=schemas.Notification)
def mark_notification_read(
    notification_id: int, db: DatabaseSession, current_user: CurrentUser
) -> schemas.Notification:
    return NotificationService(db).mark_read(notification_id, current_user.id)


@router.post("/read-all", response_model=schemas.MarkAllReadResponse)
def mark_all_notifications_read(
    db: DatabaseSession, current_user: CurrentUser
) -> schemas.MarkAllReadResponse:
    updated = NotificationService(db).mark_all_read(current_user.id)
    return schemas.MarkAllReadResponse(success=True, updated=updated)
