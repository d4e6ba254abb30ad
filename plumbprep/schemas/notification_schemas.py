from datetime import datetime as dt

from pydantic import BaseModel, Field


class Notification(BaseModel):
    """Schema for Notification response."""

    id: int
    notification_type: str
    title: str
    message: str
    link: str | None
    is_read: bool
    created_at: dt
    read_at: dt | None

    model_config = {"from_attributes": True}


class NotificationListResponse(BaseModel):
    notifications: list[Notification]
    unread_count: int


class UnreadCountResponse(BaseModel):
    unread_count: int = Field(..., ge=0)


class MarkAllReadResponse(BaseModel):
    success: bool
    updated: int = Field(..., description="Number of notifications marked as read")
