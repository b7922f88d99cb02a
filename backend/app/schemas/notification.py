from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel


class NotificationOut(BaseModel):
    """Schema for a notification; ``read`` is derived from ``read_at``."""

    id: int
    user_id: int
    type: Optional[str] = None
    title: str
    message: Optional[str] = None
    data: Optional[dict[str, Any]] = None
    read: bool
    read_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class NotificationEnvelope(BaseModel):
    notification: NotificationOut


class NotificationList(BaseModel):
    notifications: list[NotificationOut]
