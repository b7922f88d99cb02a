from typing import Any, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.db.base import utcnow
from app.models import Notification
from app.models.enums import NotificationType


def create_notification(
    db: Session,
    *,
    user_id: int,
    type: NotificationType,
    title: str,
    message: Optional[str] = None,
    data: Optional[dict[str, Any]] = None,
) -> Notification:
    notification = Notification(
        user_id=user_id,
        type=type.value,
        title=title,
        message=message,
        data=data,
    )
    db.add(notification)
    db.commit()
    db.refresh(notification)
    return notification


def get_notification(db: Session, notification_id: int) -> Optional[Notification]:
    return db.query(Notification).filter(Notification.id == notification_id).first()


def list_notifications_by_user(
    db: Session,
    user_id: int,
    unread_only: bool = False,
    limit: int = 50,
    offset: int = 0,
) -> list[Notification]:
    """Most recently created or read first."""
    query = db.query(Notification).filter(Notification.user_id == user_id)
    if unread_only:
        query = query.filter(Notification.read_at.is_(None))
    return (
        query.order_by(
            func.coalesce(Notification.read_at, Notification.created_at).desc(),
            Notification.id.desc(),
        )
        .offset(offset)
        .limit(limit)
        .all()
    )


def mark_notification_read(db: Session, notification: Notification) -> Notification:
    """Set read_at once; marking an already read notification keeps the first timestamp."""
    now = utcnow()
    db.query(Notification).filter(Notification.id == notification.id).update(
        {
            Notification.read_at: func.coalesce(Notification.read_at, now),
            Notification.updated_at: now,
        },
        synchronize_session=False,
    )
    db.commit()
    db.refresh(notification)
    return notification
