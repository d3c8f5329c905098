from typing import Optional

from sqlmodel import Session

from app.models.notifications import Notification, NotificationType


def create_notification(
    *,
    session: Session,
    user_id: int,
    title: str,
    message: str,
    type: NotificationType = NotificationType.info,
    related_request_id: Optional[int] = None,
) -> Notification:
    notification = Notification(
        user_id=user_id,
        title=title,
        message=message,
        type=type,
        related_request_id=related_request_id,
    )
    session.add(notification)
    session.flush()
    return notification
