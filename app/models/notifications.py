from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import SQLModel, Field


class NotificationType(str, Enum):
    success = "success"
    error = "error"
    info = "info"
    warning = "warning"
    refund_update = "refund_update"


class Notification(SQLModel, table=True):
    __tablename__ = "notifications"

    id: Optional[int] = Field(default=None, primary_key=True)

    user_id: int = Field(foreign_key="user.id", index=True)

    title: str
    message: str
    type: NotificationType = NotificationType.info

    # no FK: reset deletes the request but keeps the notification
    related_request_id: Optional[int] = Field(default=None, index=True)

    is_read: bool = Field(default=False)
    created_at: datetime = Field(default_factory=datetime.utcnow)
