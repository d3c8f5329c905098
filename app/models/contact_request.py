from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field

from app.constants import contact_request_status


class ContactRequest(SQLModel, table=True):
    __tablename__ = "contact_requests"

    id: Optional[int] = Field(default=None, primary_key=True)

    name: str
    email: str
    subject: str
    message: str

    status: str = Field(default=contact_request_status.PENDING, index=True)
    admin_notes: Optional[str] = None
    replied_at: Optional[datetime] = None
    replied_by: Optional[int] = Field(default=None, foreign_key="user.id")

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
