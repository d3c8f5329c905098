from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, field_validator


class ContactRequestCreate(BaseModel):
    name: str
    email: EmailStr
    subject: str
    message: str

    @field_validator("name", "subject", "message")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("This field is required")
        return value


class ContactStatusUpdate(BaseModel):
    status: Literal["pending", "read", "replied", "resolved"]
    notes: Optional[str] = None


class ContactRequestResponse(BaseModel):
    id: int
    name: str
    email: str
    subject: str
    message: str
    status: str
    admin_notes: Optional[str] = None
    replied_at: Optional[datetime] = None
    replied_by: Optional[int] = None
    created_at: datetime
    updated_at: datetime
