from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field

from app.constants import refund_request_status


class RefundRequest(SQLModel, table=True):
    __tablename__ = "refund_requests"

    id: Optional[int] = Field(default=None, primary_key=True)

    user_id: int = Field(foreign_key="user.id", index=True)
    product_id: int = Field(foreign_key="product.id", index=True)

    reason: str
    contact_email: str
    contact_phone: Optional[str] = None
    additional_info: Optional[str] = None

    admin_notes: Optional[str] = None
    status: str = Field(default=refund_request_status.PENDING, index=True)  # pending | approved | rejected

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
