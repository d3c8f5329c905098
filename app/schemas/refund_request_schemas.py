from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, field_validator

from app.schemas.payment_request_schemas import _blank_to_none


class RefundRequestCreate(BaseModel):
    product_id: int
    reason: str
    contact_email: EmailStr
    contact_phone: Optional[str] = None
    additional_info: Optional[str] = None

    @field_validator("reason")
    @classmethod
    def reason_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Please tell us why you want a refund")
        return value

    @field_validator("contact_phone", "additional_info")
    @classmethod
    def strip_optional(cls, value: Optional[str]) -> Optional[str]:
        return _blank_to_none(value)


class RefundDecision(BaseModel):
    notes: Optional[str] = None


class PurchaseStatus(BaseModel):
    has_purchased: bool
    has_access: bool
    payment_approved: bool
    purchase_date: Optional[datetime] = None
    purchase_method: str


class RefundRequestResponse(BaseModel):
    id: int
    user_id: int
    product_id: int
    product_title: Optional[str] = None
    user_email: Optional[str] = None
    reason: str
    contact_email: str
    contact_phone: Optional[str] = None
    additional_info: Optional[str] = None
    admin_notes: Optional[str] = None
    status: str
    created_at: datetime
    updated_at: datetime
    purchase_status: Optional[PurchaseStatus] = None
