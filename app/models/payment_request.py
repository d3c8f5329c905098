from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import SQLModel, Field

from app.constants import payment_request_status as request_status


class PaymentMethod(str, Enum):
    nayapay = "nayapay"
    custom = "custom"


class ContactMethod(str, Enum):
    whatsapp = "whatsapp"
    telegram = "telegram"


class PaymentRequest(SQLModel, table=True):
    __tablename__ = "payment_requests"

    id: Optional[int] = Field(default=None, primary_key=True)

    user_id: int = Field(foreign_key="user.id", index=True)
    product_id: int = Field(foreign_key="product.id", index=True)

    payment_method: PaymentMethod
    contact_method: ContactMethod
    contact_value: str

    transaction_id: Optional[str] = None
    payment_screenshot_url: Optional[str] = None
    alternative_payment_details: Optional[str] = None

    admin_notes: Optional[str] = None
    status: str = Field(default=request_status.PENDING, index=True)  # pending | approved | rejected

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
