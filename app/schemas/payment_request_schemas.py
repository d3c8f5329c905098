from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator, model_validator

from app.models.payment_request import ContactMethod, PaymentMethod


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class PaymentRequestCreate(BaseModel):
    product_id: int
    payment_method: PaymentMethod
    contact_method: ContactMethod
    contact_value: str
    transaction_id: Optional[str] = None
    payment_screenshot_url: Optional[str] = None
    alternative_payment_details: Optional[str] = None

    @field_validator("contact_value")
    @classmethod
    def contact_value_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Contact details are required")
        return value

    @field_validator(
        "transaction_id",
        "payment_screenshot_url",
        "alternative_payment_details",
    )
    @classmethod
    def strip_optional(cls, value: Optional[str]) -> Optional[str]:
        return _blank_to_none(value)

    @model_validator(mode="after")
    def check_payment_proof(self):
        if self.payment_method == PaymentMethod.nayapay:
            if not self.transaction_id and not self.payment_screenshot_url:
                raise ValueError(
                    "Please provide either transaction ID or payment screenshot"
                )
        if self.payment_method == PaymentMethod.custom:
            if not self.alternative_payment_details:
                raise ValueError("Please explain your payment method")
        return self


class ApproveRequest(BaseModel):
    notes: Optional[str] = None
    notify: bool = True


class RejectRequest(BaseModel):
    notes: Optional[str] = None


class RevokeRequest(BaseModel):
    notify: bool = True


class ReApproveRequest(BaseModel):
    notify: bool = True
    notes: Optional[str] = None


class ResetRequest(BaseModel):
    notify: bool = True
    confirm: bool = False


class PaymentRequestResponse(BaseModel):
    id: int
    user_id: int
    product_id: int
    product_title: Optional[str] = None
    user_email: Optional[str] = None
    payment_method: PaymentMethod
    contact_method: ContactMethod
    contact_value: str
    transaction_id: Optional[str] = None
    payment_screenshot_url: Optional[str] = None
    alternative_payment_details: Optional[str] = None
    admin_notes: Optional[str] = None
    status: str
    created_at: datetime
