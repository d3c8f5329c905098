from .events import PaymentRequestEvent, RefundRequestEvent
from .dispatcher import (
    dispatch_payment_request_event,
    dispatch_refund_request_event,
    send_payment_request_email,
)

__all__ = [
    "PaymentRequestEvent",
    "RefundRequestEvent",
    "dispatch_payment_request_event",
    "dispatch_refund_request_event",
    "send_payment_request_email",
]
