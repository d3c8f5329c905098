from enum import Enum


class PaymentRequestEvent(str, Enum):
    APPROVED = "payment_request_approved"
    REJECTED = "payment_request_rejected"
    ACCESS_REVOKED = "payment_request_access_revoked"
    REAPPROVED = "payment_request_reapproved"
    RESET = "payment_request_reset"


class RefundRequestEvent(str, Enum):
    APPROVED = "refund_request_approved"
    REJECTED = "refund_request_rejected"
