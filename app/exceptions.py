from typing import Optional


class PaymentRequestError(Exception):
    """Base class for failures of admin operations (payment requests, refunds, roles)."""

    status_code = 400
    kind = "payment_request_error"
    default_message = "Payment request operation failed"

    def __init__(self, message: Optional[str] = None, *, request_id: Optional[int] = None):
        self.request_id = request_id
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {
            "detail": self.message,
            "error": self.kind,
            "request_id": self.request_id,
        }


class NotFound(PaymentRequestError):
    status_code = 404
    kind = "not_found"
    default_message = "Payment request not found"


class InvalidTransition(PaymentRequestError):
    status_code = 409
    kind = "invalid_transition"
    default_message = "This action is not allowed in the request's current state"

    def __init__(
        self,
        action: str,
        current_status: str,
        *,
        request_id: Optional[int] = None,
        target: str = "payment request",
    ):
        self.action = action
        self.current_status = current_status
        super().__init__(
            f"Cannot {action} a {target} that is {current_status}",
            request_id=request_id,
        )


class Unauthorized(PaymentRequestError):
    status_code = 403
    kind = "unauthorized"
    default_message = "You don't have permission to perform this action"

    def __init__(
        self,
        action: str,
        required_role: str,
        *,
        request_id: Optional[int] = None,
        target: str = "payment requests",
    ):
        self.action = action
        self.required_role = required_role
        super().__init__(
            f"You don't have permission to {action} {target} ({required_role} required)",
            request_id=request_id,
        )


class PersistenceError(PaymentRequestError):
    status_code = 503
    kind = "persistence_error"
    default_message = "A network/storage error occurred, please retry"


class ConcurrentModification(PaymentRequestError):
    status_code = 409
    kind = "concurrent_modification"
    default_message = (
        "The payment request was changed by another administrator, refresh and retry"
    )


class ProtectedAccount(PaymentRequestError):
    status_code = 403
    kind = "protected_account"
    default_message = "This account's role cannot be changed"
