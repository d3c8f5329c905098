from app.models.notifications import NotificationType
from app.notifications.channels import Channel
from app.notifications.events import PaymentRequestEvent, RefundRequestEvent


NOTIFICATION_RULES = {

    PaymentRequestEvent.APPROVED: {
        Channel.INAPP_USER: True,
        Channel.EMAIL_USER: True,
    },

    PaymentRequestEvent.REAPPROVED: {
        Channel.INAPP_USER: True,
        Channel.EMAIL_USER: True,
    },

    PaymentRequestEvent.ACCESS_REVOKED: {
        Channel.INAPP_USER: True,
        Channel.EMAIL_USER: True,
    },

    PaymentRequestEvent.RESET: {
        Channel.INAPP_USER: True,
    },

    # plain rejection only stores admin notes
    PaymentRequestEvent.REJECTED: {},

    RefundRequestEvent.APPROVED: {
        Channel.INAPP_USER: True,
    },

    RefundRequestEvent.REJECTED: {
        Channel.INAPP_USER: True,
    },

}


_APPROVED_MESSAGE = {
    "title": "Payment Approved!",
    "message": (
        'Your payment for "{product_title}" has been approved. '
        "Product ID: {product_id}. You can now download the product."
    ),
    "type": NotificationType.success,
    "email_template": "user_emails/payment_approved.html",
}

NOTIFICATION_MESSAGES = {
    PaymentRequestEvent.APPROVED: _APPROVED_MESSAGE,
    PaymentRequestEvent.REAPPROVED: _APPROVED_MESSAGE,
    PaymentRequestEvent.ACCESS_REVOKED: {
        "title": "Access Revoked",
        "message": (
            'Your access to "{product_title}" has been revoked. '
            "Please contact support if you have questions."
        ),
        "type": NotificationType.error,
        "email_template": "user_emails/access_revoked.html",
    },
    PaymentRequestEvent.RESET: {
        "title": "Payment Request Reset",
        "message": (
            'Your payment request for "{product_title}" has been reset. '
            "You can submit a new purchase request if needed."
        ),
        "type": NotificationType.info,
        "email_template": None,
    },
    RefundRequestEvent.APPROVED: {
        "title": "Refund Request Approved",
        "message": (
            'Your refund request for "{product_title}" has been approved. '
            "Product ID: {product_id}"
        ),
        "type": NotificationType.refund_update,
        "email_template": None,
    },
    RefundRequestEvent.REJECTED: {
        "title": "Refund Request Rejected",
        "message": 'Your refund request for "{product_title}" has been rejected.',
        "type": NotificationType.refund_update,
        "email_template": None,
    },
}
