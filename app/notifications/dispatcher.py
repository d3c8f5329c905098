import logging
from typing import Optional

from app.config import settings
from app.models.notifications import Notification
from app.models.user import User
from app.notifications.channels import Channel
from app.notifications.email_handlers import send_user_email
from app.notifications.events import PaymentRequestEvent, RefundRequestEvent
from app.notifications.rules import NOTIFICATION_MESSAGES, NOTIFICATION_RULES
from app.services.notification_service import create_notification

logger = logging.getLogger(__name__)


def _notify_inapp(
    *,
    event,
    session,
    user_id: int,
    context: dict,
    notify_user: bool,
    related_request_id: Optional[int] = None,
) -> Optional[Notification]:
    rules = NOTIFICATION_RULES.get(event, {})

    if not notify_user or not rules.get(Channel.INAPP_USER):
        logger.info(f"No in-app notification for {event.value} (user {user_id})")
        return None

    template = NOTIFICATION_MESSAGES[event]
    notification = create_notification(
        session=session,
        user_id=user_id,
        title=template["title"],
        message=template["message"].format(**context),
        type=template["type"],
        related_request_id=related_request_id,
    )
    logger.info(
        f"Queued {template['type'].value} notification {notification.id} "
        f"for user {user_id} ({event.value})"
    )
    return notification


def dispatch_payment_request_event(
    *,
    event: PaymentRequestEvent,
    session,
    user_id: int,
    request_id: int,
    context: dict,
    notify_user: bool = True,
) -> Optional[Notification]:
    """
    In-app notification for a payment-request event.

    Runs inside the caller's transaction, so a failed insert rolls back
    the whole transition. Returns the notification, or None when the
    event has no in-app rule or the admin chose not to notify.
    """

    return _notify_inapp(
        event=event,
        session=session,
        user_id=user_id,
        context=context,
        notify_user=notify_user,
        related_request_id=request_id,
    )


def dispatch_refund_request_event(
    *,
    event: RefundRequestEvent,
    session,
    user_id: int,
    context: dict,
) -> Optional[Notification]:
    # related_request_id only ever points at payment requests
    return _notify_inapp(
        event=event,
        session=session,
        user_id=user_id,
        context=context,
        notify_user=True,
    )


def send_payment_request_email(
    *,
    event: PaymentRequestEvent,
    user: Optional[User],
    context: dict,
    notify_user: bool = True,
) -> bool:
    """Email channel. Call after commit; failures are logged, never raised."""

    rules = NOTIFICATION_RULES.get(event, {})
    template = NOTIFICATION_MESSAGES.get(event, {})

    if not settings.email_enabled:
        return False

    if not notify_user or not user or not rules.get(Channel.EMAIL_USER):
        return False

    if not template.get("email_template"):
        return False

    sent = send_user_email(
        template=template["email_template"],
        subject=template["title"],
        user=user,
        **context,
    )
    if not sent:
        logger.warning(f"User email for {event.value} not delivered to user {user.id}")
    return sent
