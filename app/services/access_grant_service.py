"""
Admin decisions on payment requests and the product access they grant.

Every operation runs as one database transaction. Write order:

- additive paths (approve, re-approve) flip the status first, then grant;
- destructive paths (revoke, reset) remove the grant first.

Status writes are conditional on the status the operation started from.
"""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import delete, update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from app.constants import payment_request_status as status
from app.constants.roles import ADMIN, SUPER_ADMIN
from app.exceptions import (
    ConcurrentModification,
    InvalidTransition,
    NotFound,
    Unauthorized,
)
from app.models.payment_request import PaymentRequest
from app.models.product import Product
from app.models.user import User
from app.models.user_product_access import UserProductAccess
from app.notifications import (
    PaymentRequestEvent,
    dispatch_payment_request_event,
    send_payment_request_email,
)
from app.services.transactions import atomic, load_or_fail

logger = logging.getLogger(__name__)


# -------------------------------
# helpers
# -------------------------------

def _require_admin(actor: Optional[User], action: str, request_id: int):
    if actor is None or not actor.is_admin:
        logger.warning(f"Refused {action} on request {request_id}: actor is not an admin")
        raise Unauthorized(action, ADMIN, request_id=request_id)


def _require_super_admin(actor: Optional[User], action: str, request_id: int):
    if actor is None or not actor.is_super_admin:
        logger.warning(
            f"Refused {action} on request {request_id}: "
            f"actor {getattr(actor, 'id', None)} is not a super admin"
        )
        raise Unauthorized(action, SUPER_ADMIN, request_id=request_id)


def _load_request(session: Session, request_id: int) -> PaymentRequest:
    payment_request = load_or_fail(session, PaymentRequest, request_id, "payment request decision")
    if not payment_request:
        raise NotFound(f"Payment request {request_id} not found", request_id=request_id)
    return payment_request


def _require_status(payment_request: PaymentRequest, expected: str, action: str):
    if payment_request.status != expected:
        logger.warning(
            f"Refused {action} on request {payment_request.id}: "
            f"status is {payment_request.status}, expected {expected}"
        )
        raise InvalidTransition(action, payment_request.status, request_id=payment_request.id)


def _set_status(
    session: Session,
    payment_request: PaymentRequest,
    *,
    expected: str,
    target: str,
    notes: Optional[str] = None,
):
    """Conditional status write: only applies while the row is still `expected`."""

    if not status.can_transition(expected, target):
        raise InvalidTransition(f"move to {target}", expected, request_id=payment_request.id)

    values = {"status": target, "updated_at": datetime.utcnow()}
    if notes:
        values["admin_notes"] = notes

    result = session.execute(
        update(PaymentRequest)
        .where(PaymentRequest.id == payment_request.id)
        .where(PaymentRequest.status == expected)
        .values(**values)
        .execution_options(synchronize_session=False)
    )

    if result.rowcount != 1:
        logger.warning(
            f"Request {payment_request.id} moved away from {expected} "
            f"before it could be set to {target}"
        )
        raise ConcurrentModification(request_id=payment_request.id)

    session.refresh(payment_request)
    logger.info(f"Request {payment_request.id}: {expected} -> {target}")


def grant_access(session: Session, user_id: int, product_id: int) -> UserProductAccess:
    """Create the access grant unless it already exists."""

    existing = session.exec(
        select(UserProductAccess)
        .where(UserProductAccess.user_id == user_id)
        .where(UserProductAccess.product_id == product_id)
    ).first()

    if existing:
        logger.info(f"User {user_id} already has access to product {product_id}")
        return existing

    access = UserProductAccess(user_id=user_id, product_id=product_id)
    session.add(access)
    session.flush()
    logger.info(f"Granted user {user_id} access to product {product_id}")
    return access


def remove_access(session: Session, user_id: int, product_id: int) -> int:
    result = session.execute(
        delete(UserProductAccess)
        .where(UserProductAccess.user_id == user_id)
        .where(UserProductAccess.product_id == product_id)
        .execution_options(synchronize_session=False)
    )
    logger.info(
        f"Removed {result.rowcount} access grant(s) for user {user_id} "
        f"on product {product_id}"
    )
    return result.rowcount


def has_access(session: Session, user_id: int, product_id: int) -> bool:
    return session.exec(
        select(UserProductAccess.id)
        .where(UserProductAccess.user_id == user_id)
        .where(UserProductAccess.product_id == product_id)
    ).first() is not None


def _event_context(session: Session, payment_request: PaymentRequest) -> dict:
    product = session.get(Product, payment_request.product_id)
    return {
        "product_id": payment_request.product_id,
        "product_title": product.title if product else "Unknown Product",
    }


def _email_user(session: Session, event: PaymentRequestEvent, user_id: int, context: dict, notify: bool):
    if not notify:
        return
    try:
        user = session.get(User, user_id)
    except SQLAlchemyError:
        logger.exception(f"Could not load user {user_id} for {event.value} email")
        return
    send_payment_request_email(
        event=event,
        user=user,
        context=context,
        notify_user=notify,
    )


def _grant_and_notify(
    session: Session,
    payment_request: PaymentRequest,
    *,
    action: str,
    expected: str,
    event: PaymentRequestEvent,
    notes: Optional[str],
    notify: bool,
) -> PaymentRequest:
    with atomic(session, action, payment_request.id):
        _set_status(
            session,
            payment_request,
            expected=expected,
            target=status.APPROVED,
            notes=notes,
        )
        grant_access(session, payment_request.user_id, payment_request.product_id)

        context = _event_context(session, payment_request)
        dispatch_payment_request_event(
            event=event,
            session=session,
            user_id=payment_request.user_id,
            request_id=payment_request.id,
            context=context,
            notify_user=notify,
        )

    _email_user(session, event, payment_request.user_id, context, notify)
    return payment_request


# -------------------------------
# admin operations
# -------------------------------

def approve(
    *,
    session: Session,
    request_id: int,
    actor: User,
    notes: Optional[str] = None,
    notify: bool = True,
) -> PaymentRequest:
    """pending -> approved, granting the purchaser access to the product."""

    _require_admin(actor, "approve", request_id)
    payment_request = _load_request(session, request_id)

    if payment_request.status == status.APPROVED:
        # retry of an earlier approval: repair the grant, don't notify twice
        logger.info(f"Request {request_id} already approved, ensuring access grant")
        with atomic(session, "approve", request_id):
            if notes:
                payment_request.admin_notes = notes
                payment_request.updated_at = datetime.utcnow()
                session.add(payment_request)
                logger.info(f"Updated notes on approved request {request_id}")
            grant_access(session, payment_request.user_id, payment_request.product_id)
        return payment_request

    _require_status(payment_request, status.PENDING, "approve")

    logger.info(f"Admin {actor.id} approving payment request {request_id}")
    return _grant_and_notify(
        session,
        payment_request,
        action="approve",
        expected=status.PENDING,
        event=PaymentRequestEvent.APPROVED,
        notes=notes,
        notify=notify,
    )


def reject(
    *,
    session: Session,
    request_id: int,
    actor: User,
    notes: Optional[str] = None,
) -> PaymentRequest:
    """pending -> rejected. No access is granted and nobody is notified."""

    _require_admin(actor, "reject", request_id)
    payment_request = _load_request(session, request_id)
    _require_status(payment_request, status.PENDING, "reject")

    logger.info(f"Admin {actor.id} rejecting payment request {request_id}")
    with atomic(session, "reject", request_id):
        _set_status(
            session,
            payment_request,
            expected=status.PENDING,
            target=status.REJECTED,
            notes=notes,
        )

    return payment_request


def revoke(
    *,
    session: Session,
    request_id: int,
    actor: User,
    notify: bool = True,
) -> PaymentRequest:
    """approved -> pending, removing access so the request can be reconsidered."""

    _require_super_admin(actor, "revoke", request_id)
    payment_request = _load_request(session, request_id)
    _require_status(payment_request, status.APPROVED, "revoke")

    logger.info(f"Super admin {actor.id} revoking access for payment request {request_id}")
    event = PaymentRequestEvent.ACCESS_REVOKED
    with atomic(session, "revoke", request_id):
        remove_access(session, payment_request.user_id, payment_request.product_id)
        _set_status(
            session,
            payment_request,
            expected=status.APPROVED,
            target=status.PENDING,
        )

        context = _event_context(session, payment_request)
        dispatch_payment_request_event(
            event=event,
            session=session,
            user_id=payment_request.user_id,
            request_id=payment_request.id,
            context=context,
            notify_user=notify,
        )

    _email_user(session, event, payment_request.user_id, context, notify)
    return payment_request


def re_approve(
    *,
    session: Session,
    request_id: int,
    actor: User,
    notify: bool = True,
    notes: Optional[str] = None,
) -> PaymentRequest:
    """rejected -> approved, (re)creating the access grant."""

    _require_super_admin(actor, "re-approve", request_id)
    payment_request = _load_request(session, request_id)
    _require_status(payment_request, status.REJECTED, "re-approve")

    logger.info(f"Super admin {actor.id} re-approving payment request {request_id}")
    return _grant_and_notify(
        session,
        payment_request,
        action="re-approve",
        expected=status.REJECTED,
        event=PaymentRequestEvent.REAPPROVED,
        notes=notes,
        notify=notify,
    )


def reset(
    *,
    session: Session,
    request_id: int,
    actor: User,
    notify: bool = True,
) -> dict:
    """
    Delete the request and any access it granted, whatever its status.

    The purchaser is free to submit a brand-new request afterwards.
    """

    _require_super_admin(actor, "reset", request_id)
    payment_request = _load_request(session, request_id)

    user_id = payment_request.user_id
    product_id = payment_request.product_id
    previous_status = payment_request.status

    logger.info(
        f"Super admin {actor.id} resetting payment request {request_id} "
        f"(was {previous_status})"
    )
    event = PaymentRequestEvent.RESET
    with atomic(session, "reset", request_id):
        context = _event_context(session, payment_request)
        removed = remove_access(session, user_id, product_id)

        result = session.execute(
            delete(PaymentRequest)
            .where(PaymentRequest.id == request_id)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise ConcurrentModification(request_id=request_id)
        session.expunge(payment_request)
        logger.info(f"Deleted payment request {request_id}")

        dispatch_payment_request_event(
            event=event,
            session=session,
            user_id=user_id,
            request_id=request_id,
            context=context,
            notify_user=notify,
        )

    _email_user(session, event, user_id, context, notify)
    return {
        "request_id": request_id,
        "user_id": user_id,
        "product_id": product_id,
        "previous_status": previous_status,
        "access_removed": removed > 0,
    }
