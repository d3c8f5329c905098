"""
Admin decisions on refund requests.

A refund decision is a status change plus an in-app notification. It
does not touch access grants; revoking access stays a separate
super-admin action on the payment request.
"""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import delete, update
from sqlmodel import Session, select

from app.constants import payment_request_status
from app.constants import refund_request_status as status
from app.constants.roles import ADMIN
from app.exceptions import ConcurrentModification, InvalidTransition, NotFound, Unauthorized
from app.models.payment_request import PaymentRequest
from app.models.product import Product
from app.models.refund_request import RefundRequest
from app.models.user import User
from app.models.user_product_access import UserProductAccess
from app.notifications import RefundRequestEvent, dispatch_refund_request_event
from app.services.transactions import atomic, load_or_fail

logger = logging.getLogger(__name__)

_EVENTS = {
    status.APPROVED: RefundRequestEvent.APPROVED,
    status.REJECTED: RefundRequestEvent.REJECTED,
}


def _require_admin(actor: Optional[User], action: str, refund_id: int):
    if actor is None or not actor.is_admin:
        logger.warning(f"Refused {action} on refund {refund_id}: actor is not an admin")
        raise Unauthorized(action, ADMIN, request_id=refund_id, target="refund requests")


def _load_refund(session: Session, refund_id: int) -> RefundRequest:
    refund = load_or_fail(session, RefundRequest, refund_id, "refund decision")
    if not refund:
        raise NotFound(f"Refund request {refund_id} not found", request_id=refund_id)
    return refund


def purchase_status(session: Session, user_id: int, product_id: int) -> dict:
    """What the store knows about the user's purchase of the product."""

    access = session.exec(
        select(UserProductAccess)
        .where(UserProductAccess.user_id == user_id)
        .where(UserProductAccess.product_id == product_id)
    ).first()

    payment = session.exec(
        select(PaymentRequest)
        .where(PaymentRequest.user_id == user_id)
        .where(PaymentRequest.product_id == product_id)
        .where(PaymentRequest.status == payment_request_status.APPROVED)
        .order_by(PaymentRequest.created_at.desc())
    ).first()

    if payment:
        purchase_method = payment.payment_method.value
    elif access:
        purchase_method = "direct_access"
    else:
        purchase_method = "unknown"

    purchase_date = None
    if payment:
        purchase_date = payment.created_at
    elif access:
        purchase_date = access.granted_at

    return {
        "has_purchased": bool(access or payment),
        "has_access": access is not None,
        "payment_approved": payment is not None,
        "purchase_date": purchase_date,
        "purchase_method": purchase_method,
    }


def decide(
    *,
    session: Session,
    refund_id: int,
    actor: User,
    decision: str,
    notes: Optional[str] = None,
) -> RefundRequest:
    """pending -> approved | rejected, notifying the requester."""

    action = "approve" if decision == status.APPROVED else "reject"
    _require_admin(actor, action, refund_id)
    refund = _load_refund(session, refund_id)

    if not status.can_transition(refund.status, decision):
        logger.warning(
            f"Refused {action} on refund {refund_id}: status is {refund.status}"
        )
        raise InvalidTransition(
            action, refund.status, request_id=refund_id, target="refund request"
        )

    logger.info(f"Admin {actor.id} setting refund {refund_id} to {decision}")
    with atomic(session, f"{action} refund", refund_id):
        values = {"status": decision, "updated_at": datetime.utcnow()}
        if notes:
            values["admin_notes"] = notes

        result = session.execute(
            update(RefundRequest)
            .where(RefundRequest.id == refund_id)
            .where(RefundRequest.status == refund.status)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise ConcurrentModification(request_id=refund_id)
        session.refresh(refund)

        product = session.get(Product, refund.product_id)
        dispatch_refund_request_event(
            event=_EVENTS[decision],
            session=session,
            user_id=refund.user_id,
            context={
                "product_id": refund.product_id,
                "product_title": product.title if product else "Unknown Product",
            },
        )

    return refund


def approve(*, session: Session, refund_id: int, actor: User, notes: Optional[str] = None):
    return decide(
        session=session, refund_id=refund_id, actor=actor, decision=status.APPROVED, notes=notes
    )


def reject(*, session: Session, refund_id: int, actor: User, notes: Optional[str] = None):
    return decide(
        session=session, refund_id=refund_id, actor=actor, decision=status.REJECTED, notes=notes
    )


def delete_refund(*, session: Session, refund_id: int, actor: User) -> None:
    _require_admin(actor, "delete", refund_id)
    refund = _load_refund(session, refund_id)

    with atomic(session, "delete refund", refund_id):
        session.execute(
            delete(RefundRequest)
            .where(RefundRequest.id == refund_id)
            .execution_options(synchronize_session=False)
        )
        session.expunge(refund)

    logger.info(f"Admin {actor.id} deleted refund request {refund_id}")
