from sqlalchemy import func
from sqlmodel import Session, select

from app.constants import contact_request_status, refund_request_status
from app.constants import payment_request_status as status
from app.models.contact_request import ContactRequest
from app.models.payment_request import PaymentRequest
from app.models.product import Product
from app.models.refund_request import RefundRequest
from app.models.user import User


def payment_request_stats(session: Session) -> dict:
    """
    Request counts and approved revenue, recomputed from the table on
    every call. No stored counter exists.
    """

    rows = session.exec(
        select(PaymentRequest.status, func.count(PaymentRequest.id))
        .group_by(PaymentRequest.status)
    ).all()
    counts = {row_status: count for row_status, count in rows}

    revenue = session.exec(
        select(func.coalesce(func.sum(Product.price), 0))
        .select_from(PaymentRequest)
        .join(Product, Product.id == PaymentRequest.product_id)
        .where(PaymentRequest.status == status.APPROVED)
    ).one()

    return {
        "pending_requests": counts.get(status.PENDING, 0),
        "approved_requests": counts.get(status.APPROVED, 0),
        "rejected_requests": counts.get(status.REJECTED, 0),
        "total_requests": sum(counts.values()),
        "total_revenue": float(revenue or 0),
    }


def dashboard_stats(session: Session) -> dict:
    stats = payment_request_stats(session)

    stats["total_users"] = session.exec(select(func.count(User.id))).one()
    stats["total_products"] = session.exec(
        select(func.count(Product.id)).where(Product.is_active == True)
    ).one()
    stats["pending_refund_requests"] = session.exec(
        select(func.count(RefundRequest.id))
        .where(RefundRequest.status == refund_request_status.PENDING)
    ).one()
    stats["pending_contact_requests"] = session.exec(
        select(func.count(ContactRequest.id))
        .where(ContactRequest.status == contact_request_status.PENDING)
    ).one()

    return stats
