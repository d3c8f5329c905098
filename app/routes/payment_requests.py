import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from app.constants import payment_request_status as status
from app.database import get_session
from app.models.payment_request import PaymentRequest
from app.models.product import Product
from app.models.user import User
from app.schemas.payment_request_schemas import PaymentRequestCreate
from app.services.access_grant_service import has_access
from app.utils.token import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", status_code=201)
def submit_payment_request(
    data: PaymentRequestCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Purchaser claims to have paid for a product. The request waits in
    `pending` until an admin reviews it.
    """

    product = session.get(Product, data.product_id)
    if not product or not product.is_active:
        raise HTTPException(404, "Product not available")

    if has_access(session, current_user.id, product.id):
        raise HTTPException(409, "You already own this product")

    active = session.exec(
        select(PaymentRequest)
        .where(PaymentRequest.user_id == current_user.id)
        .where(PaymentRequest.product_id == product.id)
        .where(PaymentRequest.status.in_(status.ACTIVE_STATUSES))
    ).first()
    if active:
        raise HTTPException(
            409,
            f"You already have a {active.status} payment request for this product"
        )

    payment_request = PaymentRequest(
        user_id=current_user.id,
        status=status.PENDING,
        **data.model_dump(),
    )

    session.add(payment_request)
    session.commit()
    session.refresh(payment_request)

    logger.info(
        f"User {current_user.id} submitted payment request {payment_request.id} "
        f"for product {product.id} via {payment_request.payment_method.value}"
    )

    return {
        "message": "Your payment request has been submitted. We'll review it within 24 hours.",
        "request_id": payment_request.id,
        "status": payment_request.status,
    }


@router.get("/me")
def my_payment_requests(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    rows = session.exec(
        select(PaymentRequest, Product)
        .join(Product, Product.id == PaymentRequest.product_id)
        .where(PaymentRequest.user_id == current_user.id)
        .order_by(PaymentRequest.created_at.desc(), PaymentRequest.id.desc())
    ).all()

    return [
        {
            "request_id": r.id,
            "product_id": p.id,
            "product_title": p.title,
            "payment_method": r.payment_method,
            "status": r.status,
            "admin_notes": r.admin_notes,
            "created_at": r.created_at,
        }
        for r, p in rows
    ]
