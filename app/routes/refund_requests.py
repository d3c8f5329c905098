import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from app.constants import refund_request_status as status
from app.database import get_session
from app.models.product import Product
from app.models.refund_request import RefundRequest
from app.models.user import User
from app.schemas.refund_request_schemas import RefundRequestCreate
from app.utils.token import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", status_code=201)
def submit_refund_request(
    data: RefundRequestCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    product = session.get(Product, data.product_id)
    if not product:
        raise HTTPException(404, "Product not found")

    open_refund = session.exec(
        select(RefundRequest)
        .where(RefundRequest.user_id == current_user.id)
        .where(RefundRequest.product_id == product.id)
        .where(RefundRequest.status == status.PENDING)
    ).first()
    if open_refund:
        raise HTTPException(409, "You already have a pending refund request for this product")

    refund = RefundRequest(
        user_id=current_user.id,
        status=status.PENDING,
        **data.model_dump(),
    )

    session.add(refund)
    session.commit()
    session.refresh(refund)

    logger.info(
        f"User {current_user.id} submitted refund request {refund.id} for product {product.id}"
    )

    return {
        "message": "Your refund request has been submitted. We'll review it within 24-48 hours.",
        "refund_id": refund.id,
        "status": refund.status,
    }


@router.get("/me")
def my_refund_requests(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    rows = session.exec(
        select(RefundRequest, Product.title)
        .join(Product, Product.id == RefundRequest.product_id, isouter=True)
        .where(RefundRequest.user_id == current_user.id)
        .order_by(RefundRequest.created_at.desc(), RefundRequest.id.desc())
    ).all()

    return [
        {
            "refund_id": r.id,
            "product_id": r.product_id,
            "product_title": title or "Unknown Product",
            "reason": r.reason,
            "status": r.status,
            "admin_notes": r.admin_notes,
            "created_at": r.created_at,
            "updated_at": r.updated_at,
        }
        for r, title in rows
    ]
