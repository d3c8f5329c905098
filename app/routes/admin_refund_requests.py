from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session, select

from app.constants import refund_request_status as status
from app.database import get_session
from app.models.product import Product
from app.models.refund_request import RefundRequest
from app.models.user import User
from app.schemas.refund_request_schemas import RefundDecision, RefundRequestResponse
from app.services import refund_service
from app.utils.pagination import paginate
from app.utils.token import get_current_admin

router = APIRouter()


def _detail_query():
    return (
        select(RefundRequest, Product.title, User.email)
        .join(Product, Product.id == RefundRequest.product_id, isouter=True)
        .join(User, User.id == RefundRequest.user_id, isouter=True)
    )


def _serializer(session: Session):
    def serialize(row) -> dict:
        r, product_title, user_email = row
        return RefundRequestResponse(
            **r.model_dump(),
            product_title=product_title or "Unknown Product",
            user_email=user_email or "Unknown User",
            purchase_status=refund_service.purchase_status(session, r.user_id, r.product_id),
        ).model_dump()
    return serialize


def _load_detail(session: Session, refund_id: int) -> dict:
    row = session.exec(
        _detail_query().where(RefundRequest.id == refund_id)
    ).first()
    if not row:
        raise HTTPException(404, "Refund request not found")
    return _serializer(session)(row)


@router.get("")
def list_refund_requests(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status_filter: str | None = Query(None, alias="status"),
    search: str | None = None,
    session: Session = Depends(get_session),
    admin: User = Depends(get_current_admin),
):
    query = _detail_query()

    if status_filter and status_filter.lower() != "all":
        if status_filter.lower() not in status.ALL_STATUSES:
            raise HTTPException(400, f"Unknown status '{status_filter}'")
        query = query.where(RefundRequest.status == status_filter.lower())

    if search:
        s = f"%{search}%"
        query = query.where(
            User.email.ilike(s) |
            Product.title.ilike(s) |
            RefundRequest.reason.ilike(s)
        )

    query = query.order_by(RefundRequest.created_at.desc(), RefundRequest.id.desc())

    return paginate(
        session=session,
        query=query,
        page=page,
        limit=limit,
        serialize=_serializer(session),
    )


@router.get("/{refund_id}")
def get_refund_request(
    refund_id: int,
    session: Session = Depends(get_session),
    admin: User = Depends(get_current_admin),
):
    return _load_detail(session, refund_id)


@router.patch("/{refund_id}/approve")
def approve_refund_request(
    refund_id: int,
    data: RefundDecision = RefundDecision(),
    session: Session = Depends(get_session),
    admin: User = Depends(get_current_admin),
):
    refund_service.approve(session=session, refund_id=refund_id, actor=admin, notes=data.notes)
    return {
        "message": "Refund request approved successfully",
        "refund": _load_detail(session, refund_id),
    }


@router.patch("/{refund_id}/reject")
def reject_refund_request(
    refund_id: int,
    data: RefundDecision = RefundDecision(),
    session: Session = Depends(get_session),
    admin: User = Depends(get_current_admin),
):
    refund_service.reject(session=session, refund_id=refund_id, actor=admin, notes=data.notes)
    return {
        "message": "Refund request rejected successfully",
        "refund": _load_detail(session, refund_id),
    }


@router.delete("/{refund_id}")
def delete_refund_request(
    refund_id: int,
    session: Session = Depends(get_session),
    admin: User = Depends(get_current_admin),
):
    refund_service.delete_refund(session=session, refund_id=refund_id, actor=admin)
    return {"message": "Refund request deleted successfully"}
