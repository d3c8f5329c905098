from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import String, cast
from sqlmodel import Session, select

from app.constants import payment_request_status as status
from app.constants.roles import SUPER_ADMIN
from app.database import get_session
from app.exceptions import Unauthorized
from app.models.payment_request import PaymentRequest
from app.models.product import Product
from app.models.user import User
from app.schemas.payment_request_schemas import (
    ApproveRequest,
    PaymentRequestResponse,
    ReApproveRequest,
    RejectRequest,
    ResetRequest,
    RevokeRequest,
)
from app.services import access_grant_service
from app.utils.pagination import paginate
from app.utils.token import get_current_admin

router = APIRouter()


def _serialize(row) -> dict:
    r, product_title, user_email = row
    return PaymentRequestResponse(
        **r.model_dump(),
        product_title=product_title,
        user_email=user_email,
    ).model_dump()


def _detail_query():
    return (
        select(PaymentRequest, Product.title, User.email)
        .join(Product, Product.id == PaymentRequest.product_id)
        .join(User, User.id == PaymentRequest.user_id)
    )


def _load_detail(session: Session, request_id: int) -> dict:
    row = session.exec(
        _detail_query().where(PaymentRequest.id == request_id)
    ).first()
    if not row:
        raise HTTPException(404, "Payment request not found")
    return _serialize(row)


# -------------------------------
# 📋 List / view
# -------------------------------

@router.get("")
def list_payment_requests(
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
        query = query.where(PaymentRequest.status == status_filter.lower())

    if search:
        s = f"%{search}%"
        query = query.where(
            User.email.ilike(s) |
            Product.title.ilike(s) |
            cast(PaymentRequest.payment_method, String).ilike(s)
        )

    query = query.order_by(PaymentRequest.created_at.desc(), PaymentRequest.id.desc())

    return paginate(
        session=session,
        query=query,
        page=page,
        limit=limit,
        serialize=_serialize,
    )


@router.get("/{request_id}")
def get_payment_request(
    request_id: int,
    session: Session = Depends(get_session),
    admin: User = Depends(get_current_admin),
):
    return _load_detail(session, request_id)


# -------------------------------
# ✅ Decisions (any admin)
# -------------------------------

@router.patch("/{request_id}/approve")
def approve_payment_request(
    request_id: int,
    data: ApproveRequest = ApproveRequest(),
    session: Session = Depends(get_session),
    admin: User = Depends(get_current_admin),
):
    access_grant_service.approve(
        session=session,
        request_id=request_id,
        actor=admin,
        notes=data.notes,
        notify=data.notify,
    )
    return {
        "message": "Payment request approved successfully",
        "request": _load_detail(session, request_id),
    }


@router.patch("/{request_id}/reject")
def reject_payment_request(
    request_id: int,
    data: RejectRequest = RejectRequest(),
    session: Session = Depends(get_session),
    admin: User = Depends(get_current_admin),
):
    access_grant_service.reject(
        session=session,
        request_id=request_id,
        actor=admin,
        notes=data.notes,
    )
    return {
        "message": "Payment request rejected successfully",
        "request": _load_detail(session, request_id),
    }


# -------------------------------
# 🔐 Super admin only
# -------------------------------

@router.patch("/{request_id}/revoke")
def revoke_access(
    request_id: int,
    data: RevokeRequest = RevokeRequest(),
    session: Session = Depends(get_session),
    admin: User = Depends(get_current_admin),
):
    access_grant_service.revoke(
        session=session,
        request_id=request_id,
        actor=admin,
        notify=data.notify,
    )
    note = "user notified" if data.notify else "no notification sent"
    return {
        "message": f"Access revoked and request reset to pending ({note})",
        "request": _load_detail(session, request_id),
    }


@router.patch("/{request_id}/re-approve")
def re_approve_payment_request(
    request_id: int,
    data: ReApproveRequest = ReApproveRequest(),
    session: Session = Depends(get_session),
    admin: User = Depends(get_current_admin),
):
    access_grant_service.re_approve(
        session=session,
        request_id=request_id,
        actor=admin,
        notify=data.notify,
        notes=data.notes,
    )
    note = "user notified" if data.notify else "no notification sent"
    return {
        "message": f"Payment request approved successfully ({note})",
        "request": _load_detail(session, request_id),
    }


@router.post("/{request_id}/reset")
def reset_payment_request(
    request_id: int,
    data: ResetRequest,
    session: Session = Depends(get_session),
    admin: User = Depends(get_current_admin),
):
    # authorization before the confirmation prompt
    if not admin.is_super_admin:
        raise Unauthorized("reset", SUPER_ADMIN, request_id=request_id)

    if not data.confirm:
        raise HTTPException(400, "Reset deletes the request permanently, set confirm=true")

    result = access_grant_service.reset(
        session=session,
        request_id=request_id,
        actor=admin,
        notify=data.notify,
    )
    note = "user notified" if data.notify else "no notification sent"
    return {
        "message": f"Payment request has been reset. User can now purchase again ({note})",
        **result,
    }
