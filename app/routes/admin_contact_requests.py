import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session, select

from app.constants import contact_request_status as status
from app.database import get_session
from app.models.contact_request import ContactRequest
from app.models.user import User
from app.schemas.contact_request_schemas import ContactRequestResponse, ContactStatusUpdate
from app.utils.pagination import paginate
from app.utils.token import get_current_admin

logger = logging.getLogger(__name__)

router = APIRouter()


def _serialize(contact: ContactRequest) -> dict:
    return ContactRequestResponse(**contact.model_dump()).model_dump()


def _get_or_404(session: Session, contact_id: int) -> ContactRequest:
    contact = session.get(ContactRequest, contact_id)
    if not contact:
        raise HTTPException(404, "Contact request not found")
    return contact


@router.get("")
def list_contact_requests(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status_filter: str | None = Query(None, alias="status"),
    search: str | None = None,
    session: Session = Depends(get_session),
    admin: User = Depends(get_current_admin),
):
    query = select(ContactRequest)

    if status_filter and status_filter.lower() != "all":
        if status_filter.lower() not in status.ALL_STATUSES:
            raise HTTPException(400, f"Unknown status '{status_filter}'")
        query = query.where(ContactRequest.status == status_filter.lower())

    if search:
        s = f"%{search}%"
        query = query.where(
            ContactRequest.name.ilike(s) |
            ContactRequest.email.ilike(s) |
            ContactRequest.subject.ilike(s)
        )

    query = query.order_by(ContactRequest.created_at.desc(), ContactRequest.id.desc())

    return paginate(
        session=session,
        query=query,
        page=page,
        limit=limit,
        serialize=_serialize,
    )


@router.get("/{contact_id}")
def get_contact_request(
    contact_id: int,
    session: Session = Depends(get_session),
    admin: User = Depends(get_current_admin),
):
    return _serialize(_get_or_404(session, contact_id))


@router.patch("/{contact_id}/status")
def update_contact_status(
    contact_id: int,
    data: ContactStatusUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(get_current_admin),
):
    contact = _get_or_404(session, contact_id)

    now = datetime.utcnow()
    contact.status = data.status
    contact.updated_at = now
    if data.notes:
        contact.admin_notes = data.notes
    if data.status == status.REPLIED:
        contact.replied_at = now
        contact.replied_by = admin.id

    session.add(contact)
    session.commit()
    session.refresh(contact)

    logger.info(f"Admin {admin.id} marked contact request {contact_id} as {data.status}")

    return {
        "message": f"Contact request marked as {data.status}",
        "contact": _serialize(contact),
    }


@router.delete("/{contact_id}")
def delete_contact_request(
    contact_id: int,
    session: Session = Depends(get_session),
    admin: User = Depends(get_current_admin),
):
    contact = _get_or_404(session, contact_id)

    session.delete(contact)
    session.commit()

    logger.info(f"Admin {admin.id} deleted contact request {contact_id}")
    return {"message": "Contact request deleted successfully"}
