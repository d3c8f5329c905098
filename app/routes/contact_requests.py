import logging

from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.constants import contact_request_status as status
from app.database import get_session
from app.models.contact_request import ContactRequest
from app.schemas.contact_request_schemas import ContactRequestCreate

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", status_code=201)
def submit_contact_request(
    data: ContactRequestCreate,
    session: Session = Depends(get_session),
):
    """Public contact form; no account needed."""

    contact = ContactRequest(status=status.PENDING, **data.model_dump())

    session.add(contact)
    session.commit()
    session.refresh(contact)

    logger.info(f"Contact request {contact.id} received: {contact.subject!r}")

    return {
        "message": "Thanks for reaching out. We'll get back to you soon.",
        "contact_id": contact.id,
    }
