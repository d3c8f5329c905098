import logging
from contextlib import contextmanager
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from app.exceptions import PaymentRequestError, PersistenceError

logger = logging.getLogger(__name__)


@contextmanager
def atomic(session: Session, action: str, record_id: Optional[int] = None):
    """
    Commit on success. Domain errors roll back and propagate as they are;
    storage failures roll back and surface as PersistenceError.
    """
    try:
        yield
        session.commit()
    except PaymentRequestError:
        session.rollback()
        raise
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception(f"{action} failed (record {record_id})")
        raise PersistenceError(request_id=record_id) from exc


def load_or_fail(session: Session, model, record_id: int, action: str):
    """session.get with storage failures mapped to PersistenceError."""
    try:
        return session.get(model, record_id)
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception(f"Loading {model.__tablename__} {record_id} for {action} failed")
        raise PersistenceError(request_id=record_id) from exc
