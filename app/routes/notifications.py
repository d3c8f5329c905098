from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func, update
from sqlmodel import Session, select

from app.database import get_session
from app.models.notifications import Notification
from app.models.user import User
from app.utils.token import get_current_user

router = APIRouter()


def _serialize(n: Notification) -> dict:
    return {
        "notification_id": n.id,
        "title": n.title,
        "message": n.message,
        "type": n.type,
        "related_request_id": n.related_request_id,
        "is_read": n.is_read,
        "created_at": n.created_at,
    }


def _own_notification(session: Session, notification_id: int, user: User) -> Notification:
    notification = session.get(Notification, notification_id)

    if not notification or notification.user_id != user.id:
        raise HTTPException(404, "Notification not found")

    return notification


@router.get("")
def list_notifications(
    unread_only: bool = False,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    query = select(Notification).where(Notification.user_id == current_user.id)

    if unread_only:
        query = query.where(Notification.is_read == False)

    notifications = session.exec(
        query.order_by(Notification.created_at.desc(), Notification.id.desc())
    ).all()

    return [_serialize(n) for n in notifications]


@router.get("/unread-count")
def unread_count(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    count = session.exec(
        select(func.count(Notification.id))
        .where(Notification.user_id == current_user.id)
        .where(Notification.is_read == False)
    ).one()
    return {"unread": count}


@router.patch("/read-all")
def mark_all_read(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    result = session.execute(
        update(Notification)
        .where(Notification.user_id == current_user.id)
        .where(Notification.is_read == False)
        .values(is_read=True)
    )
    session.commit()

    return {"message": "All notifications marked as read", "updated": result.rowcount}


@router.patch("/{notification_id}/read")
def mark_read(
    notification_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    notification = _own_notification(session, notification_id, current_user)

    notification.is_read = True
    session.add(notification)
    session.commit()
    session.refresh(notification)

    return _serialize(notification)
