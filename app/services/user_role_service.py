import logging

from sqlmodel import Session

from app.config import settings
from app.constants.roles import ALL_ROLES, SUPER_ADMIN
from app.exceptions import NotFound, ProtectedAccount, Unauthorized
from app.models.user import User
from app.services.transactions import atomic, load_or_fail

logger = logging.getLogger(__name__)


def is_owner(user: User) -> bool:
    if not settings.OWNER_EMAIL:
        return False
    return user.email.lower() == settings.OWNER_EMAIL.lower()


def assign_role(*, session: Session, user_id: int, role: str, actor: User) -> User:
    """
    Only a super admin may change roles. The owner's role and the
    caller's own role are fixed.
    """

    if actor is None or not actor.is_super_admin:
        logger.warning(f"Refused role change on user {user_id}: actor is not a super admin")
        raise Unauthorized("change", SUPER_ADMIN, request_id=user_id, target="user roles")

    if role not in ALL_ROLES:
        raise ValueError(f"Unknown role '{role}'")

    target = load_or_fail(session, User, user_id, "role change")
    if not target:
        raise NotFound(f"User {user_id} not found", request_id=user_id)

    if is_owner(target):
        raise ProtectedAccount("The owner's role cannot be changed", request_id=user_id)

    if target.id == actor.id:
        raise ProtectedAccount("You cannot change your own role", request_id=user_id)

    if target.role == role:
        return target

    previous = target.role
    with atomic(session, "role change", user_id):
        target.role = role
        session.add(target)

    session.refresh(target)
    logger.info(f"Super admin {actor.id} changed user {user_id} role: {previous} -> {role}")
    return target
