from fastapi import APIRouter, Depends, Query
from sqlmodel import Session, select

from app.constants.roles import ADMIN_ROLES
from app.database import get_session
from app.models.user import User
from app.schemas.user_schemas import RoleUpdate, UserRoleResponse
from app.services import user_role_service
from app.utils.pagination import paginate
from app.utils.token import get_current_admin

router = APIRouter()


def _serialize(user: User) -> dict:
    return UserRoleResponse(
        **user.model_dump(),
        is_owner=user_role_service.is_owner(user),
    ).model_dump()


@router.get("")
def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    staff_only: bool = False,
    search: str | None = None,
    session: Session = Depends(get_session),
    admin: User = Depends(get_current_admin),
):
    query = select(User)

    if staff_only:
        query = query.where(User.role.in_(ADMIN_ROLES))

    if search:
        s = f"%{search}%"
        query = query.where(User.email.ilike(s) | User.username.ilike(s))

    query = query.order_by(User.created_at.desc(), User.id.desc())

    return paginate(
        session=session,
        query=query,
        page=page,
        limit=limit,
        serialize=_serialize,
    )


@router.patch("/{user_id}/role")
def update_user_role(
    user_id: int,
    data: RoleUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(get_current_admin),
):
    user = user_role_service.assign_role(
        session=session,
        user_id=user_id,
        role=data.role,
        actor=admin,
    )
    return {
        "message": "User role updated successfully",
        "user": _serialize(user),
    }
