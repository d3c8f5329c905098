from datetime import datetime
from typing import Literal

from pydantic import BaseModel


class RoleUpdate(BaseModel):
    role: Literal["user", "admin", "super_admin"]


class UserRoleResponse(BaseModel):
    id: int
    username: str
    email: str
    first_name: str
    last_name: str
    role: str
    is_owner: bool
    created_at: datetime
