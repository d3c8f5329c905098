from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

from app.constants.roles import ADMIN_ROLES, SUPER_ADMIN, USER


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    first_name: str
    last_name: str
    username: str
    email: str = Field(index=True)
    role: str = Field(default=USER)  # user | admin | super_admin
    can_login: bool = Field(default=True)
    profile_image: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES

    @property
    def is_super_admin(self) -> bool:
        return self.role == SUPER_ADMIN
