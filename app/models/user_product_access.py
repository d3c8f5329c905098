from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


class UserProductAccess(SQLModel, table=True):
    __tablename__ = "user_product_access"
    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="uq_user_product_access"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    product_id: int = Field(foreign_key="product.id", index=True)

    granted_at: datetime = Field(default_factory=datetime.utcnow)
