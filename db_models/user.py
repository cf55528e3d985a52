# db_models/user.py
"""
User model.

Roles:
- ADMIN: back-office administration
- STAFF: borrows and returns equipment
- OPERATOR: handles check-out desk and maintenance
- VIEWER: read-only
"""
from enum import Enum

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from db_base import Base


class UserRole(str, Enum):
    """User roles (closed set)."""
    ADMIN = "Admin"
    STAFF = "Staff"
    VIEWER = "Viewer"
    OPERATOR = "Operator"


class User(Base):
    __tablename__ = "users"

    seq: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    id: Mapped[str] = mapped_column(
        String(64),
        unique=True,
        index=True,
        nullable=False,
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )

    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=UserRole.STAFF.value,
    )

    email: Mapped[str] = mapped_column(String(255), nullable=False)
    department: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # bcrypt hash; opaque to everything except the admin gate
    hashed_password: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )
