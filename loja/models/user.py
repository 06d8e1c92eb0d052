"""
User model — authentication & role-based access control.
"""

from __future__ import annotations

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String

from loja.db.base import Base


class UserRole(str, enum.Enum):
    MASTER_ADMIN = "MASTER_ADMIN"
    ADMIN = "ADMIN"
    USER = "USER"


ADMIN_ROLES = (UserRole.ADMIN, UserRole.MASTER_ADMIN)


def _new_id() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id: str = Column(String(36), primary_key=True, default=_new_id)  # type: ignore[assignment]
    email: str = Column(String(320), unique=True, nullable=False, index=True)  # type: ignore[assignment]
    password: str = Column(String(128), nullable=False)  # type: ignore[assignment]
    name: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    role: str = Column(  # type: ignore[assignment]
        String(20),
        nullable=False,
        default=UserRole.USER.value,
        server_default=UserRole.USER.value,
    )  # MASTER_ADMIN | ADMIN | USER
    active: bool = Column(Boolean, nullable=False, default=True, server_default="true")  # type: ignore[assignment]
    last_login: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(DateTime(timezone=True), default=_now)  # type: ignore[assignment]
    updated_at: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]
    created_by: str | None = Column(String(36), ForeignKey("users.id"), nullable=True)  # type: ignore[assignment]
    updated_by: str | None = Column(String(36), ForeignKey("users.id"), nullable=True)  # type: ignore[assignment]
