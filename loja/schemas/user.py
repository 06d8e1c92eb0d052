"""Pydantic schemas for User CRUD and login."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator

from loja.models.user import UserRole
from loja.schemas.common import EMAIL_RE, check_not_empty

_MIN_PASSWORD = 8


def _check_email(v: str) -> str:
    v = v.strip()
    if not EMAIL_RE.match(v):
        raise ValueError("Formato de e-mail inválido")
    return v


def _check_password(v: str) -> str:
    if len(v) < _MIN_PASSWORD:
        raise ValueError(f"A senha deve ter pelo menos {_MIN_PASSWORD} caracteres")
    return v


class UserLogin(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return _check_email(v)

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        return check_not_empty(v, "Senha é obrigatória")


class UserCreate(BaseModel):
    email: str
    password: str
    name: str
    role: UserRole

    model_config = ConfigDict(use_enum_values=True)

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return _check_email(v)

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        return _check_password(v)

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return check_not_empty(v, "Nome é obrigatório").strip()


class UserUpdate(BaseModel):
    email: str | None = None
    password: str | None = None
    name: str | None = None
    role: UserRole | None = None
    active: bool | None = None

    model_config = ConfigDict(use_enum_values=True)

    @field_validator("email")
    @classmethod
    def _email(cls, v: str | None) -> str | None:
        return None if v is None else _check_email(v)

    @field_validator("password")
    @classmethod
    def _password(cls, v: str | None) -> str | None:
        return None if v is None else _check_password(v)

    @field_validator("name")
    @classmethod
    def _name(cls, v: str | None) -> str | None:
        return None if v is None else check_not_empty(v, "Nome não pode ser vazio").strip()


class UserRead(BaseModel):
    """User as returned by the API; the password hash never leaves the server."""

    id: str
    email: str
    name: str
    role: str
    active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None
    last_login: datetime | None = None

    model_config = {"from_attributes": True}


class LoginData(BaseModel):
    user: UserRead
    token: str


class AuthenticatedUser(BaseModel):
    """Identity extracted from a verified bearer token."""

    id: str
    role: UserRole
