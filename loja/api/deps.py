"""
FastAPI dependencies — database session, data gateway and auth guards.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from loja.core.exceptions import AuthenticationError, AuthorizationError
from loja.core.security import (InvalidTokenError, TokenExpiredError,
                                decode_access_token)
from loja.db.gateway import DataGateway
from loja.models.user import ADMIN_ROLES, UserRole
from loja.schemas.user import AuthenticatedUser

logger = logging.getLogger(__name__)

# auto_error=False so a missing header is reported with our own 401 envelope
bearer_scheme = HTTPBearer(auto_error=False)


async def capture_request_body(request: Request) -> None:
    """Keep the parsed JSON body on ``request.state`` for the error handlers' logs."""
    if request.method not in ("POST", "PUT", "PATCH"):
        return
    try:
        request.state.body = await request.json()
    except ValueError:
        request.state.body = None


# ── Database ────────────────────────────────────────────────────────
async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield a session from the factory ``create_app`` put on ``app.state``."""
    async with request.app.state.session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


async def get_gateway(db: AsyncSession = Depends(get_db)) -> DataGateway:
    return DataGateway(db)


# ── Auth dependencies ───────────────────────────────────────────────
async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    gateway: DataGateway = Depends(get_gateway),
) -> AuthenticatedUser:
    """Verify the bearer token and confirm its user still exists."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Token de autenticação não fornecido")

    try:
        payload = decode_access_token(credentials.credentials)
        identity = AuthenticatedUser(id=payload["id"], role=payload["role"])
    except TokenExpiredError:
        raise AuthenticationError("Token expirado")
    except (InvalidTokenError, PydanticValidationError):
        raise AuthenticationError("Token inválido")

    try:
        user = await gateway.get("users", identity.id, columns="id, role")
    except SQLAlchemyError as exc:
        logger.error("User lookup failed for token subject %s: %s", identity.id, exc)
        user = None

    if user is None:
        raise AuthenticationError("Usuário não encontrado ou token inválido")
    return identity


def require_roles(*roles: UserRole) -> Callable[..., Awaitable[AuthenticatedUser]]:
    """Build a dependency that only lets the given roles through."""
    allowed = frozenset(roles)

    async def _guard(
        current_user: AuthenticatedUser = Depends(get_current_user),
    ) -> AuthenticatedUser:
        if current_user.role not in allowed:
            raise AuthorizationError("Acesso não autorizado")
        return current_user

    return _guard


require_admin = require_roles(*ADMIN_ROLES)
