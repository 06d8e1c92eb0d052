"""
Auth endpoints — login, current user, and user management (ADMIN+).

Users are never hard-deleted: ``DELETE /users/{id}`` deactivates. Only a
MASTER_ADMIN may create, modify, promote to or deactivate a MASTER_ADMIN.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Query, Request
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy.exc import SQLAlchemyError

from loja.api.common import ensure_unique, get_or_404, page_envelope, utcnow
from loja.api.deps import get_current_user, get_gateway, require_admin
from loja.core.config import settings
from loja.core.exceptions import (AuthenticationError, AuthorizationError,
                                  NotFoundError)
from loja.core.security import (create_access_token, get_password_hash_async,
                                verify_password_async)
from loja.db.gateway import DataGateway, Order, Pagination
from loja.models.user import UserRole
from loja.schemas.common import Envelope, ListEnvelope
from loja.schemas.user import (AuthenticatedUser, LoginData, UserCreate,
                               UserLogin, UserRead, UserUpdate)

# Rate limiter, keyed by client IP
limiter = Limiter(key_func=get_remote_address)

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)

USERS = "users"
PUBLIC_COLUMNS = "id, email, name, role, active, created_at, updated_at, last_login"
INVALID_CREDENTIALS = "Credenciais inválidas"


def _login_rate_limit() -> str:
    # evaluated on every request
    return settings.LOGIN_RATE_LIMIT


def _protect_master_admin(target: dict[str, Any], caller: AuthenticatedUser, message: str) -> None:
    if target["role"] == UserRole.MASTER_ADMIN and caller.role != UserRole.MASTER_ADMIN:
        raise AuthorizationError(message)


@router.post("/login", response_model=Envelope[LoginData])
@limiter.limit(_login_rate_limit)
async def login(
    request: Request,
    body: UserLogin,
    gateway: DataGateway = Depends(get_gateway),
) -> dict:
    """Exchange e-mail and password for a bearer token."""
    found = await gateway.select(USERS, "*", filters={"email": body.email})
    user = found["data"][0] if found["data"] else None

    # same message for unknown e-mail and wrong password
    if user is None:
        raise AuthenticationError(INVALID_CREDENTIALS)
    if not user["active"]:
        raise AuthenticationError("Conta desativada. Entre em contato com o administrador.")
    if not await verify_password_async(body.password, user["password"]):
        raise AuthenticationError(INVALID_CREDENTIALS)

    token = create_access_token(user["id"], user["role"])

    now = utcnow()
    try:
        await gateway.update(USERS, user["id"], {"last_login": now})
        user["last_login"] = now
    except SQLAlchemyError as exc:
        logger.warning("Could not record last_login for user %s: %s", user["id"], exc)

    logger.info("Login successful for user %s", user["id"])
    return {"success": True, "data": {"user": user, "token": token}}


@router.get("/me", response_model=Envelope[UserRead])
async def read_current_user(
    current_user: AuthenticatedUser = Depends(get_current_user),
    gateway: DataGateway = Depends(get_gateway),
) -> dict:
    """Return profile of the currently authenticated user."""
    user = await get_or_404(gateway, USERS, current_user.id, "Usuário não encontrado")
    return {"success": True, "data": user}


@router.post("/register", response_model=Envelope[UserRead], status_code=201)
async def register(
    body: UserCreate,
    gateway: DataGateway = Depends(get_gateway),
    current_user: AuthenticatedUser = Depends(require_admin),
) -> dict:
    """Create a new user account (ADMIN / MASTER_ADMIN only)."""
    if body.role == UserRole.MASTER_ADMIN and current_user.role != UserRole.MASTER_ADMIN:
        raise AuthorizationError("Você não tem permissão para criar um usuário MASTER_ADMIN")

    await ensure_unique(gateway, USERS, "email", body.email, "E-mail já está em uso")

    record = body.model_dump()
    record["password"] = await get_password_hash_async(body.password)
    record["created_at"] = utcnow()
    record["created_by"] = current_user.id

    created = await gateway.insert(USERS, record)
    logger.info("User %s (%s) created by %s", created[0]["id"], body.role, current_user.id)
    return {"success": True, "data": created[0]}


@router.get("/users", response_model=ListEnvelope[UserRead])
async def list_users(
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=10, ge=1, le=100, alias="pageSize"),
    gateway: DataGateway = Depends(get_gateway),
    _admin: AuthenticatedUser = Depends(require_admin),
) -> dict:
    result = await gateway.select(
        USERS,
        PUBLIC_COLUMNS,
        order=Order("created_at", ascending=False),
        pagination=Pagination(page, page_size),
    )
    return page_envelope(result, page, page_size)


@router.put("/users/{user_id}", response_model=Envelope[UserRead])
async def update_user(
    user_id: str,
    body: UserUpdate,
    gateway: DataGateway = Depends(get_gateway),
    current_user: AuthenticatedUser = Depends(require_admin),
) -> dict:
    target = await get_or_404(gateway, USERS, user_id, "Usuário não encontrado")
    _protect_master_admin(
        target, current_user, "Você não tem permissão para modificar um usuário MASTER_ADMIN"
    )

    patch = {k: v for k, v in body.model_dump(exclude_unset=True).items() if v is not None}

    if patch.get("role") == UserRole.MASTER_ADMIN and current_user.role != UserRole.MASTER_ADMIN:
        raise AuthorizationError("Você não tem permissão para promover um usuário a MASTER_ADMIN")
    if "email" in patch and patch["email"] != target["email"]:
        await ensure_unique(gateway, USERS, "email", patch["email"], "E-mail já está em uso")
    if "password" in patch:
        patch["password"] = await get_password_hash_async(patch["password"])

    patch["updated_at"] = utcnow()
    patch["updated_by"] = current_user.id

    updated = await gateway.update(USERS, user_id, patch)
    if not updated:
        raise NotFoundError("Usuário não encontrado")
    logger.info("User %s updated by %s (fields: %s)", user_id, current_user.id, sorted(patch))
    return {"success": True, "data": updated[0]}


@router.delete("/users/{user_id}", response_model=Envelope[UserRead])
async def deactivate_user(
    user_id: str,
    gateway: DataGateway = Depends(get_gateway),
    current_user: AuthenticatedUser = Depends(require_admin),
) -> dict:
    """Soft-delete (deactivate) a user. The row is kept."""
    target = await get_or_404(gateway, USERS, user_id, "Usuário não encontrado")
    _protect_master_admin(
        target, current_user, "Você não tem permissão para desativar um usuário MASTER_ADMIN"
    )

    updated = await gateway.update(
        USERS,
        user_id,
        {"active": False, "updated_at": utcnow(), "updated_by": current_user.id},
    )
    if not updated:
        raise NotFoundError("Usuário não encontrado")
    logger.info("User %s deactivated by %s", user_id, current_user.id)
    return {"success": True, "message": "Usuário desativado com sucesso", "data": updated[0]}
