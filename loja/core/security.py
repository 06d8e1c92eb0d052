"""
JWT token creation / verification and password hashing (bcrypt).
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi.concurrency import run_in_threadpool
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from loja.core.config import settings

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)

_ALGORITHM = settings.JWT_ALGORITHM
_SECRET = settings.JWT_SECRET

# bcrypt only looks at the first 72 bytes
_BCRYPT_MAX_BYTES = 72


class TokenExpiredError(Exception):
    """The token signature is valid but its ``exp`` is in the past."""


class InvalidTokenError(Exception):
    """The token is malformed, tampered with or missing required claims."""


# ── Passwords ───────────────────────────────────────────────────────
def _truncate(plain: str) -> str:
    return plain.encode("utf-8")[:_BCRYPT_MAX_BYTES].decode("utf-8", "ignore")


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return pwd_context.verify(_truncate(plain), hashed)
    except ValueError:
        # stored value is not a bcrypt hash
        return False


def get_password_hash(plain: str) -> str:
    return pwd_context.hash(_truncate(plain))


async def verify_password_async(plain: str, hashed: str) -> bool:
    return await run_in_threadpool(verify_password, plain, hashed)


async def get_password_hash_async(plain: str) -> str:
    return await run_in_threadpool(get_password_hash, plain)


# ── JWT tokens ──────────────────────────────────────────────────────
def create_access_token(
    user_id: str | Any,
    role: str,
    expires_delta: timedelta | None = None,
) -> str:
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or settings.token_lifetime)
    return jwt.encode(
        {"id": str(user_id), "role": getattr(role, "value", role), "iat": now, "exp": expire},
        _SECRET,
        algorithm=_ALGORITHM,
    )


def decode_access_token(token: str) -> dict:
    """Return the payload of a valid token.

    Raises :class:`TokenExpiredError` or :class:`InvalidTokenError`.
    """
    try:
        payload = jwt.decode(token, _SECRET, algorithms=[_ALGORITHM])
    except ExpiredSignatureError as exc:
        raise TokenExpiredError(str(exc)) from exc
    except JWTError as exc:
        raise InvalidTokenError(str(exc)) from exc

    if not payload.get("id") or not payload.get("role"):
        raise InvalidTokenError("Token is missing the id or role claim")
    return payload
