"""Token authentication for the NusaDana API.

Passwords are stored as salted bcrypt hashes. Login issues a signed JWT
carrying ``userId`` and ``role``; every mutating route depends on
``require_user`` to verify it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt
import structlog
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from nusadana.config import AppConfig, AuthConfig
from nusadana.db.models import UserModel
from nusadana.web.dependencies import get_app_config

logger = structlog.get_logger(__name__)

security = HTTPBearer(auto_error=False)


# ============================================================================
# Password Hashing
# ============================================================================


def hash_password(password: str, rounds: int = 12) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=rounds)).decode()


def verify_password(password: str, password_hash: str | None) -> bool:
    """Check a password against a stored bcrypt hash.

    A missing, empty or malformed stored hash never matches.
    """
    if not password_hash:
        return False
    try:
        # bcrypt's comparison is constant-time
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except ValueError:
        return False


# ============================================================================
# JWT
# ============================================================================


def create_access_token(user: UserModel, config: AuthConfig) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user.id),
        "userId": user.id,
        "role": user.role,
        "iat": now,
        "exp": now + timedelta(minutes=config.token_expiry_minutes),
    }
    return jwt.encode(payload, config.jwt_secret, algorithm=config.jwt_algorithm)


def decode_access_token(token: str, config: AuthConfig) -> dict:
    try:
        return jwt.decode(token, config.jwt_secret, algorithms=[config.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token")


# ============================================================================
# Request Dependencies
# ============================================================================


@dataclass(frozen=True)
class CurrentUser:
    """Identity taken from a verified token."""

    id: int | None
    role: str
    authenticated: bool = True


ANONYMOUS = CurrentUser(id=None, role="anonymous", authenticated=False)


async def require_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    config: AppConfig = Depends(get_app_config),
) -> CurrentUser:
    """Dependency to require a valid bearer token.

    Raises:
        HTTPException: 401 if the token is missing, expired or invalid
    """
    if config.auth.disabled:
        return ANONYMOUS

    if credentials is None:
        raise HTTPException(status_code=401, detail="Authentication required")

    payload = decode_access_token(credentials.credentials, config.auth)
    user_id = payload.get("userId")
    if not isinstance(user_id, int):
        raise HTTPException(status_code=401, detail="Invalid token")

    structlog.contextvars.bind_contextvars(user_id=user_id)
    return CurrentUser(id=user_id, role=payload.get("role", "villager"))
