from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from passlib.hash import pbkdf2_sha256
import jwt

from company_registry.core.settings import settings
from company_registry.db import get_db
from company_registry.models.user import User

bearer = HTTPBearer(auto_error=False)

ALGORITHM = "HS256"


def hash_password(plain: str) -> str:
    return pbkdf2_sha256.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    if not hashed:
        return False
    return pbkdf2_sha256.verify(plain, hashed)


def _unauthenticated(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def create_access_token(user_id: int, ttl_min: int | None = None) -> str:
    ttl = int(ttl_min or settings.AUTH_JWT_EXPIRE_MINUTES)
    now = datetime.now(timezone.utc)
    payload: Dict[str, Any] = {
        "sub": str(user_id),
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=ttl)).timestamp()),
    }
    return jwt.encode(payload, settings.AUTH_JWT_SECRET, algorithm=ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    try:
        return jwt.decode(token, settings.AUTH_JWT_SECRET, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise _unauthenticated("Token expired")
    except jwt.PyJWTError:
        raise _unauthenticated("Invalid token")


def require_auth(
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
) -> Dict[str, Any]:
    if not creds or (creds.scheme or "").lower() != "bearer":
        raise _unauthenticated("Unauthenticated")
    return decode_token(creds.credentials)


def get_current_user(
    claims: Dict[str, Any] = Depends(require_auth),
    db: Session = Depends(get_db),
) -> User:
    """
    Resolve the bearer token to a stored user.

    The token `sub` carries the user id; a token whose user no longer
    exists is rejected like an invalid one.
    """
    try:
        user_id = int(claims.get("sub"))
    except (TypeError, ValueError):
        raise _unauthenticated("Invalid token (sub)")

    user = db.get(User, user_id)
    if not user:
        raise _unauthenticated("Unknown user")
    return user


def get_current_user_id(user: User = Depends(get_current_user)) -> int:
    return user.id
