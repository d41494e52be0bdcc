# app/core/security.py
import hashlib
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Union

import jwt
from passlib.context import CryptContext
from app.core.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
ALGORITHM = "HS256"
TOKEN_ISSUER = "exam-registration-portal"


# ---------------------------------------------------------
# PASSWORDS
# ---------------------------------------------------------
def _pre_hash_password(password: str) -> str:
    # bcrypt reads only 72 bytes; longer passphrases go through SHA-256 first
    encoded = password.encode("utf-8")
    if len(encoded) <= 72:
        return password
    return hashlib.sha256(encoded).hexdigest()


def hash_password(password: str) -> str:
    return pwd_context.hash(_pre_hash_password(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(_pre_hash_password(plain_password), hashed_password)


# ---------------------------------------------------------
# ACCESS TOKENS
# ---------------------------------------------------------
def create_access_token(
    subject: Union[str, Any],
    expires_delta: Optional[timedelta] = None,
    data: Optional[dict] = None
) -> str:
    """
    Signed token for a candidate or admin. ``subject`` is the user id and
    ``data`` carries the role claim shown to the frontend.
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))

    claims = dict(data or {})
    claims.update({
        "sub": str(subject),
        "iss": TOKEN_ISSUER,
        "exp": expire,
        "iat": now,
        "nbf": now,
    })
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_token(token: str) -> dict:
    # raises jwt.PyJWTError subclasses for the caller
    return jwt.decode(
        token,
        settings.SECRET_KEY,
        algorithms=[ALGORITHM],
        issuer=TOKEN_ISSUER,
        options={"require": ["sub", "exp"]},
    )


def token_user_id(payload: dict) -> uuid.UUID:
    try:
        return uuid.UUID(payload["sub"])
    except (KeyError, ValueError, TypeError):
        raise jwt.InvalidTokenError("Token subject is not a user id")
