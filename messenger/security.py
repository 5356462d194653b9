# messenger/security.py
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import argon2
import jwt
from argon2.exceptions import InvalidHashError, VerificationError

from messenger.config import get_settings

_hasher = argon2.PasswordHasher()


def hash_password(password: str) -> str:
    return _hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return _hasher.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def create_access_token(user_id: str) -> str:
    """Sign a token whose subject is the user id."""
    settings = get_settings()
    now = datetime.now(timezone.utc)
    return jwt.encode(
        {"sub": user_id, "iat": now, "exp": now + timedelta(days=settings.JWT_EXPIRES_DAYS)},
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str) -> Dict[str, Any]:
    """Decode and verify a token. Raises jwt.PyJWTError when it is invalid or expired."""
    settings = get_settings()
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
