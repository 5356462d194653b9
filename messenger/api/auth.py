# messenger/api/auth.py
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Optional

from messenger.database import get_db
from messenger.errors import UnauthenticatedError
from messenger.models.user import User
from messenger.services.auth_service import AuthService

# Setup security scheme; missing tokens are reported by get_current_user itself
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """
    Dependency to get the current authenticated user from a bearer token.
    Fails with 401 before any other store access happens.
    """
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError("Not authorized, no token")

    return AuthService(db).resolve_token(credentials.credentials)
