# messenger/services/auth_service.py
import logging
from typing import Tuple
from sqlalchemy.orm import Session
import jwt

from messenger.errors import UnauthenticatedError, ValidationFailedError
from messenger.models.user import User
from messenger.security import create_access_token, decode_access_token, verify_password
from messenger.services.user_service import UserService

logger = logging.getLogger(__name__)


class AuthService:
    """Service for registering users, signing them in and resolving bearer tokens
    back to users.
    """

    def __init__(self, db: Session):
        self.db = db
        self.user_service = UserService(db)

    def sign_up(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str
    ) -> Tuple[User, str]:
        """
        Register a new user and issue their first token.
        """
        user = self.user_service.create_user(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password=password
        )
        return user, create_access_token(user.id)

    def sign_in(self, email: str, password: str) -> Tuple[User, str]:
        """
        Check a user's credentials and issue a token.
        """
        user = self.user_service.get_user_by_email(email)
        if not user:
            raise ValidationFailedError("No user with that email")

        if not verify_password(password, user.password_hash):
            logger.warning(f"Rejected sign in for user {user.id}")
            raise UnauthenticatedError("Incorrect password")

        return user, create_access_token(user.id)

    def resolve_token(self, token: str) -> User:
        """
        Verify a bearer token and return the user it was issued to.
        """
        try:
            payload = decode_access_token(token)
        except jwt.PyJWTError as e:
            logger.warning(f"Rejected token: {str(e)}")
            raise UnauthenticatedError("Not authorized, invalid token")

        user_id = payload.get("sub")
        if not user_id:
            raise UnauthenticatedError("Not authorized, invalid token")

        user = self.user_service.get_user(user_id)
        if not user:
            raise UnauthenticatedError("Not authorized, no user found")

        return user
