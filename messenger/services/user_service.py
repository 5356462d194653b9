# messenger/services/user_service.py
import logging
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from typing import Optional, List, Dict, Any, Iterable

from messenger.errors import InternalError, ValidationFailedError
from messenger.models.user import User
from messenger.schemas.users import UserSummary
from messenger.security import hash_password

logger = logging.getLogger(__name__)


class UserService:
    """Service for handling user operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: str) -> Optional[User]:
        """Get a user by ID"""
        return self.db.query(User).filter(User.id == user_id).first()

    def get_user_by_email(self, email: str) -> Optional[User]:
        """Get a user by email"""
        return self.db.query(User).filter(User.email == email.lower()).first()

    def create_user(self, first_name: str, last_name: str, email: str, password: str) -> User:
        """
        Create a user with a hashed password.

        Raises ValidationFailedError when the email is already registered.
        """
        if self.get_user_by_email(email):
            raise ValidationFailedError("User already exists")

        user = User(
            first_name=first_name,
            last_name=last_name,
            email=email.lower(),
            password_hash=hash_password(password)
        )

        try:
            self.db.add(user)
            self.db.commit()
        except IntegrityError:
            # Lost a race against a concurrent registration
            self.db.rollback()
            raise ValidationFailedError("User already exists")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create user {email}: {str(e)}")
            raise InternalError("Failed to create user")

        self.db.refresh(user)
        logger.info(f"Registered user {user.id}")
        return user

    def update_user(self, user: User, update_data: Dict[str, Any]) -> User:
        """Update user information; only the fields provided are touched"""
        email = update_data.get("email")
        if email and email.lower() != user.email:
            if self.get_user_by_email(email):
                raise ValidationFailedError("Email already registered")
            update_data["email"] = email.lower()

        password = update_data.pop("password", None)
        if password:
            user.password_hash = hash_password(password)

        for key, value in update_data.items():
            if value is not None and key in ("first_name", "last_name", "email"):
                setattr(user, key, value)

        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to update user {user.id}: {str(e)}")
            raise InternalError("Failed to update user")

        self.db.refresh(user)
        return user

    def delete_user(self, user: User) -> str:
        """Delete a user along with the messages they authored"""
        user_id = user.id
        try:
            self.db.delete(user)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to delete user {user_id}: {str(e)}")
            raise InternalError("Failed to delete user")

        logger.info(f"Deleted user {user_id}")
        return user_id

    def list_users(self, page: int = 1, limit: int = 10) -> List[User]:
        """List users sorted by last then first name"""
        return self.db.query(User).order_by(
            User.last_name, User.first_name
        ).offset((page - 1) * limit).limit(limit).all()

    def search_users(self, query: str, page: int = 1, limit: int = 10) -> List[User]:
        """Search for users by name or email"""
        return self.db.query(User).filter(
            (User.email.ilike(f"%{query}%")) |
            (User.first_name.ilike(f"%{query}%")) |
            (User.last_name.ilike(f"%{query}%"))
        ).order_by(
            User.last_name, User.first_name
        ).offset((page - 1) * limit).limit(limit).all()

    def get_summaries(self, user_ids: Iterable[str]) -> Dict[str, UserSummary]:
        """
        Resolve user ids to their public summaries in a single query.

        Ids that do not resolve are left out of the result.
        """
        user_ids = set(user_ids)
        if not user_ids:
            return {}

        rows = self.db.query(
            User.id, User.first_name, User.last_name, User.email
        ).filter(User.id.in_(user_ids)).all()

        return {
            row.id: UserSummary(
                id=row.id,
                first_name=row.first_name,
                last_name=row.last_name,
                email=row.email
            )
            for row in rows
        }
