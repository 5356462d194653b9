# messenger/services/contact_service.py
import logging
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List

from messenger.errors import InternalError, NotFoundError, ValidationFailedError
from messenger.models.mixins import is_uuid
from messenger.models.user import User
from messenger.services.user_service import UserService

logger = logging.getLogger(__name__)


class ContactService:
    """Service for managing a user's contact list"""

    def __init__(self, db: Session):
        self.db = db
        self.user_service = UserService(db)

    def get_contacts(self, user: User) -> List[User]:
        """Return the user's friends"""
        return list(user.friends)

    def get_contact(self, user: User, contact_id: str) -> User:
        """Return one friend; the id must be on the user's contact list"""
        for friend in user.friends:
            if friend.id == contact_id:
                return friend
        raise ValidationFailedError("Contact not friend")

    def add_contact(self, user: User, contact_id: str) -> List[User]:
        """
        Add a user to the contact list.

        Rejects malformed ids, the user's own id and ids already listed.
        """
        if not is_uuid(contact_id) or contact_id == user.id:
            raise ValidationFailedError("Invalid contact ID")

        if contact_id in user.friend_ids:
            raise ValidationFailedError("Contact already listed")

        contact = self.user_service.get_user(contact_id)
        if not contact:
            raise NotFoundError("No user found")

        user.friends.append(contact)
        self._commit(user, "add contact")
        return self.get_contacts(user)

    def remove_contact(self, user: User, contact_id: str) -> List[User]:
        """Remove a friend from the contact list"""
        contact = self.get_contact(user, contact_id)
        user.friends.remove(contact)
        self._commit(user, "remove contact")
        return self.get_contacts(user)

    def _commit(self, user: User, action: str):
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to {action} for user {user.id}: {str(e)}")
            raise InternalError(f"Failed to {action}")
        self.db.refresh(user)
