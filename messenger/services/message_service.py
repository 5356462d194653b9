# messenger/services/message_service.py
import logging
from collections import defaultdict
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional, Dict, Any, Set

from messenger.errors import ForbiddenError, InternalError, NotFoundError, ValidationFailedError
from messenger.models.message import Message, message_participants
from messenger.models.mixins import is_uuid, utc_now
from messenger.models.room import Room
from messenger.models.user import User
from messenger.services.thread_service import ThreadService
from messenger.services.user_service import UserService

logger = logging.getLogger(__name__)


class MessageService:
    """Service for handling message operations."""

    def __init__(self, db: Session):
        self.db = db
        self.user_service = UserService(db)
        self.thread_service = ThreadService(db)

    def get_message(self, message_id: str) -> Optional[Message]:
        """Retrieve a message by its ID."""
        return self.db.query(Message).filter(Message.id == message_id).first()

    def get_participant_ids(self, message_ids: List[str]) -> Dict[str, List[str]]:
        """Map each message id to the ids of its participants."""
        if not message_ids:
            return {}
        rows = self.db.query(
            message_participants.c.message_id, message_participants.c.user_id
        ).filter(message_participants.c.message_id.in_(message_ids)).all()

        participant_ids = defaultdict(list)
        for message_id, user_id in rows:
            participant_ids[message_id].append(user_id)
        return participant_ids

    def can_view(self, user_id: str, message: Message) -> bool:
        """
        A user can view a message they wrote, or any message in a thread
        whose head they wrote or are a participant of. Orphans are only
        visible to their author.
        """
        if message.author_id == user_id:
            return True

        head = self.thread_service.find_head(message)
        if head is None:
            return False
        if head.author_id == user_id:
            return True
        return user_id in self.get_participant_ids([head.id]).get(head.id, [])

    def get_audience(self, message: Message) -> Set[str]:
        """Ids of the users who can see a message: its author plus its thread's viewers."""
        audience = {message.author_id}
        head = self.thread_service.find_head(message)
        if head is not None:
            audience.add(head.author_id)
            audience.update(self.get_participant_ids([head.id]).get(head.id, []))
        return audience

    def create_message(
        self,
        author: User,
        content: str,
        participant_ids: Optional[List[str]] = None,
        parent_id: Optional[str] = None,
        room_id: Optional[str] = None
    ) -> Message:
        """
        Create a new message.

        Args:
            author: The user writing the message.
            content: The message content, already trimmed.
            participant_ids: Users who may see the message when it heads a thread.
            parent_id: The message this one continues, or None for a new thread.
            room_id: Optional room to list the message in.

        Returns:
            The created Message instance.
        """
        participants = self._resolve_participants(participant_ids or [])

        if parent_id is not None:
            self._check_parent(author, parent_id)

        room = None
        if room_id is not None:
            if not is_uuid(room_id):
                raise ValidationFailedError("Invalid room ID")
            room = self.db.query(Room).filter(Room.id == room_id).first()
            if not room:
                raise NotFoundError("Room not found")

        message = Message(
            content=content,
            author_id=author.id,
            timestamp=utc_now(),
            parent_id=parent_id,
            participants=participants
        )
        self.db.add(message)
        if room is not None:
            room.messages.append(message)

        self._commit(f"create message for user {author.id}")
        self.db.refresh(message)
        logger.info(f"User {author.id} created message {message.id} (parent={parent_id})")
        return message

    def update_message(self, message: Message, content: str) -> Message:
        """Replace the content of a message and refresh its timestamp."""
        message.content = content
        message.timestamp = utc_now()
        self._commit(f"update message {message.id}")
        self.db.refresh(message)
        return message

    def delete_message(self, message: Message) -> str:
        """
        Delete a message by its ID.

        Children are not touched: a message continuing this one is left as
        an orphan, unreachable from any thread head.
        """
        message_id = message.id
        self.db.delete(message)
        self._commit(f"delete message {message_id}")
        logger.info(f"Deleted message {message_id}")
        return message_id

    def enrich_messages(self, messages: List[Message]) -> List[Dict[str, Any]]:
        """
        Build response dictionaries with author and participants resolved to
        user summaries. Uses one query for participants and one for users,
        whatever the number of messages.
        """
        participant_ids = self.get_participant_ids([message.id for message in messages])

        user_ids = {message.author_id for message in messages}
        for ids in participant_ids.values():
            user_ids.update(ids)
        summaries = self.user_service.get_summaries(user_ids)

        result = []
        for message in messages:
            participants = [
                summaries[user_id]
                for user_id in participant_ids.get(message.id, [])
                if user_id in summaries
            ]
            participants.sort(key=lambda summary: (summary.last_name, summary.first_name))
            result.append({
                "id": message.id,
                "content": message.content,
                "author": summaries[message.author_id],
                "participants": participants,
                "timestamp": message.timestamp,
                "parent_id": message.parent_id
            })
        return result

    def enrich_threads(self, threads: List[List[Message]]) -> List[List[Dict[str, Any]]]:
        """Enrich every message of every thread, keeping the thread structure."""
        enriched = iter(self.enrich_messages([message for thread in threads for message in thread]))
        return [[next(enriched) for _ in thread] for thread in threads]

    def _resolve_participants(self, participant_ids: List[str]) -> List[User]:
        unique_ids = list(dict.fromkeys(participant_ids))
        for participant_id in unique_ids:
            if not is_uuid(participant_id):
                raise ValidationFailedError("Invalid participant ID")
        if not unique_ids:
            return []

        participants = self.db.query(User).filter(User.id.in_(unique_ids)).all()
        if len(participants) != len(unique_ids):
            raise NotFoundError("Participant not found")
        return participants

    def _check_parent(self, author: User, parent_id: str):
        if not is_uuid(parent_id):
            raise ValidationFailedError("Invalid parent message ID")

        parent = self.get_message(parent_id)
        if not parent:
            raise NotFoundError("Parent message not found")
        if not self.can_view(author.id, parent):
            raise ForbiddenError("Not authorized to reply to this message")
        if self.thread_service.get_child(parent.id) is not None:
            raise ValidationFailedError("Message already has a reply")

    def _commit(self, action: str):
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to {action}: {str(e)}")
            raise InternalError("Failed to save message")
