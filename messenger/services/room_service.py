# messenger/services/room_service.py
import logging
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional

from messenger.errors import InternalError
from messenger.models.room import Room

logger = logging.getLogger(__name__)


class RoomService:
    """Service for handling room operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_room(self, room_id: str) -> Optional[Room]:
        """Retrieve a room by its ID."""
        return self.db.query(Room).filter(Room.id == room_id).first()

    def list_rooms(self) -> List[Room]:
        """Retrieve every room, oldest first."""
        return self.db.query(Room).order_by(Room.created_at).all()

    def create_room(self, name: str) -> Room:
        """Create a new room."""
        room = Room(name=name)
        self.db.add(room)
        self._commit("create room")
        self.db.refresh(room)
        return room

    def update_room(self, room: Room, name: str) -> Room:
        """Rename a room."""
        room.name = name
        self._commit("update room")
        self.db.refresh(room)
        return room

    def delete_room(self, room: Room) -> str:
        """Delete a room; the messages it lists are left alone."""
        room_id = room.id
        self.db.delete(room)
        self._commit("delete room")
        return room_id

    def _commit(self, action: str):
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to {action}: {str(e)}")
            raise InternalError(f"Failed to {action}")
