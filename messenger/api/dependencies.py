# messenger/api/dependencies.py
from typing import Any, Type, Callable, Optional
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from messenger.database import get_db
from messenger.errors import ForbiddenError, NotFoundError, ValidationFailedError
from messenger.models.message import Message
from messenger.models.mixins import is_uuid
from messenger.models.room import Room
from messenger.models.user import User
from messenger.api.auth import get_current_user
from messenger.services.message_service import MessageService
from messenger.services.room_service import RoomService
from messenger.websockets.connection_manager import ConnectionManager


def get_service(service_class: Type) -> Callable:
    """Factory function to create service dependencies with DB injection"""
    def _get_service(db: Session = Depends(get_db)):
        return service_class(db)
    return _get_service


def get_connection_manager(request: Request) -> ConnectionManager:
    """The event hub created for this application at startup"""
    return request.app.state.connection_manager


def require_data(payload: Optional[Any], detail: str) -> Any:
    """Unwrap a {"data": ...} request envelope, failing with ``detail`` when it is empty"""
    if payload is None or getattr(payload, "data", None) is None:
        raise ValidationFailedError(detail)
    return payload.data


def ensure_valid_id(value: str, label: str):
    if not is_uuid(value):
        raise ValidationFailedError(f"Invalid {label} ID")


def get_message_access(
    message_id: str,
    current_user: User = Depends(get_current_user),
    message_service: MessageService = Depends(get_service(MessageService))
) -> Message:
    """
    Verify that a message exists and that the current user can view it.
    Viewers are the author and the viewers of the message's thread head.
    """
    ensure_valid_id(message_id, "message")

    message = message_service.get_message(message_id)
    if not message:
        raise NotFoundError("No message found")

    if not message_service.can_view(current_user.id, message):
        raise ForbiddenError("Not authorized to view this message")

    return message


def get_message_author(
    message_id: str,
    current_user: User = Depends(get_current_user),
    message_service: MessageService = Depends(get_service(MessageService))
) -> Message:
    """
    Verify that a message exists and was written by the current user.
    """
    ensure_valid_id(message_id, "message")

    message = message_service.get_message(message_id)
    if not message:
        raise NotFoundError("No message found")

    if message.author_id != current_user.id:
        raise ForbiddenError("Not authorized, message not authored by user")

    return message


def get_room_or_404(
    room_id: str,
    current_user: User = Depends(get_current_user),
    room_service: RoomService = Depends(get_service(RoomService))
) -> Room:
    """
    Verify that a room exists.
    """
    ensure_valid_id(room_id, "room")

    room = room_service.get_room(room_id)
    if not room:
        raise NotFoundError("No room found")

    return room
