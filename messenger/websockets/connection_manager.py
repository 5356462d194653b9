# messenger/websockets/connection_manager.py
from collections import defaultdict
from enum import Enum
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional, Set
from fastapi import WebSocket, WebSocketDisconnect, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from messenger.errors import UnauthenticatedError
from messenger.models.user import User
from messenger.services.auth_service import AuthService

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    ERROR = "error"
    SEND_MESSAGE = "sendMessage"
    NEW_MESSAGE = "newMessage"
    MESSAGE_CREATED = "message.created"
    MESSAGE_UPDATED = "message.updated"
    MESSAGE_DELETED = "message.deleted"


class Event(BaseModel):
    type: EventType
    data: Any = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ConnectionManager:
    """
    Tracks open websocket connections per user and pushes events to them.

    One instance is created when the application starts and closed when it
    shuts down. Delivery is best effort: a connection that fails to receive
    an event is dropped.
    """

    def __init__(self):
        self.connections: Dict[str, Set[WebSocket]] = defaultdict(set)

    async def connect(self, websocket: WebSocket, user_id: str):
        self.connections[user_id].add(websocket)
        logger.info(f"User {user_id} connected ({self.connection_count} open connections)")

    def disconnect(self, websocket: WebSocket):
        for user_id, sockets in list(self.connections.items()):
            if websocket in sockets:
                sockets.discard(websocket)
                if not sockets:
                    del self.connections[user_id]
                logger.info(f"User {user_id} disconnected")
                break

    @property
    def connection_count(self) -> int:
        return sum(len(sockets) for sockets in self.connections.values())

    async def send_event(self, websocket: WebSocket, event: Event):
        try:
            await websocket.send_json(event.model_dump(mode="json"))
        except (WebSocketDisconnect, RuntimeError) as e:
            logger.warning(f"Dropping connection after failed send: {str(e)}")
            self.disconnect(websocket)

    async def broadcast_to_all(self, event: Event):
        for sockets in list(self.connections.values()):
            for websocket in list(sockets):
                await self.send_event(websocket, event)

    async def send_to_users(self, user_ids: Iterable[str], event: Event):
        for user_id in set(user_ids):
            for websocket in list(self.connections.get(user_id, ())):
                await self.send_event(websocket, event)

    async def close(self):
        """Close every open connection; called at application shutdown."""
        for sockets in list(self.connections.values()):
            for websocket in list(sockets):
                try:
                    await websocket.close(code=status.WS_1001_GOING_AWAY)
                except RuntimeError:
                    # Already closed by the client
                    pass
        self.connections.clear()
        logger.info("Connection manager closed")


async def authenticate(
    websocket: WebSocket,
    access_token: Optional[str],
    auth_service: AuthService,
    connection_manager: ConnectionManager
) -> Optional[User]:
    if not access_token:
        error = UnauthenticatedError("Not authorized, no token")
    else:
        try:
            return auth_service.resolve_token(access_token)
        except UnauthenticatedError as e:
            error = e

    await connection_manager.send_event(websocket, Event(type=EventType.ERROR, data=error.detail))
    await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
    return None


async def receive_event(websocket: WebSocket) -> Event:
    """
    Read one frame and parse it as an Event. Text and binary frames are both
    accepted; anything that is not a JSON event raises TypeError or ValueError.
    """
    message = await websocket.receive()
    if message["type"] == "websocket.disconnect":
        raise WebSocketDisconnect(code=message.get("code", status.WS_1000_NORMAL_CLOSURE))

    raw = message.get("text")
    if raw is None:
        raw = (message.get("bytes") or b"").decode("utf-8")
    return Event(**json.loads(raw))


async def handle_connection(
    websocket: WebSocket,
    access_token: Optional[str],
    connection_manager: ConnectionManager,
    db: Session
):
    """
    Serve one websocket client: authenticate it, then rebroadcast every
    ``sendMessage`` frame it sends as a ``newMessage`` event.
    """
    await websocket.accept()

    try:
        user = await authenticate(websocket, access_token, AuthService(db), connection_manager)
        user_id = user.id if user is not None else None
    finally:
        # Only the token check needs the store; release its connection now
        db.close()
    if user_id is None:
        return

    await connection_manager.connect(websocket, user_id)

    try:
        while True:
            try:
                event = await receive_event(websocket)
            except (TypeError, ValueError):
                await connection_manager.send_event(
                    websocket,
                    Event(type=EventType.ERROR, data="Invalid event")
                )
                continue

            if event.type == EventType.SEND_MESSAGE:
                await connection_manager.broadcast_to_all(
                    Event(type=EventType.NEW_MESSAGE, data=event.data)
                )
    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected: user {user_id}")
    finally:
        connection_manager.disconnect(websocket)
