# messenger/api/v1/messages.py
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Request, Response, status

from messenger import schemas
from messenger.api.auth import get_current_user
from messenger.api.dependencies import (
    get_connection_manager, get_message_access, get_message_author, get_service, require_data
)
from messenger.models.message import Message
from messenger.models.user import User
from messenger.services.message_service import MessageService
from messenger.services.thread_service import ThreadService
from messenger.websockets.connection_manager import ConnectionManager, Event, EventType

logger = logging.getLogger(__name__)

router = APIRouter()

# Non-standard status used when the client went away before the response was ready
CLIENT_CLOSED_REQUEST = 499


async def _walk_until_disconnect(
    request: Request,
    thread_service: ThreadService,
    head: Message
) -> Optional[List[Message]]:
    """Walk one chain, giving up as soon as the client has disconnected."""
    thread = []
    for message in thread_service.iter_chain(head):
        if await request.is_disconnected():
            return None
        thread.append(message)
    return thread


async def _build_until_disconnect(
    request: Request,
    thread_service: ThreadService,
    user_id: str
) -> Optional[List[List[Message]]]:
    """Build every thread visible to the user, checking the client between queries."""
    heads = thread_service.get_thread_heads(user_id)

    if thread_service.batch_fetch:
        threads = []
        for threads in thread_service.iter_batched_levels(heads):
            if await request.is_disconnected():
                return None
        return threads

    threads = []
    for head in heads:
        thread = await _walk_until_disconnect(request, thread_service, head)
        if thread is None:
            return None
        threads.append(thread)
    return threads


@router.get("", response_model=schemas.ThreadList)
async def get_messages(
    request: Request,
    current_user: User = Depends(get_current_user),
    thread_service: ThreadService = Depends(get_service(ThreadService)),
    message_service: MessageService = Depends(get_service(MessageService))
):
    """
    Get every thread visible to the current user.

    A thread starts at a message without a parent that the user wrote or
    participates in, and follows replies until the latest one. Threads are
    returned in creation order of their heads, each one root first.
    """
    threads = await _build_until_disconnect(request, thread_service, current_user.id)
    if threads is None:
        logger.info(f"Client left, abandoned thread build for user {current_user.id}")
        return Response(status_code=CLIENT_CLOSED_REQUEST)

    return {"messages": message_service.enrich_threads(threads)}


@router.post("", response_model=schemas.MessageEnvelope, status_code=status.HTTP_201_CREATED)
async def create_message(
    payload: Optional[schemas.DataRequest[schemas.MessageCreate]] = None,
    current_user: User = Depends(get_current_user),
    message_service: MessageService = Depends(get_service(MessageService)),
    connection_manager: ConnectionManager = Depends(get_connection_manager)
):
    """
    Post a message.

    Without a parent the message starts a new thread, visible to the
    participants listed; with a parent it continues that thread.
    """
    data = require_data(payload, "Message has no content")
    message = message_service.create_message(
        author=current_user,
        content=data.content,
        participant_ids=data.participants,
        parent_id=data.parent_id,
        room_id=data.room_id
    )

    response_data = message_service.enrich_messages([message])[0]
    await connection_manager.send_to_users(
        message_service.get_audience(message),
        Event(
            type=EventType.MESSAGE_CREATED,
            data=schemas.MessageResponse(**response_data).model_dump(mode="json", by_alias=True)
        )
    )
    return {"message": response_data}


@router.get("/{message_id}", response_model=schemas.MessageEnvelope)
async def get_message(
    message: Message = Depends(get_message_access),
    message_service: MessageService = Depends(get_service(MessageService))
):
    """
    Get a single message the current user can view
    """
    return {"message": message_service.enrich_messages([message])[0]}


@router.get("/{message_id}/thread", response_model=schemas.ThreadResponse)
async def get_thread(
    request: Request,
    message: Message = Depends(get_message_access),
    thread_service: ThreadService = Depends(get_service(ThreadService)),
    message_service: MessageService = Depends(get_service(MessageService))
):
    """
    Get the thread continuing from a message, starting with that message
    """
    thread = await _walk_until_disconnect(request, thread_service, message)
    if thread is None:
        logger.info(f"Client left, abandoned thread build from message {message.id}")
        return Response(status_code=CLIENT_CLOSED_REQUEST)
    return {"messages": message_service.enrich_messages(thread)}


@router.put("/{message_id}", response_model=schemas.MessageEnvelope, status_code=status.HTTP_201_CREATED)
async def edit_message(
    payload: Optional[schemas.DataRequest[schemas.MessageUpdate]] = None,
    message: Message = Depends(get_message_author),
    message_service: MessageService = Depends(get_service(MessageService)),
    connection_manager: ConnectionManager = Depends(get_connection_manager)
):
    """
    Edit the content of a message written by the current user
    """
    data = require_data(payload, "Message has no content")
    message = message_service.update_message(message, data.content)

    response_data = message_service.enrich_messages([message])[0]
    await connection_manager.send_to_users(
        message_service.get_audience(message),
        Event(
            type=EventType.MESSAGE_UPDATED,
            data=schemas.MessageResponse(**response_data).model_dump(mode="json", by_alias=True)
        )
    )
    return {"message": response_data}


@router.delete("/{message_id}", response_model=schemas.DeletedResponse)
async def delete_message(
    message: Message = Depends(get_message_author),
    message_service: MessageService = Depends(get_service(MessageService)),
    connection_manager: ConnectionManager = Depends(get_connection_manager)
):
    """
    Delete a message written by the current user.

    Replies to the message are kept but no longer belong to any thread.
    """
    audience = message_service.get_audience(message)
    message_id = message_service.delete_message(message)

    await connection_manager.send_to_users(
        audience,
        Event(type=EventType.MESSAGE_DELETED, data={"id": message_id})
    )
    return {"id": message_id}
