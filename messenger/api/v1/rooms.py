# messenger/api/v1/rooms.py
from typing import Optional
from fastapi import APIRouter, Depends, status

from messenger import schemas
from messenger.api.auth import get_current_user
from messenger.api.dependencies import get_room_or_404, get_service, require_data
from messenger.models.room import Room
from messenger.models.user import User
from messenger.services.room_service import RoomService

router = APIRouter()


@router.get("", response_model=schemas.RoomList)
async def get_rooms(
    current_user: User = Depends(get_current_user),
    room_service: RoomService = Depends(get_service(RoomService))
):
    """
    Get every room
    """
    return {"rooms": room_service.list_rooms()}


@router.get("/{room_id}", response_model=schemas.RoomEnvelope)
async def get_room(room: Room = Depends(get_room_or_404)):
    """
    Get a single room
    """
    return {"room": room}


@router.post("", response_model=schemas.RoomEnvelope, status_code=status.HTTP_201_CREATED)
async def create_room(
    payload: Optional[schemas.DataRequest[schemas.RoomCreate]] = None,
    current_user: User = Depends(get_current_user),
    room_service: RoomService = Depends(get_service(RoomService))
):
    """
    Create a room
    """
    data = require_data(payload, "Room has no name")
    return {"room": room_service.create_room(data.name)}


@router.put("/{room_id}", response_model=schemas.RoomEnvelope, status_code=status.HTTP_201_CREATED)
async def edit_room(
    payload: Optional[schemas.DataRequest[schemas.RoomUpdate]] = None,
    room: Room = Depends(get_room_or_404),
    room_service: RoomService = Depends(get_service(RoomService))
):
    """
    Rename a room
    """
    data = require_data(payload, "Room has no name")
    return {"room": room_service.update_room(room, data.name)}


@router.delete("/{room_id}", response_model=schemas.DeletedResponse)
async def delete_room(
    room: Room = Depends(get_room_or_404),
    room_service: RoomService = Depends(get_service(RoomService))
):
    """
    Delete a room
    """
    return {"id": room_service.delete_room(room)}
