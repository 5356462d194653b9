from typing import List
from pydantic import Field, field_validator
from datetime import datetime

from messenger.schemas.base import CamelModel


class RoomBase(CamelModel):
    name: str = Field(..., max_length=100)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Room has no name")
        return value


class RoomCreate(RoomBase):
    pass


class RoomUpdate(RoomBase):
    pass


class RoomResponse(RoomBase):
    id: str
    message_ids: List[str] = []
    created_at: datetime
    updated_at: datetime


class RoomEnvelope(CamelModel):
    room: RoomResponse


class RoomList(CamelModel):
    rooms: List[RoomResponse]
