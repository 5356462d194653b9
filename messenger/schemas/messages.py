from typing import List, Optional
from pydantic import Field, field_validator
from datetime import datetime

from messenger.schemas.base import CamelModel
from messenger.schemas.users import UserSummary


class MessageContent(CamelModel):
    """Message text, trimmed and required to be non-empty"""
    content: str = Field("", validate_default=True)

    @field_validator("content", mode="before")
    @classmethod
    def content_not_blank(cls, value):
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Message has no content")
        return value.strip()


class MessageCreate(MessageContent):
    """Properties accepted when creating a message"""
    participants: List[str] = Field(default_factory=list)
    parent_id: Optional[str] = None
    room_id: Optional[str] = None


class MessageUpdate(MessageContent):
    """Only the content of a message can be edited"""
    pass


class MessageResponse(CamelModel):
    """A message with its author and participants resolved to user summaries"""
    id: str
    content: str
    author: UserSummary
    participants: List[UserSummary] = []
    timestamp: datetime
    parent_id: Optional[str] = None


class MessageEnvelope(CamelModel):
    message: MessageResponse


class ThreadResponse(CamelModel):
    """One thread, root first"""
    messages: List[MessageResponse]


class ThreadList(CamelModel):
    """Every thread visible to the user, each root first"""
    messages: List[List[MessageResponse]]
