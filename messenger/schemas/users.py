from typing import List, Optional
from pydantic import EmailStr, Field, field_validator
from datetime import datetime

from messenger.schemas.base import CamelModel


class UserSummary(CamelModel):
    """Public projection of a user: never carries credentials or contacts"""
    id: str
    first_name: str
    last_name: str
    email: str


class UserProfile(UserSummary):
    """The authenticated user's own record"""
    friend_ids: List[str] = []
    created_at: datetime
    updated_at: datetime


class ProfileUpdate(CamelModel):
    """Properties that can be updated"""
    first_name: Optional[str] = Field(None, max_length=50)
    last_name: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=8)

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_names(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("Names cannot be blank")
        return value


class UserEnvelope(CamelModel):
    user: UserSummary


class UserList(CamelModel):
    users: List[UserSummary]


class ProfileEnvelope(CamelModel):
    user: UserProfile
