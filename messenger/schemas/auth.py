from pydantic import EmailStr, Field, field_validator

from messenger.schemas.base import CamelModel
from messenger.schemas.users import UserProfile


class SignUpRequest(CamelModel):
    """Request for user registration"""
    first_name: str = Field(..., max_length=50)
    last_name: str = Field(..., max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=8)

    @field_validator("first_name", "last_name")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Names cannot be blank")
        return value


class SignInRequest(CamelModel):
    """Request for user login"""
    email: EmailStr
    password: str = Field(..., min_length=1)


class TokenResponse(CamelModel):
    """Response with the signed-in user and their bearer token"""
    user: UserProfile
    token: str
