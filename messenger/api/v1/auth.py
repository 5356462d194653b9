# messenger/api/v1/auth.py
from typing import Optional
from fastapi import APIRouter, Depends, status

from messenger import schemas
from messenger.api.dependencies import get_service, require_data
from messenger.services.auth_service import AuthService

router = APIRouter()


@router.post("/register", response_model=schemas.TokenResponse, status_code=status.HTTP_201_CREATED)
async def register_user(
    payload: Optional[schemas.DataRequest[schemas.SignUpRequest]] = None,
    auth_service: AuthService = Depends(get_service(AuthService))
):
    """
    Register a new user

    Returns the new user and a bearer token
    """
    data = require_data(payload, "No user data submitted")
    user, token = auth_service.sign_up(
        first_name=data.first_name,
        last_name=data.last_name,
        email=data.email,
        password=data.password
    )
    return {"user": user, "token": token}


@router.post("/login", response_model=schemas.TokenResponse)
async def login_user(
    payload: Optional[schemas.DataRequest[schemas.SignInRequest]] = None,
    auth_service: AuthService = Depends(get_service(AuthService))
):
    """
    Sign in an existing user

    Returns the user and a bearer token
    """
    data = require_data(payload, "No user submitted")
    user, token = auth_service.sign_in(email=data.email, password=data.password)
    return {"user": user, "token": token}
