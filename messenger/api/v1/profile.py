# messenger/api/v1/profile.py
from typing import Optional
from fastapi import APIRouter, Depends, status

from messenger import schemas
from messenger.api.auth import get_current_user
from messenger.api.dependencies import get_service, require_data
from messenger.errors import ValidationFailedError
from messenger.models.user import User
from messenger.services.user_service import UserService

router = APIRouter()


@router.get("", response_model=schemas.ProfileEnvelope)
async def get_profile(current_user: User = Depends(get_current_user)):
    """
    Get the current user's profile
    """
    return {"user": current_user}


@router.put("", response_model=schemas.ProfileEnvelope, status_code=status.HTTP_201_CREATED)
async def edit_profile(
    payload: Optional[schemas.DataRequest[schemas.ProfileUpdate]] = None,
    current_user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_service(UserService))
):
    """
    Update the current user's profile

    Only the fields provided are changed
    """
    data = require_data(payload, "No user data submitted")
    update_data = data.model_dump(exclude_unset=True, exclude_none=True)
    if not update_data:
        raise ValidationFailedError("No user data submitted")

    user = user_service.update_user(current_user, update_data)
    return {"user": user}


@router.delete("", response_model=schemas.DeletedResponse)
async def delete_profile(
    current_user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_service(UserService))
):
    """
    Delete the current user's account and the messages they wrote
    """
    return {"id": user_service.delete_user(current_user)}
