# messenger/api/v1/users.py
from fastapi import APIRouter, Depends, Query

from messenger import schemas
from messenger.api.auth import get_current_user
from messenger.api.dependencies import ensure_valid_id, get_service
from messenger.errors import NotFoundError
from messenger.models.user import User
from messenger.services.user_service import UserService

router = APIRouter()


@router.get("/search", response_model=schemas.UserList)
async def search_users(
    query: str = Query(..., min_length=1),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_service(UserService))
):
    """
    Search users by first name, last name or email
    """
    return {"users": user_service.search_users(query, page=page, limit=limit)}


@router.get("", response_model=schemas.UserList)
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_service(UserService))
):
    """
    List users sorted by name
    """
    return {"users": user_service.list_users(page=page, limit=limit)}


@router.get("/{user_id}", response_model=schemas.UserEnvelope)
async def get_user(
    user_id: str,
    current_user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_service(UserService))
):
    """
    Get one user's public summary
    """
    ensure_valid_id(user_id, "user")

    user = user_service.get_user(user_id)
    if not user:
        raise NotFoundError("No user found")

    return {"user": user}
