# messenger/api/v1/contacts.py
from typing import Optional
from fastapi import APIRouter, Depends, status

from messenger import schemas
from messenger.api.auth import get_current_user
from messenger.api.dependencies import ensure_valid_id, get_service
from messenger.errors import ValidationFailedError
from messenger.models.user import User
from messenger.services.contact_service import ContactService

router = APIRouter()


@router.get("", response_model=schemas.ContactList)
async def get_contacts(
    current_user: User = Depends(get_current_user),
    contact_service: ContactService = Depends(get_service(ContactService))
):
    """
    Get the current user's contacts
    """
    return {"contacts": contact_service.get_contacts(current_user)}


@router.put("", response_model=schemas.ContactList, status_code=status.HTTP_201_CREATED)
async def add_contact(
    payload: Optional[schemas.ContactAddRequest] = None,
    current_user: User = Depends(get_current_user),
    contact_service: ContactService = Depends(get_service(ContactService))
):
    """
    Add a user to the current user's contacts

    Returns the updated contact list
    """
    if payload is None:
        raise ValidationFailedError("Invalid contact ID")
    return {"contacts": contact_service.add_contact(current_user, payload.contact_id)}


@router.get("/{contact_id}", response_model=schemas.ContactEnvelope)
async def get_contact(
    contact_id: str,
    current_user: User = Depends(get_current_user),
    contact_service: ContactService = Depends(get_service(ContactService))
):
    """
    Get one of the current user's contacts
    """
    ensure_valid_id(contact_id, "contact")
    return {"contact": contact_service.get_contact(current_user, contact_id)}


@router.delete("/{contact_id}", response_model=schemas.ContactList, status_code=status.HTTP_201_CREATED)
async def delete_contact(
    contact_id: str,
    current_user: User = Depends(get_current_user),
    contact_service: ContactService = Depends(get_service(ContactService))
):
    """
    Remove a user from the current user's contacts

    Returns the updated contact list
    """
    ensure_valid_id(contact_id, "contact")
    return {"contacts": contact_service.remove_contact(current_user, contact_id)}
