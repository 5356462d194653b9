"""
Schema definitions for the application.
This module exports all schemas for easy importing throughout the app.
"""

# Import from base
from messenger.schemas.base import CamelModel, DataRequest, DeletedResponse

# Import from users
from messenger.schemas.users import (
    UserSummary, UserProfile, ProfileUpdate, UserEnvelope, UserList, ProfileEnvelope
)

# Import from auth
from messenger.schemas.auth import SignUpRequest, SignInRequest, TokenResponse

# Import from contacts
from messenger.schemas.contacts import ContactAddRequest, ContactList, ContactEnvelope

# Import from rooms
from messenger.schemas.rooms import (
    RoomBase, RoomCreate, RoomUpdate, RoomResponse, RoomEnvelope, RoomList
)

# Import from messages
from messenger.schemas.messages import (
    MessageContent, MessageCreate, MessageUpdate, MessageResponse, MessageEnvelope,
    ThreadResponse, ThreadList
)
