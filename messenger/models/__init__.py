# messenger/models/__init__.py
from messenger.models.user import User, user_friends
from messenger.models.message import Message, message_participants
from messenger.models.room import Room, room_messages
