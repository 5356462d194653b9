# messenger/models/room.py
from sqlalchemy import Column, String, ForeignKey, Table
from sqlalchemy.orm import relationship

from messenger.database import Base
from messenger.models.mixins import TimestampMixin, generate_uuid

room_messages = Table(
    "room_messages",
    Base.metadata,
    Column("room_id", String(36), ForeignKey("rooms.id", ondelete="CASCADE"), primary_key=True),
    Column("message_id", String(36), ForeignKey("messages.id", ondelete="CASCADE"), primary_key=True),
)


class Room(Base, TimestampMixin):
    __tablename__ = "rooms"

    id = Column(String(36), primary_key=True, default=generate_uuid, index=True)
    name = Column(String(100), nullable=False)

    messages = relationship(
        "Message", secondary=room_messages, back_populates="rooms", order_by="Message.created_at"
    )

    @property
    def message_ids(self):
        return [message.id for message in self.messages]

    def __repr__(self):
        return f"<Room {self.id} - {self.name}>"
