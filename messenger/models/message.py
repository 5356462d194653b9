# messenger/models/message.py
from sqlalchemy import Column, String, Text, ForeignKey, DateTime, Table, Index
from sqlalchemy.orm import relationship

from messenger.database import Base
from messenger.models.mixins import TimestampMixin, generate_uuid, utc_now

# Users besides the author who may see a thread head
message_participants = Table(
    "message_participants",
    Base.metadata,
    Column("message_id", String(36), ForeignKey("messages.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class Message(Base, TimestampMixin):
    __tablename__ = "messages"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    content = Column(Text, nullable=False)
    author_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    # No foreign key: a child outlives the deletion of its parent as an orphan
    parent_id = Column(String(36), nullable=True, index=True)

    author = relationship("User", back_populates="messages")
    participants = relationship("User", secondary=message_participants, order_by="User.last_name, User.first_name")
    rooms = relationship("Room", secondary="room_messages", back_populates="messages")

    __table_args__ = (
        Index("ix_messages_parent_created", "parent_id", "created_at"),
    )

    @property
    def is_thread_head(self) -> bool:
        return self.parent_id is None

    def __repr__(self):
        return f"<Message {self.id} by {self.author_id} parent={self.parent_id}>"
