# messenger/models/user.py
from sqlalchemy import Column, String, ForeignKey, Table
from sqlalchemy.orm import relationship

from messenger.database import Base
from messenger.models.mixins import TimestampMixin, generate_uuid

# Contact list: a user's friends, one row per (user, friend) pair
user_friends = Table(
    "user_friends",
    Base.metadata,
    Column("user_id", String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("friend_id", String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base, TimestampMixin):
    """Model representing user accounts"""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_uuid, index=True)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    email = Column(String(100), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)

    # Relationships
    friends = relationship(
        "User",
        secondary=user_friends,
        primaryjoin=id == user_friends.c.user_id,
        secondaryjoin=id == user_friends.c.friend_id,
        order_by="User.last_name, User.first_name",
    )
    messages = relationship("Message", back_populates="author", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User {self.id} - {self.email}>"

    @property
    def friend_ids(self):
        return [friend.id for friend in self.friends]

