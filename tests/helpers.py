"""Builders shared by the test modules."""

from messenger.models import Message, User
from messenger.models.mixins import utc_now


def register(client, first_name, last_name, email, password="password123"):
    """Register a user through the API and return (user, auth headers)."""
    response = client.post("/api/auth/register", json={
        "data": {
            "firstName": first_name,
            "lastName": last_name,
            "email": email,
            "password": password,
        }
    })
    assert response.status_code == 201, response.text
    body = response.json()
    return body["user"], {"Authorization": f"Bearer {body['token']}"}


def post_message(client, headers, content, participants=(), parent_id=None, room_id=None):
    """Post a message through the API and return the response."""
    data = {"content": content, "participants": list(participants)}
    if parent_id is not None:
        data["parentId"] = parent_id
    if room_id is not None:
        data["roomId"] = room_id
    return client.post("/api/messages", json={"data": data}, headers=headers)


def make_user(db, first_name, email=None):
    """Insert a user directly, skipping password hashing."""
    user = User(
        first_name=first_name,
        last_name="Test",
        email=email or f"{first_name.lower()}@example.com",
        password_hash="not-a-real-hash",
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_message(db, author, content, parent=None, participants=()):
    """Insert a message directly; committed on its own so creation order is stable."""
    message = Message(
        content=content,
        author_id=author.id,
        timestamp=utc_now(),
        parent_id=parent.id if parent is not None else None,
        participants=list(participants),
    )
    db.add(message)
    db.commit()
    db.refresh(message)
    return message


def make_chain(db, author, length, participants=()):
    """Insert a head followed by ``length - 1`` replies."""
    head = make_message(db, author, "message 0", participants=participants)
    chain = [head]
    for index in range(1, length):
        chain.append(make_message(db, author, f"message {index}", parent=chain[-1]))
    return chain
