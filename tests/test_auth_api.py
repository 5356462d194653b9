"""
Integration tests for registration, sign in and the profile endpoints.
"""

from helpers import post_message, register


def signup_data(**overrides):
    data = {
        "firstName": "Dana",
        "lastName": "Dunn",
        "email": "dana@example.com",
        "password": "password123",
    }
    data.update(overrides)
    return {"data": data}


class TestRegister:
    """Tests for POST /api/auth/register."""

    def test_returns_the_user_and_a_token(self, client):
        response = client.post("/api/auth/register", json=signup_data())
        assert response.status_code == 201

        body = response.json()
        assert body["token"]
        assert body["user"]["firstName"] == "Dana"
        assert body["user"]["friendIds"] == []
        assert "password" not in body["user"]
        assert "passwordHash" not in body["user"]

    def test_email_is_stored_lowercase(self, client):
        response = client.post("/api/auth/register", json=signup_data(email="Dana@Example.com"))
        assert response.json()["user"]["email"] == "dana@example.com"

    def test_rejects_missing_data(self, client):
        response = client.post("/api/auth/register", json={})
        assert response.status_code == 400
        assert response.json()["detail"] == "No user data submitted"

    def test_rejects_a_taken_email(self, client, alice):
        response = client.post("/api/auth/register", json=signup_data(email="alice@example.com"))
        assert response.status_code == 400
        assert response.json()["detail"] == "User already exists"

    def test_rejects_a_malformed_email(self, client):
        response = client.post("/api/auth/register", json=signup_data(email="not-an-email"))
        assert response.status_code == 400

    def test_rejects_a_short_password(self, client):
        response = client.post("/api/auth/register", json=signup_data(password="short"))
        assert response.status_code == 400

    def test_rejects_a_blank_name(self, client):
        response = client.post("/api/auth/register", json=signup_data(firstName="   "))
        assert response.status_code == 400
        assert response.json()["detail"] == "Names cannot be blank"

    def test_reports_the_missing_field(self, client):
        data = signup_data()
        del data["data"]["lastName"]
        response = client.post("/api/auth/register", json=data)
        assert response.status_code == 400
        assert response.json()["detail"] == "lastName is required"


class TestLogin:
    """Tests for POST /api/auth/login."""

    def test_valid_credentials_give_a_working_token(self, client, alice):
        alice_user, _ = alice
        response = client.post("/api/auth/login", json={
            "data": {"email": "alice@example.com", "password": "password123"}
        })
        assert response.status_code == 200

        body = response.json()
        assert body["user"]["id"] == alice_user["id"]

        profile = client.get("/api/profile", headers={"Authorization": f"Bearer {body['token']}"})
        assert profile.status_code == 200
        assert profile.json()["user"]["id"] == alice_user["id"]

    def test_email_match_ignores_case(self, client, alice):
        response = client.post("/api/auth/login", json={
            "data": {"email": "ALICE@example.com", "password": "password123"}
        })
        assert response.status_code == 200

    def test_wrong_password_is_unauthorized(self, client, alice):
        response = client.post("/api/auth/login", json={
            "data": {"email": "alice@example.com", "password": "wrong-password"}
        })
        assert response.status_code == 401
        assert response.json()["detail"] == "Incorrect password"

    def test_unknown_email_is_rejected(self, client):
        response = client.post("/api/auth/login", json={
            "data": {"email": "nobody@example.com", "password": "password123"}
        })
        assert response.status_code == 400
        assert response.json()["detail"] == "No user with that email"

    def test_rejects_missing_data(self, client):
        response = client.post("/api/auth/login", json={})
        assert response.status_code == 400
        assert response.json()["detail"] == "No user submitted"


class TestProfile:
    """Tests for /api/profile."""

    def test_requires_a_token(self, client):
        assert client.get("/api/profile").status_code == 401

    def test_returns_the_current_user(self, client, alice):
        alice_user, headers = alice
        response = client.get("/api/profile", headers=headers)
        assert response.status_code == 200
        assert response.json()["user"] == alice_user

    def test_updates_only_the_given_fields(self, client, alice):
        _, headers = alice
        response = client.put("/api/profile", json={"data": {"firstName": "Alicia"}}, headers=headers)
        assert response.status_code == 201

        user = response.json()["user"]
        assert user["firstName"] == "Alicia"
        assert user["lastName"] == "Archer"
        assert user["email"] == "alice@example.com"

    def test_rejects_an_empty_update(self, client, alice):
        _, headers = alice
        response = client.put("/api/profile", json={"data": {}}, headers=headers)
        assert response.status_code == 400
        assert response.json()["detail"] == "No user data submitted"

    def test_rejects_a_taken_email(self, client, alice, bob):
        _, headers = alice
        response = client.put("/api/profile", json={"data": {"email": "bob@example.com"}}, headers=headers)
        assert response.status_code == 400
        assert response.json()["detail"] == "Email already registered"

    def test_password_change_applies_to_login(self, client, alice):
        _, headers = alice
        response = client.put("/api/profile", json={"data": {"password": "new-password"}}, headers=headers)
        assert response.status_code == 201

        old = client.post("/api/auth/login", json={
            "data": {"email": "alice@example.com", "password": "password123"}
        })
        new = client.post("/api/auth/login", json={
            "data": {"email": "alice@example.com", "password": "new-password"}
        })
        assert old.status_code == 401
        assert new.status_code == 200

    def test_delete_removes_the_account(self, client):
        user, headers = register(client, "Erin", "Ellis", "erin@example.com")

        response = client.delete("/api/profile", headers=headers)
        assert response.status_code == 200
        assert response.json() == {"id": user["id"]}

        again = client.get("/api/profile", headers=headers)
        assert again.status_code == 401
        assert again.json()["detail"] == "Not authorized, no user found"

    def test_delete_removes_the_users_messages(self, client, bob):
        bob_user, bob_headers = bob
        _, erin_headers = register(client, "Erin", "Ellis", "erin@example.com")
        head = post_message(client, erin_headers, "hello Bob", participants=[bob_user["id"]]).json()["message"]
        reply = post_message(client, bob_headers, "hi Erin", parent_id=head["id"]).json()["message"]

        assert client.delete("/api/profile", headers=erin_headers).status_code == 200

        # Erin's thread is gone for Bob; the reply is left as an orphan only its author can read
        assert client.get("/api/messages", headers=bob_headers).json() == {"messages": []}
        assert client.get(f"/api/messages/{head['id']}", headers=bob_headers).status_code == 404
        orphan = client.get(f"/api/messages/{reply['id']}", headers=bob_headers)
        assert orphan.status_code == 200
        assert orphan.json()["message"]["parentId"] == head["id"]
