from core.models import User
from core.repositories import UserRepository

DEFAULT_PASSWORD = "secret123"


def _login(client, email, password=DEFAULT_PASSWORD):
    return client.post("/api/auth/login", json={"email": email, "password": password})


def test_register_returns_user_profile_and_token(client):
    resp = client.post(
        "/api/auth/register",
        json={"email": "New@Example.com", "password": DEFAULT_PASSWORD, "name": "New User"},
    )

    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "User registered successfully"
    assert body["data"]["user"]["email"] == "new@example.com"
    assert "passwordHash" not in body["data"]["user"]
    assert "password_hash" not in body["data"]["user"]
    assert body["data"]["profile"]["name"] == "New User"
    assert body["data"]["profile"]["email"] == "new@example.com"
    assert body["data"]["token"]
    assert "access_token" in resp.cookies


def test_register_duplicate_email(client, register):
    register("dup@example.com")

    resp = client.post(
        "/api/auth/register",
        json={"email": "DUP@example.com", "password": DEFAULT_PASSWORD, "name": "Again"},
    )

    assert resp.status_code == 409
    assert resp.json() == {"success": False, "message": "User with this email already exists"}


def test_register_validation_messages(client):
    cases = [
        ({"password": DEFAULT_PASSWORD, "name": "Ann"}, "Email is required"),
        ({"email": "nope", "password": DEFAULT_PASSWORD, "name": "Ann"}, "Please provide a valid email address"),
        ({"email": "a@example.com", "password": "123", "name": "Ann"}, "Password must be at least 6 characters long"),
        ({"email": "a@example.com", "password": DEFAULT_PASSWORD, "name": "A"}, "Name must be at least 2 characters long"),
    ]
    for payload, message in cases:
        resp = client.post("/api/auth/register", json=payload)
        assert resp.status_code == 400, payload
        assert resp.json()["success"] is False
        assert resp.json()["message"] == message


def test_register_then_login(client, register):
    register("login@example.com")

    resp = _login(client, "LOGIN@example.com")

    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Login successful"
    assert body["data"]["user"]["lastLogin"] is not None
    assert body["data"]["token"]


def test_wrong_password_is_always_401(client, register):
    register("wrong@example.com")

    for _ in range(5):
        resp = _login(client, "wrong@example.com", "not-the-password")
        assert resp.status_code == 401
        assert resp.json()["message"] == "Invalid email or password"

    assert _login(client, "wrong@example.com").status_code == 200


def test_unknown_email(client):
    resp = _login(client, "ghost@example.com")

    assert resp.status_code == 401
    assert resp.json()["message"] == "Invalid email or password"


def test_deactivated_user_cannot_login_or_use_token(client, app, register):
    data = register("inactive@example.com")
    headers = {"Authorization": f"Bearer {data['token']}"}

    with app.state.db.session() as session:
        UserRepository(session).deactivate(data["user"]["id"])

    resp = _login(client, "inactive@example.com")
    assert resp.status_code == 401
    assert resp.json()["message"] == "Account is deactivated"

    resp = client.get("/api/auth/me", headers=headers)
    assert resp.status_code == 401
    assert resp.json()["message"] == "Account is deactivated"


def test_me_requires_token(client):
    resp = client.get("/api/auth/me")

    assert resp.status_code == 401
    assert resp.json()["message"] == "Access token is required"


def test_me_rejects_garbage_token(client):
    resp = client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"})

    assert resp.status_code == 401
    assert resp.json()["message"] == "Invalid or expired token"


def test_me_and_profile(authorized_client):
    client, headers = authorized_client

    me = client.get("/api/auth/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["data"]["user"]["email"] == "tester@example.com"

    resp = client.get("/api/auth/profile", headers=headers)
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["profile"]["name"] == "Test User"
    assert "email" not in data["profile"]


def test_cookie_authentication(client, register):
    data = register("cookie@example.com")
    client.cookies.set("access_token", data["token"])

    resp = client.get("/api/auth/me")

    assert resp.status_code == 200
    assert resp.json()["data"]["user"]["email"] == "cookie@example.com"


def test_logout_revokes_token(authorized_client):
    client, headers = authorized_client

    resp = client.post("/api/auth/logout", headers=headers)
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "message": "Logout successful"}

    resp = client.get("/api/auth/me", headers=headers)
    assert resp.status_code == 401
    assert resp.json()["message"] == "Token has been revoked"


def test_refresh_issues_new_token_and_revokes_old(authorized_client):
    client, headers = authorized_client

    resp = client.post("/api/auth/refresh", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["message"] == "Token refreshed successfully"
    new_token = resp.json()["data"]["token"]
    client.cookies.clear()

    assert client.get("/api/auth/me", headers=headers).status_code == 401
    fresh = client.get("/api/auth/me", headers={"Authorization": f"Bearer {new_token}"})
    assert fresh.status_code == 200


def test_password_is_stored_hashed(client, app, register):
    register("hashed@example.com")

    with app.state.db.session() as session:
        user = session.query(User).filter(User.email == "hashed@example.com").one()
        assert user.password_hash != DEFAULT_PASSWORD
        assert user.password_hash.startswith("$2")
