from app.core.config import settings
from app.core.security import create_session_token


def _register(client, username="ravi_k", role="worker", password="secret123", **fields):
    body = {
        "username": username,
        "password": password,
        "role": role,
        "fullName": fields.pop("fullName", "Ravi Kumar"),
        "phone": fields.pop("phone", "9876543210"),
        **fields,
    }
    return client.post("/api/auth/register", json=body)


def _login(client, username="ravi_k", password="secret123"):
    return client.post("/api/auth/login", json={"username": username, "password": password})


def test_register_returns_profile_without_password(client):
    resp = _register(client, location="Pune", skills=["masonry", "tiling"])
    assert resp.status_code == 201, resp.text
    data = resp.json()
    assert data["username"] == "ravi_k"
    assert data["role"] == "worker"
    assert data["skills"] == ["masonry", "tiling"]
    assert "password" not in data
    assert "hashedPassword" not in data


def test_duplicate_username_conflicts(client):
    assert _register(client).status_code == 201
    resp = _register(client, role="employer")
    assert resp.status_code == 409
    assert resp.json()["message"] == "Username already taken"


def test_registration_validation(client):
    resp = _register(client, username="ab")
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["path"] == "username"

    resp = _register(client, password="123")
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["path"] == "password"

    # Admins are not self-registered
    resp = _register(client, role="admin")
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["path"] == "role"


def test_login_sets_session_cookie(client):
    _register(client, role="employer")

    resp = _login(client)
    assert resp.status_code == 200, resp.text
    assert resp.json()["user"]["role"] == "employer"
    assert resp.json()["message"] == "Login successful"
    set_cookie = resp.headers["set-cookie"]
    assert set_cookie.startswith(f"{settings.SESSION_COOKIE_NAME}=")
    assert "httponly" in set_cookie.lower()

    resp = client.get("/api/auth/me")
    assert resp.status_code == 200
    assert resp.json()["username"] == "ravi_k"

    resp = client.get("/api/auth/status")
    assert resp.json() == {
        "authenticated": True,
        "user": {"id": resp.json()["user"]["id"], "username": "ravi_k", "role": "employer"},
    }


def test_bad_credentials_fail_identically(client):
    _register(client)

    wrong_password = _login(client, password="not-it")
    unknown_user = _login(client, username="nobody")
    assert wrong_password.status_code == unknown_user.status_code == 401
    assert wrong_password.json()["message"] == unknown_user.json()["message"] == "Invalid username or password"


def test_bearer_token_is_accepted(client):
    user_id = _register(client).json()["id"]
    token = create_session_token({"sub": user_id, "role": "worker"})

    resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    assert resp.json()["id"] == user_id


def test_invalid_or_orphaned_tokens_are_anonymous(client):
    resp = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert resp.status_code == 401

    token = create_session_token({"sub": "deleted-user", "role": "worker"})
    resp = client.get("/api/auth/status", headers={"Authorization": f"Bearer {token}"})
    assert resp.json() == {"authenticated": False, "user": None}


def test_logout_clears_cookie(client):
    _register(client)
    _login(client)

    resp = client.post("/api/auth/logout")
    assert resp.status_code == 200
    assert resp.json() == {"message": "Logout successful"}
    assert "max-age=0" in resp.headers["set-cookie"].lower()


def test_logout_requires_session(client):
    assert client.post("/api/auth/logout").status_code == 401


def test_profile_update_keeps_role(client):
    _register(client)
    _login(client)

    resp = client.patch("/api/users/me", json={"location": "Nashik", "skills": ["plumbing"], "role": "admin"})
    assert resp.status_code == 200, resp.text
    data = resp.json()
    assert data["location"] == "Nashik"
    assert data["skills"] == ["plumbing"]
    assert data["role"] == "worker"
    assert data["fullName"] == "Ravi Kumar"

    assert client.get("/api/users/me").json()["location"] == "Nashik"


def test_health_check(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"
