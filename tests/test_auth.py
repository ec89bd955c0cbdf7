from evalhub.shared.config import settings
from evalhub.profiles.models import Profile

def _register(client, email="ada@example.com", password="s3cret-pw"):
    return client.post("/auth/register", json={"email": email, "password": password, "full_name": "Ada"})

def _login(client, email="ada@example.com", password="s3cret-pw"):
    return client.post("/auth/token", data={"username": email, "password": password})

def test_register_creates_user_and_free_profile(client, db):
    r = _register(client)
    assert r.status_code == 201
    user = r.json()["user"]
    assert user["email"] == "ada@example.com"
    prof = db.get(Profile, user["id"])
    assert prof.subscription_plan == "Free"
    assert prof.full_name == "Ada"

def test_register_twice_is_rejected(client):
    _register(client)
    r = _register(client, email="ADA@example.com")
    assert r.status_code == 400
    assert r.json()["detail"] == "email_already_registered"

def test_login_returns_jwt_usable_on_me(client):
    _register(client)
    r = _login(client)
    assert r.status_code == 200
    body = r.json()
    assert body["demo"] is False
    me = client.get("/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.status_code == 200
    assert me.json()["user"]["email"] == "ada@example.com"
    assert me.json()["user"]["mode"] == "jwt"

def test_login_with_wrong_password(client):
    _register(client)
    assert _login(client, password="nope").status_code == 401

def test_missing_and_bad_tokens(client):
    assert client.get("/auth/me").status_code == 401
    r = client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401

def test_demo_mode_token(client, monkeypatch):
    monkeypatch.setattr(settings, "AUTH_DEMO", True)
    r = client.post("/auth/token", data={"username": "x", "password": "y"})
    assert r.json() == {"access_token": settings.DEMO_TOKEN, "token_type": "bearer", "demo": True}
    me = client.get("/auth/me", headers={"Authorization": f"Bearer {settings.DEMO_TOKEN}"})
    assert me.json()["user"]["sub"] == "demo-user"

def test_demo_token_refused_outside_demo_mode(client):
    r = client.get("/auth/me", headers={"Authorization": f"Bearer {settings.DEMO_TOKEN}"})
    assert r.status_code == 401
