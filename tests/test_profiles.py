def _code(r):
    return r.json()["detail"]["error"]["code"]

def test_profile_is_created_lazily(client, alice):
    r = client.get("/profile", headers=alice)
    assert r.status_code == 200
    body = r.json()
    assert body["user"] == {"id": "alice", "email": "alice@example.com"}
    assert body["profile"]["subscription_plan"] == "Free"
    # second call returns the same row
    assert client.get("/profile", headers=alice).json()["profile"]["created_at"] == body["profile"]["created_at"]

def test_update_display_name(client, alice):
    r = client.patch("/profile", json={"full_name": "  Alice L.  "}, headers=alice)
    assert r.status_code == 200
    assert r.json()["full_name"] == "Alice L."

def test_upgrade_own_plan(client, alice):
    r = client.post("/profile/upgrade-plan", json={"plan": "Premium"}, headers=alice)
    assert r.status_code == 200
    assert r.json()["data"]["plan"] == "Premium"
    assert client.get("/profile", headers=alice).json()["profile"]["subscription_plan"] == "Premium"

def test_upgrade_rejects_unknown_plan(client, alice):
    r = client.post("/profile/upgrade-plan", json={"plan": "Gold"}, headers=alice)
    assert r.status_code == 400
    assert _code(r) == "invalid_plan"

def test_cannot_upgrade_someone_else(client, alice, bob):
    client.get("/profile", headers=bob)
    r = client.post("/profile/upgrade-plan", json={"plan": "Ultra Premium", "user_id": "bob"}, headers=alice)
    assert r.status_code == 403
    assert client.get("/profile", headers=bob).json()["profile"]["subscription_plan"] == "Free"

def test_admin_can_upgrade_other_accounts(client, admin, bob):
    client.get("/profile", headers=bob)
    r = client.post("/profile/upgrade-plan", json={"plan": "Ultra Premium", "user_id": "bob"}, headers=admin)
    assert r.status_code == 200
    assert client.get("/profile", headers=bob).json()["profile"]["subscription_plan"] == "Ultra Premium"

def test_admin_upgrade_of_unknown_account(client, admin):
    r = client.post("/profile/upgrade-plan", json={"plan": "Premium", "user_id": "ghost"}, headers=admin)
    assert r.status_code == 404

def test_plans_reflect_current_plan(client, alice):
    client.post("/profile/upgrade-plan", json={"plan": "Premium"}, headers=alice)
    plans = {p["name"]: p for p in client.get("/plans", headers=alice).json()}
    assert plans["Free"]["action"] == "switch"
    assert plans["Premium"]["action"] == "current"
    assert plans["Ultra Premium"]["action"] == "upgrade"
    assert plans["Premium"]["price_cents"] == 499
    assert plans["Ultra Premium"]["price_cents"] == 1999
