import hashlib
import hmac
import json
import time

import pytest

from evalhub.shared.config import settings
from evalhub.evaluations.models import Evaluation
from evalhub.payments.models import Payment
from evalhub.profiles.models import Profile

def _evaluation(client, headers):
    body = client.post("/tasks", json={"title": "Queue", "description": "Implement a queue"}, headers=headers).json()
    return body["evaluation_id"]

def _sign(payload: str, secret: str = "whsec_test", ts: int | None = None) -> str:
    ts = ts or int(time.time())
    sig = hmac.new(secret.encode(), f"{ts}.{payload}".encode(), hashlib.sha256).hexdigest()
    return f"t={ts},v1={sig}"

def _event(kind: str, intent_id: str, evaluation_id: str, user_id: str, amount: int = 499) -> str:
    return json.dumps({
        "id": "evt_1",
        "type": kind,
        "data": {"object": {
            "id": intent_id, "object": "payment_intent", "amount": amount,
            "metadata": {"evaluation_id": evaluation_id, "user_id": user_id},
        }},
    })

def _post_webhook(client, payload: str, signature: str | None):
    headers = {"Content-Type": "application/json"}
    if signature:
        headers["Stripe-Signature"] = signature
    return client.post("/payments/webhook", content=payload, headers=headers)

@pytest.fixture
def fake_intent(monkeypatch):
    calls = []

    def _create(amount, currency, metadata):
        calls.append({"amount": amount, "currency": currency, "metadata": metadata})
        return {"id": f"pi_{len(calls)}", "client_secret": f"pi_{len(calls)}_secret", "amount": amount}

    monkeypatch.setattr("evalhub.payments.gateway.create_payment_intent", _create)
    return calls

# --- stripe mode ---

def test_create_intent(client, alice, fake_llm, stripe_mode, fake_intent, db):
    ev_id = _evaluation(client, alice)
    r = client.post("/payments/create-intent", json={"evaluation_id": ev_id}, headers=alice)
    assert r.status_code == 200
    assert r.json() == {"client_secret": "pi_1_secret"}
    assert fake_intent[0] == {"amount": 499, "currency": "usd", "metadata": {"evaluation_id": ev_id, "user_id": "alice"}}
    pay = db.query(Payment).one()
    assert pay.status == "pending" and pay.stripe_payment_id == "pi_1"
    # nothing unlocked until the webhook confirms
    assert db.get(Evaluation, ev_id).is_paid is False

def test_create_intent_checks(client, alice, bob, fake_llm, stripe_mode, fake_intent, db):
    ev_id = _evaluation(client, alice)
    assert client.post("/payments/create-intent", json={}, headers=alice).status_code == 400
    assert client.post("/payments/create-intent", json={"evaluation_id": "nope"}, headers=alice).status_code == 404
    assert client.post("/payments/create-intent", json={"evaluation_id": ev_id}, headers=bob).status_code == 403
    db.get(Evaluation, ev_id).is_paid = True
    db.commit()
    r = client.post("/payments/create-intent", json={"evaluation_id": ev_id}, headers=alice)
    assert r.status_code == 400
    assert r.json()["detail"]["error"]["code"] == "already_unlocked"
    assert fake_intent == []

def test_webhook_success_unlocks_report(client, alice, fake_llm, stripe_mode, fake_intent, db):
    ev_id = _evaluation(client, alice)
    client.post("/payments/create-intent", json={"evaluation_id": ev_id}, headers=alice)
    payload = _event("payment_intent.succeeded", "pi_1", ev_id, "alice")

    r = _post_webhook(client, payload, _sign(payload))
    assert r.status_code == 200
    assert r.json() == {"received": True, "handled": True}
    assert db.get(Evaluation, ev_id).is_paid is True
    assert db.get(Profile, "alice").subscription_plan == "Premium"
    pay = db.query(Payment).one()
    assert pay.status == "completed" and pay.amount == 499

    # redelivery is harmless
    assert _post_webhook(client, payload, _sign(payload)).status_code == 200
    assert db.query(Payment).count() == 1

def test_webhook_does_not_downgrade_ultra(client, alice, fake_llm, stripe_mode, db):
    ev_id = _evaluation(client, alice)
    client.post("/profile/upgrade-plan", json={"plan": "Ultra Premium"}, headers=alice)
    payload = _event("payment_intent.succeeded", "pi_9", ev_id, "alice")
    _post_webhook(client, payload, _sign(payload))
    assert db.get(Profile, "alice").subscription_plan == "Ultra Premium"

def test_webhook_failed_payment(client, alice, fake_llm, stripe_mode, fake_intent, db):
    ev_id = _evaluation(client, alice)
    client.post("/payments/create-intent", json={"evaluation_id": ev_id}, headers=alice)
    payload = _event("payment_intent.payment_failed", "pi_1", ev_id, "alice")
    assert _post_webhook(client, payload, _sign(payload)).status_code == 200
    assert db.query(Payment).one().status == "failed"
    assert db.get(Evaluation, ev_id).is_paid is False

def test_webhook_ignores_other_events(client, stripe_mode):
    payload = json.dumps({"id": "evt_2", "type": "customer.created", "data": {"object": {"id": "cus_1"}}})
    r = _post_webhook(client, payload, _sign(payload))
    assert r.json() == {"received": True, "handled": False}

def test_webhook_signature_required(client, alice, fake_llm, stripe_mode, db):
    ev_id = _evaluation(client, alice)
    payload = _event("payment_intent.succeeded", "pi_x", ev_id, "alice")

    r = _post_webhook(client, payload, None)
    assert r.status_code == 400
    assert r.json()["detail"]["error"]["code"] == "no_signature"

    r = _post_webhook(client, payload, _sign(payload, secret="whsec_wrong"))
    assert r.status_code == 400
    assert r.json()["detail"]["error"]["code"] == "invalid_signature"

    stale = _sign(payload, ts=int(time.time()) - 3600)
    assert _post_webhook(client, payload, stale).status_code == 400
    assert db.get(Evaluation, ev_id).is_paid is False

def test_demo_routes_disabled_in_stripe_mode(client, alice, fake_llm, stripe_mode):
    ev_id = _evaluation(client, alice)
    r = client.post(f"/payments/demo/evaluations/{ev_id}", headers=alice)
    assert r.status_code == 409
    assert r.json()["detail"]["error"]["code"] == "payment_mode_disabled"

# --- demo mode ---

def test_demo_unlock(client, alice, bob, fake_llm, demo_mode, db):
    ev_id = _evaluation(client, alice)
    assert client.post(f"/payments/demo/evaluations/{ev_id}", headers=bob).status_code == 403

    r = client.post(f"/payments/demo/evaluations/{ev_id}", headers=alice)
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["stripe_payment_id"].startswith("demo_")
    assert data["amount"] == 499 and data["status"] == "completed"
    assert db.get(Evaluation, ev_id).is_paid is True

    again = client.post(f"/payments/demo/evaluations/{ev_id}", headers=alice)
    assert again.status_code == 400

def test_stripe_routes_disabled_in_demo_mode(client, alice, demo_mode):
    r = client.post("/payments/create-intent", json={"evaluation_id": "x"}, headers=alice)
    assert r.status_code == 409
    assert _post_webhook(client, "{}", "t=1,v1=abc").status_code == 409

def test_demo_plan_purchase(client, alice, demo_mode):
    r = client.post("/payments/demo/plan", json={"plan": "Ultra Premium"}, headers=alice)
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["profile"]["subscription_plan"] == "Ultra Premium"
    assert data["payment"]["amount"] == 1999 and data["payment"]["plan"] == "Ultra Premium"

    r = client.post("/payments/demo/plan", json={"plan": "Free"}, headers=alice)
    assert r.json()["data"]["payment"] is None

    assert client.post("/payments/demo/plan", json={"plan": "Gold"}, headers=alice).status_code == 400

def test_payment_history_is_per_user(client, alice, bob, demo_mode):
    client.post("/payments/demo/plan", json={"plan": "Premium"}, headers=alice)
    assert len(client.get("/payments", headers=alice).json()) == 1
    assert client.get("/payments", headers=bob).json() == []
