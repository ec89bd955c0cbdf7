import os
import tempfile

# must be set before evalhub is imported: settings and engine read them at import time
_DB_DIR = tempfile.mkdtemp(prefix="evalhub-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_DIR}/test.db"
os.environ["AUTH_DEMO"] = "false"
os.environ["ENV"] = "test"
os.environ["GEMINI_API_KEY"] = ""
os.environ["OPENAI_API_KEY"] = ""
os.environ["STRIPE_SECRET_KEY"] = "sk_test_dummy"
os.environ["STRIPE_WEBHOOK_SECRET"] = "whsec_test"

import pytest
from fastapi.testclient import TestClient

from evalhub.main import app
from evalhub.shared.auth import create_access_token
from evalhub.shared.config import settings
from evalhub.shared.db import Base, engine, SessionLocal
from evalhub.llm.parse import EvaluationResult

@pytest.fixture(autouse=True)
def fresh_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield

@pytest.fixture
def db():
    s = SessionLocal()
    try:
        yield s
    finally:
        s.close()

@pytest.fixture
def client():
    return TestClient(app)

def auth_headers(sub: str = "user-1", email: str = "u1@example.com", role: str = "user") -> dict:
    return {"Authorization": f"Bearer {create_access_token(sub=sub, email=email, role=role)}"}

@pytest.fixture
def alice():
    return auth_headers("alice", "alice@example.com")

@pytest.fixture
def bob():
    return auth_headers("bob", "bob@example.com")

@pytest.fixture
def admin():
    return auth_headers("root", "root@example.com", role="admin")

CANNED = EvaluationResult(
    score=82,
    strengths=["Readable"],
    weaknesses=["No tests"],
    improvements=["Add tests"],
    full_report="A detailed report.",
)

@pytest.fixture
def fake_llm(monkeypatch):
    """Replace the model call with a canned answer and record what it was asked."""
    calls = []

    def _evaluate(title, description, code=None, tier="free"):
        calls.append({"title": title, "description": description, "code": code, "tier": tier})
        return CANNED

    monkeypatch.setattr("evalhub.evaluations.service.evaluate_task", _evaluate)
    return calls

@pytest.fixture
def stripe_mode(monkeypatch):
    monkeypatch.setattr(settings, "PAYMENT_MODE", "stripe")

@pytest.fixture
def demo_mode(monkeypatch):
    monkeypatch.setattr(settings, "PAYMENT_MODE", "demo")
