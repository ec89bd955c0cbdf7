from fastapi.testclient import TestClient
from evalhub.main import app

def test_health():
    c = TestClient(app)
    r = c.get("/healthz")
    assert r.status_code == 200 and r.json()["ok"] is True

def test_openapi_marks_private_routes_with_bearer_auth():
    c = TestClient(app)
    schema = c.get("/openapi.json").json()
    assert "bearerAuth" in schema["components"]["securitySchemes"]
    assert schema["paths"]["/tasks"]["get"]["security"] == [{"bearerAuth": []}]
    assert "security" not in schema["paths"]["/payments/webhook"]["post"]
