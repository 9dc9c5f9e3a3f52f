"""Tests for the root endpoints and the error envelope."""


def test_root(client):
    resp = client.get("http://testserver/")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "running"
    assert body["docs"] == "disabled"


def test_health_reports_redis_disabled(client):
    resp = client.get("http://testserver/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "healthy", "database": "connected", "redis": "disabled"}


def test_unknown_route_uses_error_envelope(client):
    resp = client.get("/no-such-endpoint")
    assert resp.status_code == 404
    assert resp.json() == {"message": "Not found", "status": 404}


def test_wrong_method_uses_error_envelope(client):
    resp = client.delete("/auth-login")
    assert resp.status_code == 405
    assert resp.json() == {"message": "Method not allowed", "status": 405}


def test_validation_errors_list_fields(client):
    resp = client.post("/auth-login", json={"email": "not-an-email"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["message"] == "Validation failed"
    assert body["status"] == 400
    fields = {e["field"] for e in body["errors"]}
    assert {"email", "password"} <= fields
