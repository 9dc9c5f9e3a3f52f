"""Tests for user settings and blocking."""


def test_default_settings(client, alice):
    resp = client.get("/settings-get", headers=alice.headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["notifications"]["donations"] is True
    assert body["notifications"]["awards"] is False
    assert body["privacy"] == {"activityVisibility": "friends"}
    assert body["personalization"]["language"] == "en"
    assert body["personalization"]["interestTags"] == []


def test_partial_update_keeps_other_fields(client, alice):
    resp = client.patch("/settings-update", json={
        "notifications": {"sms": True},
        "personalization": {"theme": "dark", "interestTags": ["Water", "EDUCATION", "water"]},
    }, headers=alice.headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["notifications"]["sms"] is True
    assert body["notifications"]["donations"] is True
    assert body["personalization"]["theme"] == "dark"
    assert body["personalization"]["interestTags"] == ["water", "education"]
    assert body["personalization"]["currency"] == "USD"

    assert client.get("/settings-get", headers=alice.headers).json() == body


def test_invalid_visibility_rejected(client, alice):
    resp = client.patch("/settings-update", json={"privacy": {"activityVisibility": "everyone"}}, headers=alice.headers)
    assert resp.status_code == 400


def test_block_removes_follows_both_ways(client, alice, bob):
    client.post("/user-follow", json={"userId": bob.id}, headers=alice.headers)
    client.post("/user-follow", json={"userId": alice.id}, headers=bob.headers)

    resp = client.post("/settings-block-user", json={"userId": bob.id}, headers=alice.headers)
    assert resp.status_code == 200

    alice_profile = client.get("/user-profile", params={"username": "alice"}).json()
    assert alice_profile["stats"]["followers"] == 0
    assert alice_profile["stats"]["following"] == 0

    blocked = client.get("/settings-blocked-users", headers=alice.headers).json()
    assert [b["username"] for b in blocked] == ["bob"]


def test_blocked_users_cannot_follow_either_way(client, alice, bob):
    client.post("/settings-block-user", json={"userId": bob.id}, headers=alice.headers)

    assert client.post("/user-follow", json={"userId": alice.id}, headers=bob.headers).status_code == 403
    assert client.post("/user-follow", json={"userId": bob.id}, headers=alice.headers).status_code == 403


def test_block_rules(client, alice, bob):
    assert client.post("/settings-block-user", json={"userId": alice.id}, headers=alice.headers).status_code == 400
    assert client.post(
        "/settings-block-user",
        json={"userId": "00000000-0000-0000-0000-000000000000"},
        headers=alice.headers,
    ).status_code == 404

    client.post("/settings-block-user", json={"userId": bob.id}, headers=alice.headers)
    again = client.post("/settings-block-user", json={"userId": bob.id}, headers=alice.headers)
    assert again.status_code == 400
    assert again.json()["message"] == "User already blocked"


def test_unblock(client, alice, bob):
    client.post("/settings-block-user", json={"userId": bob.id}, headers=alice.headers)

    resp = client.delete("/settings-unblock-user", params={"userId": bob.id}, headers=alice.headers)
    assert resp.status_code == 200
    assert client.get("/settings-blocked-users", headers=alice.headers).json() == []
    assert client.post("/user-follow", json={"userId": bob.id}, headers=alice.headers).status_code == 200
