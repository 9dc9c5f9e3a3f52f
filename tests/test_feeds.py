"""Tests for custom feeds, the tag directory and explore."""

MISSING = "00000000-0000-0000-0000-000000000000"


def _create_feed(client, user, name="Water", tags=("water",)):
    resp = client.post("/custom-feed-create", json={"name": name, "tags": list(tags)}, headers=user.headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_create_and_list_feeds(client, alice):
    first = _create_feed(client, alice, "Water", ["Water", " wells ", "water"])
    assert first["name"] == "Water"
    assert first["tags"] == ["water", "wells"]
    second = _create_feed(client, alice, "Schools", ["education"])

    listed = client.get("/custom-feed-list", headers=alice.headers).json()
    assert [f["id"] for f in listed] == [second["id"], first["id"]]


def test_create_feed_requires_tags(client, alice):
    resp = client.post("/custom-feed-create", json={"name": "Empty", "tags": [" "]}, headers=alice.headers)
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "tags"


def test_feeds_are_private_to_owner(client, alice, bob):
    feed = _create_feed(client, alice)

    assert client.get("/custom-feed-list", headers=bob.headers).json() == []
    for method, path, kwargs in [
        ("get", "/custom-feed-detail", {}),
        ("put", "/custom-feed-update", {"json": {"name": "Mine"}}),
        ("delete", "/custom-feed-delete", {}),
    ]:
        resp = getattr(client, method)(path, params={"id": feed["id"]}, headers=bob.headers, **kwargs)
        assert resp.status_code == 404
        assert resp.json() == {"message": "Custom feed not found", "status": 404}

    detail = client.get("/custom-feed-detail", params={"id": feed["id"]}, headers=alice.headers)
    assert detail.json()["name"] == "Water"


def test_update_feed(client, alice):
    feed = _create_feed(client, alice)

    resp = client.put(
        "/custom-feed-update",
        params={"id": feed["id"]},
        json={"name": "Clean water", "tags": ["Sanitation"]},
        headers=alice.headers,
    )
    assert resp.status_code == 200
    assert resp.json()["name"] == "Clean water"
    assert resp.json()["tags"] == ["sanitation"]

    empty = client.put("/custom-feed-update", params={"id": feed["id"]}, json={}, headers=alice.headers)
    assert empty.status_code == 400
    assert empty.json()["message"] == "No fields to update"

    no_tags = client.put("/custom-feed-update", params={"id": feed["id"]}, json={"tags": []}, headers=alice.headers)
    assert no_tags.status_code == 400


def test_delete_feed(client, alice):
    feed = _create_feed(client, alice)

    resp = client.delete("/custom-feed-delete", params={"id": feed["id"]}, headers=alice.headers)
    assert resp.json() == {"success": True, "message": "Custom feed deleted successfully"}
    assert client.get("/custom-feed-detail", params={"id": feed["id"]}, headers=alice.headers).status_code == 404
    assert client.delete("/custom-feed-delete", params={"id": MISSING}, headers=alice.headers).status_code == 404


def test_feeds_require_auth(client):
    assert client.get("/custom-feed-list").status_code == 401


def test_tag_list_counts_events_and_posts(client, alice, create_event, create_post):
    create_event(alice, title="Wells", tags=["water", "health"])
    create_event(alice, title="Pumps", tags=["water"])
    create_post(alice, tags=["health", "art"])
    create_post(alice, tags=["water"])

    resp = client.get("/tag-list")
    assert resp.status_code == 200
    assert resp.json() == [
        {"name": "water", "count": 3},
        {"name": "health", "count": 2},
        {"name": "art", "count": 1},
    ]


def test_explore_skips_interest_tags(client, alice, bob, create_event, create_post):
    create_event(alice, title="Wells", tags=["water"])
    art = create_event(alice, title="Gallery", tags=["art"])
    create_post(alice, content="Water update", tags=["water"])
    post = create_post(alice, content="Music night", tags=["music"])
    client.patch("/settings-update", json={"personalization": {"interestTags": ["Water"]}}, headers=bob.headers)

    resp = client.get("/explore-content", headers=bob.headers)
    assert resp.status_code == 200
    body = resp.json()
    assert [(item["type"], (item["event"] or item["post"])["id"]) for item in body["data"]] == [
        ("post", post["id"]),
        ("event", art["id"]),
    ]
    assert body["pagination"]["total"] == 2


def test_explore_anonymous_sees_everything(client, alice, create_event, create_post):
    create_event(alice, tags=["water"])
    create_post(alice, tags=["water"])

    body = client.get("/explore-content", params={"limit": 1}).json()
    assert len(body["data"]) == 1
    assert body["data"][0]["type"] == "post"
    assert body["pagination"] == {"page": 1, "limit": 1, "total": 2, "totalPages": 2}
