"""Tests for feed posts and their toggles."""


def test_create_and_list_posts(client, alice, bob, create_post, create_event):
    event = create_event(alice, title="Clean water")
    first = create_post(alice, content="First")
    second = create_post(bob, content="Second", eventId=event["id"], tags=["Water"])

    assert second["event"] == {"id": event["id"], "title": "Clean water"}
    assert second["tags"] == ["water"]

    feed = client.get("/post-list").json()
    assert [p["id"] for p in feed["data"]] == [second["id"], first["id"]]

    by_author = client.get("/post-list", params={"userId": alice.id}).json()
    assert [p["id"] for p in by_author["data"]] == [first["id"]]

    by_event = client.get("/post-list", params={"eventId": event["id"]}).json()
    assert [p["id"] for p in by_event["data"]] == [second["id"]]


def test_create_post_requires_content(client, alice):
    resp = client.post("/post-create", json={"content": ""}, headers=alice.headers)
    assert resp.status_code == 400


def test_create_post_unknown_event(client, alice):
    resp = client.post(
        "/post-create",
        json={"content": "hi", "eventId": "00000000-0000-0000-0000-000000000000"},
        headers=alice.headers,
    )
    assert resp.status_code == 404


def test_like_toggle_counts_and_notifies(client, alice, bob, create_post, notifications_for):
    post = create_post(alice)

    liked = client.post("/post-like", json={"postId": post["id"]}, headers=bob.headers)
    assert liked.json() == {"success": True, "liked": True, "likes": 1}

    [notification] = notifications_for(alice)
    assert notification["type"] == "like"
    assert notification["message"] == "Bob Brown liked your post"
    assert notification["actionUrl"] == "/feed"

    unliked = client.post("/post-like", json={"postId": post["id"]}, headers=bob.headers)
    assert unliked.json() == {"success": True, "liked": False, "likes": 0}
    assert len(notifications_for(alice)) == 1


def test_unlike_is_idempotent(client, alice, bob, create_post):
    post = create_post(alice)
    client.post("/post-like", json={"postId": post["id"]}, headers=bob.headers)

    for _ in range(2):
        resp = client.delete("/post-unlike", params={"postId": post["id"]}, headers=bob.headers)
        assert resp.status_code == 200
        assert resp.json() == {"success": True, "liked": False, "likes": 0}

    missing = client.delete("/post-unlike", params={"postId": "00000000-0000-0000-0000-000000000000"}, headers=bob.headers)
    assert missing.status_code == 404


def test_viewer_flags(client, alice, bob, create_post):
    post = create_post(alice)
    client.post("/post-like", json={"postId": post["id"]}, headers=bob.headers)
    client.post("/post-bookmark", json={"postId": post["id"]}, headers=bob.headers)

    detail = client.get("/post-detail", params={"id": post["id"]}, headers=bob.headers).json()
    assert detail["isLiked"] is True
    assert detail["isBookmarked"] is True
    assert detail["isParticipating"] is False
    assert detail["likes"] == 1

    anonymous = client.get("/post-detail", params={"id": post["id"]}).json()
    assert anonymous["isLiked"] is False


def test_bookmark_toggle_and_listing(client, alice, bob, create_post):
    post = create_post(alice)
    assert client.post("/post-bookmark", json={"postId": post["id"]}, headers=bob.headers).json() == {"bookmarked": True}

    listed = client.get("/post-bookmarked", headers=bob.headers).json()
    assert [p["id"] for p in listed["data"]] == [post["id"]]

    assert client.post("/post-bookmark", json={"postId": post["id"]}, headers=bob.headers).json() == {"bookmarked": False}
    assert client.get("/post-bookmarked", headers=bob.headers).json()["data"] == []


def test_participate_toggle(client, alice, bob, carol, create_post, notifications_for):
    post = create_post(alice)

    resp = client.post("/post-participate", json={"postId": post["id"]}, headers=bob.headers)
    assert resp.json() == {"participating": True, "participants": 1}
    client.post("/post-participate", json={"postId": post["id"]}, headers=carol.headers)

    participants = client.get("/post-participants", params={"postId": post["id"]}, headers=alice.headers).json()
    assert {p["user"]["username"] for p in participants["participants"]} == {"bob", "carol"}
    assert participants["pagination"]["total"] == 2

    [latest, _] = notifications_for(alice)
    assert latest["type"] == "support"
    assert latest["title"] == "New Participant"

    resp = client.post("/post-participate", json={"postId": post["id"]}, headers=bob.headers)
    assert resp.json() == {"participating": False, "participants": 1}


def test_only_author_deletes(client, alice, bob, create_post):
    post = create_post(alice)
    assert client.delete("/post-delete", params={"id": post["id"]}, headers=bob.headers).status_code == 403
    assert client.delete("/post-delete", params={"id": post["id"]}, headers=alice.headers).status_code == 200
    assert client.get("/post-detail", params={"id": post["id"]}).status_code == 404
