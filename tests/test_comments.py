"""Tests for threaded comments, likes, saves and awards."""


def _comment(client, user, content, **target):
    resp = client.post("/comment-create", json={"content": content, **target}, headers=user.headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_thread_ordering(client, alice, bob, create_event):
    event = create_event(alice)
    older = _comment(client, bob, "older", eventId=event["id"])
    newer = _comment(client, alice, "newer", eventId=event["id"])
    reply_1 = _comment(client, alice, "reply 1", eventId=event["id"], parentId=older["id"])
    reply_2 = _comment(client, bob, "reply 2", eventId=event["id"], parentId=older["id"])

    tree = client.get("/comment-list", params={"eventId": event["id"]}).json()
    assert [c["id"] for c in tree] == [newer["id"], older["id"]]
    assert [r["id"] for r in tree[1]["replies"]] == [reply_1["id"], reply_2["id"]]
    assert tree[0]["replies"] == []


def test_comment_list_needs_exactly_one_target(client, alice, create_event, create_post):
    event = create_event(alice)
    post = create_post(alice)

    assert client.get("/comment-list").status_code == 400
    both = client.get("/comment-list", params={"eventId": event["id"], "postId": post["id"]})
    assert both.status_code == 400


def test_comment_notifies_event_owner(client, alice, bob, create_event, notifications_for):
    event = create_event(alice, title="Clean water")
    _comment(client, bob, "Great cause", eventId=event["id"])

    [notification] = notifications_for(alice)
    assert notification["type"] == "comment"
    assert notification["message"] == 'Bob Brown commented on your event "Clean water"'
    assert notification["actionUrl"] == f"/event/{event['id']}"


def test_comment_notifies_post_author(client, alice, bob, create_post, notifications_for):
    post = create_post(alice)
    _comment(client, bob, "Count me in", postId=post["id"])

    [notification] = notifications_for(alice)
    assert notification["message"] == "Bob Brown commented on your post"
    assert notification["actionUrl"] == "/feed"


def test_reply_parent_must_share_target(client, alice, create_event, create_post):
    event = create_event(alice)
    post = create_post(alice)
    parent = _comment(client, alice, "on the event", eventId=event["id"])

    resp = client.post(
        "/comment-create",
        json={"content": "wrong thread", "postId": post["id"], "parentId": parent["id"]},
        headers=alice.headers,
    )
    assert resp.status_code == 400


def test_comment_on_unknown_target(client, alice):
    resp = client.post(
        "/comment-create",
        json={"content": "hello", "postId": "00000000-0000-0000-0000-000000000000"},
        headers=alice.headers,
    )
    assert resp.status_code == 404


def test_like_and_save_toggles(client, alice, bob, create_post):
    post = create_post(alice)
    comment = _comment(client, alice, "mine", postId=post["id"])

    assert client.post("/comment-like", json={"commentId": comment["id"]}, headers=bob.headers).json() == {"liked": True, "likes": 1}
    assert client.post("/comment-save", json={"commentId": comment["id"]}, headers=bob.headers).json() == {"saved": True}

    [listed] = client.get("/comment-list", params={"postId": post["id"]}, headers=bob.headers).json()
    assert listed["likes"] == 1
    assert listed["isLiked"] is True
    assert listed["isSaved"] is True

    assert client.post("/comment-like", json={"commentId": comment["id"]}, headers=bob.headers).json() == {"liked": False, "likes": 0}
    assert client.post("/comment-save", json={"commentId": comment["id"]}, headers=bob.headers).json() == {"saved": False}


def test_award_is_one_way(client, alice, bob, create_post, notifications_for):
    post = create_post(alice)
    comment = _comment(client, alice, "mine", postId=post["id"])

    first = client.post("/comment-award", json={"commentId": comment["id"]}, headers=bob.headers)
    assert first.json() == {"awarded": True}

    again = client.post("/comment-award", json={"commentId": comment["id"]}, headers=bob.headers)
    assert again.json() == {"awarded": True, "message": "Already awarded"}

    awards = [n for n in notifications_for(alice) if n["type"] == "award"]
    assert len(awards) == 1

    [listed] = client.get("/comment-list", params={"postId": post["id"]}, headers=bob.headers).json()
    assert listed["awards"] == 1
    assert listed["isAwarded"] is True


def test_cannot_award_own_comment(client, alice, create_post):
    post = create_post(alice)
    comment = _comment(client, alice, "mine", postId=post["id"])

    resp = client.post("/comment-award", json={"commentId": comment["id"]}, headers=alice.headers)
    assert resp.status_code == 400


def test_delete_cascades_to_replies(client, alice, bob, create_post):
    post = create_post(alice)
    parent = _comment(client, alice, "parent", postId=post["id"])
    _comment(client, bob, "reply", postId=post["id"], parentId=parent["id"])

    assert client.delete("/comment-delete", params={"id": parent["id"]}, headers=bob.headers).status_code == 403
    assert client.delete("/comment-delete", params={"id": parent["id"]}, headers=alice.headers).status_code == 200

    assert client.get("/comment-list", params={"postId": post["id"]}).json() == []
