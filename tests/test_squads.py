"""Tests for squads, roles and the squad feed."""
import pytest


@pytest.fixture
def squad(client, alice):
    resp = client.post("/squad-create", json={
        "name": "Beach Cleaners",
        "description": "Saturday mornings",
        "tags": ["Ocean"],
    }, headers=alice.headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.fixture
def private_squad(client, alice):
    resp = client.post("/squad-create", json={"name": "Board", "isPrivate": True}, headers=alice.headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def _join(client, user, squad_id):
    return client.post("/squad-join", json={"squadId": squad_id}, headers=user.headers)


def test_creator_becomes_admin(client, alice, squad):
    assert squad["role"] == "admin"
    assert squad["isMember"] is True
    assert squad["memberCount"] == 1
    assert squad["tags"] == ["ocean"]

    [mine] = client.get("/squad-list", headers=alice.headers).json()["data"]
    assert mine["id"] == squad["id"]
    assert mine["role"] == "admin"
    assert mine["postCount"] == 0


def test_join_leave_round_trip(client, alice, bob, squad, notifications_for):
    joined = _join(client, bob, squad["id"])
    assert joined.status_code == 200
    assert joined.json()["role"] == "member"
    assert joined.json()["memberCount"] == 2

    [notification] = notifications_for(alice)
    assert notification["type"] == "system"
    assert notification["actionUrl"] == f"/squads/{squad['id']}"

    again = _join(client, bob, squad["id"])
    assert again.status_code == 400
    assert again.json()["message"] == "Already a member"

    left = client.delete("/squad-leave", params={"squadId": squad["id"]}, headers=bob.headers)
    assert left.status_code == 200

    detail = client.get("/squad-detail", params={"id": squad["id"]}, headers=bob.headers).json()
    assert detail["isMember"] is False
    assert detail["memberCount"] == 1


def test_private_squad_cannot_be_joined(client, bob, private_squad):
    assert _join(client, bob, private_squad["id"]).status_code == 403


def test_search_lists_public_squads_only(client, alice, bob, squad, private_squad):
    found = client.get("/squad-search", params={"query": ""}, headers=bob.headers).json()
    assert [s["id"] for s in found["data"]] == [squad["id"]]
    assert found["data"][0]["isMember"] is False

    by_name = client.get("/squad-search", params={"query": "beach"}, headers=alice.headers).json()
    assert by_name["data"][0]["isMember"] is True


def test_leave_rules(client, alice, bob, squad):
    assert client.delete("/squad-leave", params={"squadId": squad["id"]}, headers=bob.headers).status_code == 400

    resp = client.delete("/squad-leave", params={"squadId": squad["id"]}, headers=alice.headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Admins cannot leave. Delete the squad instead."


def test_admin_only_update_and_delete(client, alice, bob, squad):
    _join(client, bob, squad["id"])

    assert client.patch("/squad-update", params={"id": squad["id"]}, json={"name": "Mine"}, headers=bob.headers).status_code == 403
    assert client.delete("/squad-delete", params={"id": squad["id"]}, headers=bob.headers).status_code == 403

    renamed = client.patch("/squad-update", params={"id": squad["id"]}, json={"name": "Shore Crew"}, headers=alice.headers)
    assert renamed.json()["name"] == "Shore Crew"

    assert client.delete("/squad-delete", params={"id": squad["id"]}, headers=alice.headers).status_code == 200
    assert client.get("/squad-detail", params={"id": squad["id"]}, headers=alice.headers).status_code == 404


def test_manage_members(client, alice, bob, carol, squad):
    _join(client, bob, squad["id"])
    _join(client, carol, squad["id"])

    promoted = client.patch("/squad-manage-member", json={
        "squadId": squad["id"],
        "userId": carol.id,
        "role": "moderator",
    }, headers=alice.headers)
    assert promoted.status_code == 200
    assert promoted.json()["role"] == "moderator"

    members = client.get("/squad-members", params={"squadId": squad["id"]}, headers=bob.headers).json()
    assert [(m["user"]["username"], m["role"]) for m in members] == [
        ("alice", "admin"),
        ("carol", "moderator"),
        ("bob", "member"),
    ]

    removed = client.delete(
        "/squad-manage-member",
        params={"squadId": squad["id"], "userId": bob.id},
        headers=alice.headers,
    )
    assert removed.status_code == 200
    members = client.get("/squad-members", params={"squadId": squad["id"]}, headers=alice.headers).json()
    assert {m["user"]["username"] for m in members} == {"alice", "carol"}


def test_manage_member_rules(client, alice, bob, carol, squad):
    _join(client, bob, squad["id"])

    not_admin = client.patch("/squad-manage-member", json={
        "squadId": squad["id"], "userId": alice.id, "role": "member",
    }, headers=bob.headers)
    assert not_admin.status_code == 403

    self_target = client.patch("/squad-manage-member", json={
        "squadId": squad["id"], "userId": alice.id, "role": "member",
    }, headers=alice.headers)
    assert self_target.status_code == 400

    unknown = client.patch("/squad-manage-member", json={
        "squadId": squad["id"], "userId": carol.id, "role": "member",
    }, headers=alice.headers)
    assert unknown.status_code == 404

    bad_role = client.patch("/squad-manage-member", json={
        "squadId": squad["id"], "userId": bob.id, "role": "owner",
    }, headers=alice.headers)
    assert bad_role.status_code == 400


def test_feed_is_members_only(client, alice, bob, squad):
    assert client.get("/squad-posts", params={"squadId": squad["id"]}, headers=bob.headers).status_code == 403
    assert client.post("/squad-post-create", json={"squadId": squad["id"], "content": "hi"}, headers=bob.headers).status_code == 403

    _join(client, bob, squad["id"])
    created = client.post("/squad-post-create", json={"squadId": squad["id"], "content": "See you Saturday"}, headers=bob.headers)
    assert created.status_code == 201

    feed = client.get("/squad-posts", params={"squadId": squad["id"]}, headers=alice.headers).json()
    assert [p["content"] for p in feed["data"]] == ["See you Saturday"]


def test_squad_comments_and_reactions(client, alice, bob, squad):
    _join(client, bob, squad["id"])
    post = client.post("/squad-post-create", json={"squadId": squad["id"], "content": "Gloves?"}, headers=alice.headers).json()

    comment = client.post("/squad-comment-create", json={"postId": post["id"], "content": "I have some"}, headers=bob.headers)
    assert comment.status_code == 201
    reply = client.post("/squad-comment-create", json={
        "postId": post["id"], "content": "Thanks", "parentId": comment.json()["id"],
    }, headers=alice.headers)
    assert reply.status_code == 201

    missing_parent = client.post("/squad-comment-create", json={
        "postId": post["id"], "content": "?", "parentId": "00000000-0000-0000-0000-000000000000",
    }, headers=alice.headers)
    assert missing_parent.status_code == 404

    comments = client.get("/squad-comments", params={"postId": post["id"]}, headers=alice.headers).json()
    assert [c["content"] for c in comments] == ["I have some", "Thanks"]

    liked = client.post("/squad-reaction", json={"squadPostId": post["id"]}, headers=bob.headers)
    assert liked.json() == {"liked": True, "likes": 1}
    unliked = client.post("/squad-reaction", json={"squadPostId": post["id"]}, headers=bob.headers)
    assert unliked.json() == {"liked": False, "likes": 0}

    comment_like = client.post("/squad-reaction", json={"commentId": comment.json()["id"]}, headers=alice.headers)
    assert comment_like.json() == {"liked": True, "likes": 1}

    feed = client.get("/squad-posts", params={"squadId": squad["id"]}, headers=alice.headers).json()
    assert feed["data"][0]["comments"] == 2
