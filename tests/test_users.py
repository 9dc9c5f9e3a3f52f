"""Tests for profiles, search and the follow toggle."""


def test_follow_toggle_round_trip(client, alice, bob):
    first = client.post("/user-follow", json={"userId": bob.id}, headers=alice.headers)
    assert first.status_code == 200
    assert first.json() == {"isFollowing": True, "followersCount": 1}

    second = client.post("/user-follow", json={"userId": bob.id}, headers=alice.headers)
    assert second.json() == {"isFollowing": False, "followersCount": 0}


def test_follow_notifies_target(client, alice, bob, notifications_for):
    client.post("/user-follow", json={"userId": bob.id}, headers=alice.headers)

    [notification] = notifications_for(bob)
    assert notification["type"] == "follow"
    assert notification["title"] == "New Follower"
    assert notification["message"] == "Alice Anders started following you"
    assert notification["actionUrl"] == "/profile/alice"
    assert notification["isRead"] is False


def test_refollow_does_not_duplicate_unread_notification(client, alice, bob):
    client.post("/user-follow", json={"userId": bob.id}, headers=alice.headers)
    client.post("/user-follow", json={"userId": bob.id}, headers=alice.headers)

    count = client.get("/notification-unread-count", headers=bob.headers).json()["count"]
    assert count == 1


def test_follow_self_rejected(client, alice):
    resp = client.post("/user-follow", json={"userId": alice.id}, headers=alice.headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Cannot follow yourself"


def test_follow_unknown_user(client, alice):
    resp = client.post(
        "/user-follow",
        json={"userId": "00000000-0000-0000-0000-000000000000"},
        headers=alice.headers,
    )
    assert resp.status_code == 404


def test_follow_requires_auth(client, bob):
    resp = client.post("/user-follow", json={"userId": bob.id})
    assert resp.status_code == 401


def test_profile_stats_and_flags(client, alice, bob, create_event):
    client.post("/user-follow", json={"userId": bob.id}, headers=alice.headers)
    donated = create_event(bob, title="Donated")
    client.post("/donation-create", json={
        "eventId": donated["id"],
        "amount": 250,
        "paymentMethod": "card",
    }, headers=alice.headers)
    # causes supported counts support records, not events donated to
    for title in ("Wells", "Schools"):
        supported = create_event(bob, title=title)
        client.post("/event-support", json={"eventId": supported["id"]}, headers=alice.headers)

    resp = client.get("/user-profile", params={"username": "alice"}, headers=bob.headers)
    assert resp.status_code == 200
    profile = resp.json()
    assert profile["isOwnProfile"] is False
    assert profile["isFollowing"] is False
    assert profile["stats"]["following"] == 1
    assert profile["stats"]["followers"] == 0
    assert profile["stats"]["causesSupported"] == 2
    assert profile["stats"]["totalDonated"] == 250
    assert profile["impactScore"] == 2 * 10 + 2

    bob_profile = client.get("/user-profile", params={"username": "bob"}, headers=alice.headers).json()
    assert bob_profile["isFollowing"] is True
    assert bob_profile["stats"]["followers"] == 1


def test_profile_without_auth(client, alice):
    resp = client.get("/user-profile", params={"username": "alice"})
    assert resp.status_code == 200
    assert resp.json()["isOwnProfile"] is False


def test_profile_unknown_username(client):
    resp = client.get("/user-profile", params={"username": "ghost"})
    assert resp.status_code == 404


def test_update_profile(client, alice):
    resp = client.patch("/user-update", json={"bio": "Organizer", "location": "Nairobi"}, headers=alice.headers)
    assert resp.status_code == 200
    assert resp.json()["bio"] == "Organizer"
    assert resp.json()["location"] == "Nairobi"
    assert resp.json()["firstName"] == "Alice"


def test_search_users(client, alice, bob, carol):
    resp = client.get("/user-search", params={"query": "BRO"}, headers=alice.headers)
    assert resp.status_code == 200
    assert [u["username"] for u in resp.json()] == ["bob"]


def test_search_empty_query(client, alice):
    resp = client.get("/user-search", params={"query": ""}, headers=alice.headers)
    assert resp.status_code == 200
    assert resp.json() == []


def _activity(client, username, user=None, **params):
    headers = user.headers if user else {}
    resp = client.get("/user-activity", params={"username": username, **params}, headers=headers)
    assert resp.status_code == 200, resp.text
    return resp.json()


def test_activity_merges_supports_awards_and_follows(client, alice, bob, create_event, create_post):
    event = create_event(alice, title="Clean water")
    post = create_post(alice)
    comment = client.post(
        "/comment-create",
        json={"content": "x" * 120, "postId": post["id"]},
        headers=alice.headers,
    ).json()

    client.post("/event-support", json={"eventId": event["id"]}, headers=bob.headers)
    client.post("/comment-award", json={"commentId": comment["id"]}, headers=bob.headers)
    client.post("/user-follow", json={"userId": alice.id}, headers=bob.headers)

    activity = _activity(client, "bob", bob)
    assert [a["type"] for a in activity] == ["follow", "award", "support"]
    follow, award, support = activity
    assert follow["description"] == "Started following Alice Anders"
    assert follow["user"]["username"] == "alice"
    assert award["description"] == "x" * 100 + "..."
    assert award["event"] is None
    assert support["description"] == 'Supported "Clean water"'
    assert support["event"]["id"] == event["id"]

    assert len(_activity(client, "bob", bob, limit=2)) == 2


def test_activity_respects_visibility(client, alice, bob, carol, create_event):
    event = create_event(alice)
    client.post("/event-support", json={"eventId": event["id"]}, headers=bob.headers)

    # default visibility is followers only
    assert _activity(client, "bob") == []
    assert _activity(client, "bob", carol) == []
    client.post("/user-follow", json={"userId": bob.id}, headers=carol.headers)
    assert len(_activity(client, "bob", carol)) == 1

    client.patch("/settings-update", json={"privacy": {"activityVisibility": "private"}}, headers=bob.headers)
    assert _activity(client, "bob", carol) == []
    assert len(_activity(client, "bob", bob)) == 1

    client.patch("/settings-update", json={"privacy": {"activityVisibility": "public"}}, headers=bob.headers)
    assert len(_activity(client, "bob")) == 1


def test_activity_unknown_username(client):
    resp = client.get("/user-activity", params={"username": "ghost"})
    assert resp.status_code == 404


def test_settings_impact(client, alice, bob, create_event):
    water = create_event(alice, title="Water")
    school = create_event(alice, title="School")
    for event, amount in [(water, 30), (water, 20), (school, 50)]:
        client.post("/donation-create", json={"eventId": event["id"], "amount": amount, "paymentMethod": "card"}, headers=bob.headers)

    resp = client.get("/settings-impact", headers=bob.headers)
    assert resp.status_code == 200
    assert resp.json() == {"totalDonated": 100, "causesSupported": 2, "donationCount": 3}

    assert client.get("/settings-impact", headers=alice.headers).json() == {
        "totalDonated": 0, "causesSupported": 0, "donationCount": 0,
    }
