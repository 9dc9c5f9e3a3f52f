"""Tests for events, the support/pass pair and bookmarks."""
from datetime import datetime, timedelta, timezone


def _list(client, user=None, **params):
    headers = user.headers if user else {}
    resp = client.get("/event-list", params=params, headers=headers)
    assert resp.status_code == 200, resp.text
    return resp.json()


def test_create_event_normalizes_tags(client, alice, create_event):
    event = create_event(alice, tags=["Water", " health ", "water"], goalAmount=5000)
    assert event["tags"] == ["water", "health"]
    assert event["goalAmount"] == 5000
    assert event["raisedAmount"] == 0
    assert event["supporters"] == 0
    assert event["organizer"]["username"] == "alice"
    assert event["timeLeft"] is None


def test_create_event_requires_title(client, alice):
    resp = client.post("/event-create", json={"description": "no title"}, headers=alice.headers)
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "title"


def test_time_left_rounds_up(client, alice, create_event):
    end = datetime.now(timezone.utc) + timedelta(days=2, hours=1)
    event = create_event(alice, endDate=end.isoformat())
    assert event["timeLeft"] == "3 days left"

    ended = create_event(alice, title="Old", endDate=(datetime.now(timezone.utc) - timedelta(days=1)).isoformat())
    assert ended["timeLeft"] == "Ended"


def test_support_toggle_round_trip(client, alice, bob, create_event):
    event = create_event(alice)

    on = client.post("/event-support", json={"eventId": event["id"]}, headers=bob.headers)
    assert on.json() == {"isSupported": True, "supporters": 1}

    off = client.post("/event-support", json={"eventId": event["id"]}, headers=bob.headers)
    assert off.json() == {"isSupported": False, "supporters": 0}


def test_support_notifies_organizer(client, alice, bob, create_event, notifications_for):
    event = create_event(alice, title="Clean water")
    client.post("/event-support", json={"eventId": event["id"]}, headers=bob.headers)

    [notification] = notifications_for(alice)
    assert notification["type"] == "support"
    assert notification["message"] == 'Bob Brown supported your event "Clean water"'
    assert notification["actionUrl"] == f"/event/{event['id']}"


def test_withdrawn_support_records_pass_and_hides_event(client, alice, bob, create_event):
    event = create_event(alice)
    client.post("/event-support", json={"eventId": event["id"]}, headers=bob.headers)
    assert [e["id"] for e in _list(client, bob)["data"]] == [event["id"]]

    client.post("/event-support", json={"eventId": event["id"]}, headers=bob.headers)

    assert _list(client, bob)["data"] == []
    # other viewers still see it
    assert [e["id"] for e in _list(client, alice)["data"]] == [event["id"]]


def test_support_after_pass_clears_pass(client, alice, bob, create_event):
    event = create_event(alice)
    client.delete("/event-unsupport", params={"eventId": event["id"]}, headers=bob.headers)
    assert _list(client, bob)["data"] == []

    resp = client.post("/event-support", json={"eventId": event["id"]}, headers=bob.headers)
    assert resp.json()["isSupported"] is True

    [listed] = _list(client, bob)["data"]
    assert listed["isSupported"] is True
    assert listed["supporters"] == 1


def test_unsupport_is_idempotent(client, alice, bob, create_event):
    event = create_event(alice)
    client.post("/event-support", json={"eventId": event["id"]}, headers=bob.headers)

    for _ in range(2):
        resp = client.delete("/event-unsupport", params={"eventId": event["id"]}, headers=bob.headers)
        assert resp.status_code == 200
        assert resp.json() == {"isSupported": False, "supporters": 0}


def test_support_unknown_event(client, bob):
    resp = client.post(
        "/event-support",
        json={"eventId": "00000000-0000-0000-0000-000000000000"},
        headers=bob.headers,
    )
    assert resp.status_code == 404


def test_bookmark_toggle_and_listing(client, alice, bob, create_event):
    event = create_event(alice)

    assert client.post("/event-bookmark", json={"eventId": event["id"]}, headers=bob.headers).json() == {"bookmarked": True}
    bookmarked = client.get("/event-bookmarked", headers=bob.headers).json()
    assert [e["id"] for e in bookmarked["data"]] == [event["id"]]
    assert bookmarked["data"][0]["isBookmarked"] is True

    assert client.post("/event-bookmark", json={"eventId": event["id"]}, headers=bob.headers).json() == {"bookmarked": False}
    assert client.get("/event-bookmarked", headers=bob.headers).json()["data"] == []


def test_unbookmark_is_idempotent(client, alice, bob, create_event):
    event = create_event(alice)
    client.post("/event-bookmark", json={"eventId": event["id"]}, headers=bob.headers)

    for _ in range(2):
        resp = client.delete("/event-unbookmark", params={"eventId": event["id"]}, headers=bob.headers)
        assert resp.json() == {"bookmarked": False}


def test_list_filters(client, alice, bob, create_event):
    water = create_event(alice, title="Water wells", tags=["water"])
    school = create_event(bob, title="School books", description="Textbooks", tags=["education"])

    assert [e["id"] for e in _list(client, search="WELLS")["data"]] == [water["id"]]
    assert [e["id"] for e in _list(client, tags="education,art")["data"]] == [school["id"]]
    assert [e["id"] for e in _list(client, userId=bob.id)["data"]] == [school["id"]]
    assert [e["id"] for e in _list(client, excludeUser=bob.id)["data"]] == [water["id"]]
    assert [e["id"] for e in _list(client)["data"]] == [school["id"], water["id"]]


def test_tag_filter_matches_non_ascii_and_literal_underscores(client, alice, create_event):
    education = create_event(alice, title="Ecole", tags=["éducation"])
    underscored = create_event(alice, title="Underscored", tags=["a_b"])
    create_event(alice, title="Lookalike", tags=["axb"])
    create_event(alice, title="Percent", tags=["100%"])

    assert [e["id"] for e in _list(client, tags="éducation")["data"]] == [education["id"]]
    assert [e["id"] for e in _list(client, tags="a_b")["data"]] == [underscored["id"]]
    assert [e["title"] for e in _list(client, tags="100%")["data"]] == ["Percent"]
    assert _list(client, tags="%")["data"] == []


def test_exclude_interest_tags_with_non_ascii_tag(client, alice, bob, create_event):
    create_event(alice, title="Ecole", tags=["éducation"])
    art = create_event(alice, title="Art", tags=["art"])
    client.patch("/settings-update", json={"personalization": {"interestTags": ["Éducation"]}}, headers=bob.headers)

    assert [e["id"] for e in _list(client, bob, excludeUserTags="true")["data"]] == [art["id"]]


def test_list_hides_inactive_events(client, alice, create_event):
    event = create_event(alice)
    client.patch("/event-update", params={"id": event["id"]}, json={"status": "completed"}, headers=alice.headers)

    assert _list(client)["data"] == []


def test_interest_tag_filters(client, alice, bob, create_event):
    water = create_event(alice, title="Water", tags=["water"])
    art = create_event(alice, title="Art", tags=["art"])
    client.patch("/settings-update", json={"personalization": {"interestTags": ["Water"]}}, headers=bob.headers)

    assert [e["id"] for e in _list(client, bob, requireUserTags="true")["data"]] == [water["id"]]
    assert [e["id"] for e in _list(client, bob, excludeUserTags="true")["data"]] == [art["id"]]


def test_interest_tag_filters_without_tags_apply_nothing(client, alice, bob, create_event):
    create_event(alice, title="Water", tags=["water"])
    assert len(_list(client, bob, requireUserTags="true")["data"]) == 1


def test_detail_includes_updates_and_donation_count(client, alice, bob, create_event):
    event = create_event(alice)
    client.post("/event-update-post", json={"eventId": event["id"], "title": "Week 1", "content": "Digging"}, headers=alice.headers)
    client.post("/event-update-post", json={"eventId": event["id"], "title": "Week 2", "content": "Water!"}, headers=alice.headers)
    client.post("/donation-create", json={"eventId": event["id"], "amount": 10, "paymentMethod": "card"}, headers=bob.headers)

    resp = client.get("/event-detail", params={"id": event["id"]}, headers=bob.headers)
    assert resp.status_code == 200
    detail = resp.json()
    assert [u["title"] for u in detail["updates"]] == ["Week 2", "Week 1"]
    assert detail["donationsCount"] == 1
    assert detail["raisedAmount"] == 10


def test_detail_unknown_event(client):
    resp = client.get("/event-detail", params={"id": "00000000-0000-0000-0000-000000000000"})
    assert resp.status_code == 404
    assert resp.json() == {"message": "Event not found", "status": 404}


def test_only_organizer_can_modify(client, alice, bob, create_event):
    event = create_event(alice)

    assert client.patch("/event-update", params={"id": event["id"]}, json={"title": "Mine"}, headers=bob.headers).status_code == 403
    assert client.delete("/event-delete", params={"id": event["id"]}, headers=bob.headers).status_code == 403
    assert client.post("/event-update-post", json={"eventId": event["id"], "title": "x", "content": "y"}, headers=bob.headers).status_code == 403

    updated = client.patch("/event-update", params={"id": event["id"]}, json={"title": "Renamed"}, headers=alice.headers)
    assert updated.json()["title"] == "Renamed"


def test_delete_event_cascades(client, alice, bob, create_event):
    event = create_event(alice)
    client.post("/event-support", json={"eventId": event["id"]}, headers=bob.headers)
    client.post("/event-update-post", json={"eventId": event["id"], "title": "t", "content": "c"}, headers=alice.headers)

    assert client.delete("/event-delete", params={"id": event["id"]}, headers=alice.headers).status_code == 200
    assert client.get("/event-detail", params={"id": event["id"]}).status_code == 404


def test_participants_lists_supporters(client, alice, bob, carol, create_event):
    event = create_event(alice)
    client.post("/event-support", json={"eventId": event["id"]}, headers=bob.headers)
    client.post("/event-support", json={"eventId": event["id"]}, headers=carol.headers)

    resp = client.get("/event-participants", params={"eventId": event["id"]}, headers=alice.headers)
    assert resp.status_code == 200
    body = resp.json()
    assert [p["user"]["username"] for p in body["participants"]] == ["carol", "bob"]
    assert body["pagination"]["total"] == 2

    missing = client.get("/event-participants", params={"eventId": "00000000-0000-0000-0000-000000000000"}, headers=alice.headers)
    assert missing.status_code == 404


def test_analytics_for_organizer_only(client, alice, bob, carol, create_event):
    event = create_event(alice)
    client.post("/event-support", json={"eventId": event["id"]}, headers=bob.headers)
    client.post("/event-bookmark", json={"eventId": event["id"]}, headers=carol.headers)
    for user, amount in [(bob, 25), (bob, 15), (carol, 60)]:
        client.post("/donation-create", json={"eventId": event["id"], "amount": amount, "paymentMethod": "card"}, headers=user.headers)

    assert client.get("/event-analytics", params={"eventId": event["id"]}, headers=bob.headers).status_code == 403

    resp = client.get("/event-analytics", params={"eventId": event["id"]}, headers=alice.headers)
    assert resp.status_code == 200
    assert resp.json() == {
        "analytics": {"supporters": 1, "bookmarks": 1, "donations": 3, "donors": 2, "totalRaised": 100},
    }
