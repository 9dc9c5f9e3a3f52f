"""Tests for mock-payment donations."""
import re


def _donate(client, user, event_id, amount, **fields):
    payload = {"eventId": event_id, "amount": amount, "paymentMethod": "card", **fields}
    return client.post("/donation-create", json=payload, headers=user.headers)


def test_donation_raises_total_and_notifies_with_amount(client, alice, bob, create_event, notifications_for):
    event = create_event(alice, title="Clean water", goalAmount=1000)

    resp = _donate(client, bob, event["id"], 25.00)
    assert resp.status_code == 201
    donation = resp.json()["donation"]
    assert donation["amount"] == 25.0
    assert donation["status"] == "completed"
    assert re.fullmatch(r"txn_\d{13}_[0-9a-z]{9}", donation["transactionId"])
    assert donation["donor"]["username"] == "bob"
    assert donation["event"]["id"] == event["id"]

    detail = client.get("/event-detail", params={"id": event["id"]}).json()
    assert detail["raisedAmount"] == 25.0

    [notification] = notifications_for(alice)
    assert notification["type"] == "donation"
    assert notification["amount"] == 25.0
    assert notification["message"] == 'Bob Brown donated $25.00 to your event "Clean water"'


def test_donations_accumulate(client, alice, bob, carol, create_event):
    event = create_event(alice)
    _donate(client, bob, event["id"], 10.50)
    _donate(client, carol, event["id"], 4.50)
    _donate(client, bob, event["id"], 5)

    detail = client.get("/event-detail", params={"id": event["id"]}).json()
    assert detail["raisedAmount"] == 20.0
    assert detail["donationsCount"] == 3


def test_anonymous_donation_hides_donor(client, alice, bob, create_event, notifications_for):
    event = create_event(alice, title="Clean water")
    resp = _donate(client, bob, event["id"], 5, isAnonymous=True)
    assert resp.json()["donation"]["donor"] is None

    listed = client.get("/donation-list", headers=bob.headers).json()
    assert listed["data"][0]["donor"] is None
    assert listed["data"][0]["isAnonymous"] is True

    [notification] = notifications_for(alice)
    assert notification["message"].startswith("An anonymous donor donated $5.00")


def test_donation_validation(client, alice, bob, create_event):
    event = create_event(alice)
    assert _donate(client, bob, event["id"], 0).status_code == 400
    assert _donate(client, bob, event["id"], -5).status_code == 400
    assert _donate(client, bob, "00000000-0000-0000-0000-000000000000", 5).status_code == 404


def test_inactive_event_refuses_donations(client, alice, bob, create_event):
    event = create_event(alice)
    client.patch("/event-update", params={"id": event["id"]}, json={"status": "cancelled"}, headers=alice.headers)

    resp = _donate(client, bob, event["id"], 5)
    assert resp.status_code == 400


def test_donation_list_filters_by_event(client, alice, bob, create_event):
    first = create_event(alice, title="One")
    second = create_event(alice, title="Two")
    _donate(client, bob, first["id"], 1)
    _donate(client, bob, second["id"], 2)

    everything = client.get("/donation-list", headers=bob.headers).json()
    assert everything["pagination"]["total"] == 2

    only_first = client.get("/donation-list", params={"eventId": first["id"]}, headers=bob.headers).json()
    assert [d["event"]["id"] for d in only_first["data"]] == [first["id"]]

    assert client.get("/donation-list", headers=alice.headers).json()["data"] == []


def test_donation_history_stats(client, alice, bob, create_event):
    first = create_event(alice, title="One")
    second = create_event(alice, title="Two")
    _donate(client, bob, first["id"], 10)
    _donate(client, bob, first["id"], 15)
    _donate(client, bob, second["id"], 25)

    history = client.get("/donation-history", headers=bob.headers).json()
    assert history["stats"] == {"totalDonations": 3, "totalAmount": 50.0, "uniqueEvents": 2}
    assert len(history["donations"]) == 3
