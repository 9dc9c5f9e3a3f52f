"""Tests for bucketed uploads and file serving."""
import re

import pytest

from causeconnect.core.config import settings
from causeconnect.storage import reset_storage

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x01" * 32


def _upload(client, user, bucket="events", content=PNG_BYTES, filename="cover.png"):
    headers = dict(user.headers)
    if bucket is not None:
        headers["X-Bucket-Name"] = bucket
    return client.post("/storage-upload", files={"file": (filename, content, "image/png")}, headers=headers)


def test_upload_and_serve(client, alice):
    resp = _upload(client, alice)
    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["bucket"] == "events"
    assert body["size"] == len(PNG_BYTES)
    assert body["type"] == "image/png"
    assert body["name"] == "cover.png"
    assert re.fullmatch(rf"events/{alice.id}/\d+-[0-9a-z]{{8}}\.png", body["path"])
    assert body["url"] == f"/files/{body['path']}"

    served = client.get(f"http://testserver{body['url']}")
    assert served.status_code == 200
    assert served.content == PNG_BYTES
    assert served.headers["content-type"] == "image/png"


def test_unknown_bucket_rejected(client, alice):
    assert _upload(client, alice, bucket="secrets").status_code == 400
    assert _upload(client, alice, bucket=None).status_code == 400


def test_empty_file_rejected(client, alice):
    assert _upload(client, alice, content=b"").status_code == 400


def test_oversized_file_rejected(client, alice, monkeypatch):
    monkeypatch.setattr(settings, "MAX_FILE_SIZE_MB", 1)
    resp = _upload(client, alice, content=PNG_BYTES + b"\x00" * (1024 * 1024))
    assert resp.status_code == 400


def test_upload_requires_auth(client):
    resp = client.post("/storage-upload", files={"file": ("a.png", PNG_BYTES, "image/png")}, headers={"X-Bucket-Name": "events"})
    assert resp.status_code == 401


def test_missing_file_is_404(client):
    resp = client.get("http://testserver/files/events/nobody/missing.png")
    assert resp.status_code == 404
    assert resp.json() == {"message": "File not found", "status": 404}


@pytest.fixture
def unconfigured_storage(monkeypatch):
    monkeypatch.setattr(settings, "STORAGE_BACKEND", "s3")
    reset_storage()
    yield
    reset_storage()


def test_unconfigured_backend_is_503(client, alice, unconfigured_storage):
    resp = _upload(client, alice)
    assert resp.status_code == 503
    assert resp.json()["status"] == 503
