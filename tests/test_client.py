"""Tests for the typed HTTP client, driven through httpx.MockTransport."""
import asyncio
import json

import httpx
import pytest

from causeconnect.client import ApiError, CauseConnectClient
from causeconnect.client.api_client import NETWORK_ERROR_MESSAGE

USER = {
    "id": "5b7e1c7e-3f7a-4f55-9a59-0c3c7f1a2b3c",
    "email": "alice@example.org",
    "username": "alice",
    "firstName": "Alice",
    "lastName": "Anders",
    "name": "Alice Anders",
    "createdAt": "2026-01-01T00:00:00Z",
}


def _client(handler, **kwargs):
    kwargs.setdefault("auth_check_delay", 0)
    return CauseConnectClient("http://api.test/api/v1", transport=httpx.MockTransport(handler), **kwargs)


def _call(client, method, *args, **kwargs):
    async def run():
        async with client:
            return await getattr(client, method)(*args, **kwargs)
    return asyncio.run(run())


def test_error_body_is_mapped():
    def handler(request):
        return httpx.Response(
            400,
            json={"message": "Validation failed", "status": 400, "errors": [{"field": "amount", "message": "too small"}]},
        )

    with pytest.raises(ApiError) as exc_info:
        _call(_client(handler), "request", "POST", "/donation-create", json={})
    err = exc_info.value
    assert err.status == 400
    assert err.message == "Validation failed"
    assert err.errors == [{"field": "amount", "message": "too small"}]
    assert not err.is_network_error


def test_error_without_body_uses_reason_phrase():
    with pytest.raises(ApiError) as exc_info:
        _call(_client(lambda request: httpx.Response(502)), "request", "GET", "/event-list")
    assert exc_info.value.status == 502
    assert exc_info.value.message == "Bad Gateway"


def test_network_error_keeps_credentials():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler, token="access", refresh_token="refresh")
    with pytest.raises(ApiError) as exc_info:
        _call(client, "me")
    assert exc_info.value.status == 0
    assert exc_info.value.message == NETWORK_ERROR_MESSAGE
    assert exc_info.value.is_network_error
    assert (client.token, client.refresh_token) == ("access", "refresh")


def test_login_stores_session():
    def handler(request):
        assert request.url.path == "/api/v1/auth-login"
        assert "authorization" not in request.headers
        return httpx.Response(200, json={"user": USER, "token": "access", "refreshToken": "refresh"})

    client = _client(handler)
    session = _call(client, "login", "alice@example.org", "secret123")
    assert session.user.username == "alice"
    assert (client.token, client.refresh_token) == ("access", "refresh")


def test_unauthorized_refreshes_and_retries():
    seen = []

    def handler(request):
        seen.append((request.url.path, request.headers.get("authorization")))
        if request.url.path.endswith("/auth-refresh"):
            assert json.loads(request.content) == {"refreshToken": "refresh-1"}
            return httpx.Response(200, json={"token": "access-2", "refreshToken": "refresh-2"})
        if request.headers.get("authorization") == "Bearer access-2":
            return httpx.Response(200, json={"count": 3})
        return httpx.Response(401, json={"message": "Token expired", "status": 401})

    client = _client(handler, token="access-1", refresh_token="refresh-1")
    assert _call(client, "unread_count") == 3
    assert seen == [
        ("/api/v1/notification-unread-count", "Bearer access-1"),
        ("/api/v1/auth-refresh", None),
        ("/api/v1/notification-unread-count", "Bearer access-2"),
    ]
    assert (client.token, client.refresh_token) == ("access-2", "refresh-2")


def test_token_changed_in_flight_retries_without_refresh():
    client = None
    paths = []

    def handler(request):
        paths.append(request.url.path)
        if request.headers.get("authorization") == "Bearer stale":
            # another task renewed the session meanwhile
            client.token = "fresh"
            return httpx.Response(401, json={"message": "Token expired", "status": 401})
        return httpx.Response(200, json={"updated": 2})

    client = _client(handler, token="stale", refresh_token="refresh")
    assert _call(client, "mark_all_read") == 2
    assert "/api/v1/auth-refresh" not in paths
    assert len(paths) == 2


def test_refresh_rejected_ends_session():
    expired = []

    def handler(request):
        if request.url.path.endswith("/auth-refresh"):
            return httpx.Response(401, json={"message": "Invalid refresh token", "status": 401})
        return httpx.Response(401, json={"message": "Token expired", "status": 401})

    client = _client(handler, token="access", refresh_token="refresh", on_session_expired=lambda: expired.append(True))
    with pytest.raises(ApiError) as exc_info:
        _call(client, "me")
    assert exc_info.value.status == 401
    assert exc_info.value.message == "Invalid refresh token"
    assert expired == [True]
    assert client.token is None and client.refresh_token is None


def test_async_session_expired_callback_is_awaited():
    expired = []

    async def on_expired():
        expired.append(True)

    client = _client(
        lambda request: httpx.Response(401, json={"message": "nope", "status": 401}),
        token="access",
        refresh_token="refresh",
        on_session_expired=on_expired,
    )
    with pytest.raises(ApiError):
        _call(client, "me")
    assert expired == [True]


def test_unauthorized_without_token_is_not_retried():
    calls = []

    def handler(request):
        calls.append(request.url.path)
        return httpx.Response(401, json={"message": "Authentication required", "status": 401})

    with pytest.raises(ApiError) as exc_info:
        _call(_client(handler), "me")
    assert exc_info.value.message == "Authentication required"
    assert calls == ["/api/v1/auth-me"]


def test_list_events_query_parameters():
    def handler(request):
        params = request.url.params
        assert params["search"] == "water"
        assert params["tags"] == "health,education"
        assert params["requireUserTags"] == "true"
        assert "excludeUserTags" not in params
        return httpx.Response(
            200,
            json={"data": [], "pagination": {"page": 2, "limit": 5, "total": 0, "totalPages": 0}},
        )

    result = _call(
        _client(handler, token="access"),
        "list_events",
        page=2,
        limit=5,
        search="water",
        tags=["health", "education"],
        require_user_tags=True,
    )
    assert result.data == []
    assert result.pagination.page == 2
