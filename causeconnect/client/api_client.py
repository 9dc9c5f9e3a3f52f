"""
CauseConnect API Client

Thin typed wrapper around httpx.AsyncClient used by frontends, scripts
and the test-suite.

Error handling:
- Every non-2xx response raises ApiError(message, status, errors), parsed
  from the ``{message, status, errors}`` body.
- A request that never got a response raises ApiError with status 0.
  Stored credentials are left alone in that case.
- A 401 waits ``auth_check_delay`` seconds, then:
    * retries once if the token changed while the request was in flight
      (another task refreshed the session), otherwise
    * refreshes once and retries.
  Only a 401 from the refresh endpoint itself ends the session.
"""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union
from uuid import UUID

import httpx

from causeconnect.schemas.auth import TokenRefreshResponse, TokenResponse, UserResponse
from causeconnect.schemas.comment import CommentAwardResponse, CommentLikeResponse, CommentResponse
from causeconnect.schemas.donation import DonationCreateResponse
from causeconnect.schemas.event import BookmarkResponse, EventListResponse, SupportResponse
from causeconnect.schemas.notification import NotificationListResponse
from causeconnect.schemas.post import ParticipateResponse, PostBookmarkResponse, PostLikeResponse
from causeconnect.schemas.squad import SquadResponse
from causeconnect.schemas.user import FollowResponse

logger = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = "Network error. Please check your connection."

SessionExpiredCallback = Callable[[], Union[None, Awaitable[None]]]
Id = Union[str, UUID]


class ApiError(Exception):
    """Uniform error raised for every failed API call."""

    def __init__(self, message: str, status: int, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.errors = errors

    @property
    def is_network_error(self) -> bool:
        return self.status == 0

    def __repr__(self) -> str:
        return f"ApiError(status={self.status}, message={self.message!r})"


class CauseConnectClient:

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        refresh_token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        auth_check_delay: float = 1.0,
        on_session_expired: Optional[SessionExpiredCallback] = None,
        timeout: float = 30.0,
    ):
        self.token = token
        self.refresh_token = refresh_token
        self.auth_check_delay = auth_check_delay
        self.on_session_expired = on_session_expired
        self._http = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)

    async def __aenter__(self) -> "CauseConnectClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # ============================================================
    # Transport
    # ============================================================
    def _headers(self, token: Optional[str]) -> Dict[str, str]:
        return {"Authorization": f"Bearer {token}"} if token else {}

    async def _send(self, method: str, path: str, token: Optional[str], **kwargs) -> httpx.Response:
        try:
            return await self._http.request(method, path, headers=self._headers(token), **kwargs)
        except httpx.RequestError as e:
            logger.warning(f"{method} {path} failed without a response: {e}")
            raise ApiError(NETWORK_ERROR_MESSAGE, status=0) from e

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if response.is_success:
            return

        message = response.reason_phrase or "Request failed"
        errors = None
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            message = body.get("message") or message
            errors = body.get("errors")
        raise ApiError(message, status=response.status_code, errors=errors)

    async def request(self, method: str, path: str, **kwargs) -> Any:
        """
        Send a request and return the decoded JSON body.

        Raises:
            ApiError: Non-2xx response or no response at all
        """
        sent_with = self.token
        response = await self._send(method, path, sent_with, **kwargs)

        if response.status_code == 401 and sent_with:
            await asyncio.sleep(self.auth_check_delay)

            if self.token and self.token != sent_with:
                response = await self._send(method, path, self.token, **kwargs)
            elif await self._refresh_session():
                response = await self._send(method, path, self.token, **kwargs)

        self._raise_for_status(response)
        if not response.content:
            return None
        return response.json()

    async def _refresh_session(self) -> bool:
        """Exchange the refresh token once. False when the session could not be renewed."""
        if not self.refresh_token:
            return False

        response = await self._send(
            "POST", "/auth-refresh", None, json={"refreshToken": self.refresh_token}
        )
        if response.status_code == 401:
            logger.info("Session expired; clearing credentials")
            self.clear_credentials()
            if self.on_session_expired is not None:
                result = self.on_session_expired()
                if inspect.isawaitable(result):
                    await result
            self._raise_for_status(response)

        if not response.is_success:
            return False

        tokens = TokenRefreshResponse.model_validate(response.json())
        self.token = tokens.token
        self.refresh_token = tokens.refresh_token
        return True

    def clear_credentials(self) -> None:
        self.token = None
        self.refresh_token = None

    # ============================================================
    # Auth
    # ============================================================
    def _store_session(self, body: Any) -> TokenResponse:
        session = TokenResponse.model_validate(body)
        self.token = session.token
        self.refresh_token = session.refresh_token
        return session

    async def login(self, email: str, password: str) -> TokenResponse:
        body = await self.request("POST", "/auth-login", json={"email": email, "password": password})
        return self._store_session(body)

    async def register(
        self,
        first_name: str,
        last_name: str,
        email: str,
        username: str,
        password: str,
    ) -> TokenResponse:
        body = await self.request(
            "POST",
            "/auth-register",
            json={
                "firstName": first_name,
                "lastName": last_name,
                "email": email,
                "username": username,
                "password": password,
                "confirmPassword": password,
            },
        )
        return self._store_session(body)

    async def me(self) -> UserResponse:
        return UserResponse.model_validate(await self.request("GET", "/auth-me"))

    async def logout(self) -> None:
        await self.request("POST", "/auth-logout")
        self.clear_credentials()

    # ============================================================
    # Users
    # ============================================================
    async def follow(self, user_id: Id) -> FollowResponse:
        body = await self.request("POST", "/user-follow", json={"userId": str(user_id)})
        return FollowResponse.model_validate(body)

    # ============================================================
    # Events
    # ============================================================
    async def list_events(
        self,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        tags: Optional[List[str]] = None,
        user_id: Optional[Id] = None,
        exclude_user: Optional[Id] = None,
        require_user_tags: bool = False,
        exclude_user_tags: bool = False,
    ) -> EventListResponse:
        params: Dict[str, Any] = {"page": page, "limit": limit}
        if search:
            params["search"] = search
        if tags:
            params["tags"] = ",".join(tags)
        if user_id:
            params["userId"] = str(user_id)
        if exclude_user:
            params["excludeUser"] = str(exclude_user)
        if require_user_tags:
            params["requireUserTags"] = "true"
        if exclude_user_tags:
            params["excludeUserTags"] = "true"
        return EventListResponse.model_validate(await self.request("GET", "/event-list", params=params))

    async def support_event(self, event_id: Id) -> SupportResponse:
        body = await self.request("POST", "/event-support", json={"eventId": str(event_id)})
        return SupportResponse.model_validate(body)

    async def unsupport_event(self, event_id: Id) -> SupportResponse:
        body = await self.request("DELETE", "/event-unsupport", params={"eventId": str(event_id)})
        return SupportResponse.model_validate(body)

    async def bookmark_event(self, event_id: Id) -> BookmarkResponse:
        body = await self.request("POST", "/event-bookmark", json={"eventId": str(event_id)})
        return BookmarkResponse.model_validate(body)

    # ============================================================
    # Posts
    # ============================================================
    async def like_post(self, post_id: Id) -> PostLikeResponse:
        body = await self.request("POST", "/post-like", json={"postId": str(post_id)})
        return PostLikeResponse.model_validate(body)

    async def bookmark_post(self, post_id: Id) -> PostBookmarkResponse:
        body = await self.request("POST", "/post-bookmark", json={"postId": str(post_id)})
        return PostBookmarkResponse.model_validate(body)

    async def participate_post(self, post_id: Id) -> ParticipateResponse:
        body = await self.request("POST", "/post-participate", json={"postId": str(post_id)})
        return ParticipateResponse.model_validate(body)

    # ============================================================
    # Comments
    # ============================================================
    async def create_comment(
        self,
        content: str,
        event_id: Optional[Id] = None,
        post_id: Optional[Id] = None,
        parent_id: Optional[Id] = None,
    ) -> CommentResponse:
        payload: Dict[str, Any] = {"content": content}
        if event_id:
            payload["eventId"] = str(event_id)
        if post_id:
            payload["postId"] = str(post_id)
        if parent_id:
            payload["parentId"] = str(parent_id)
        return CommentResponse.model_validate(await self.request("POST", "/comment-create", json=payload))

    async def like_comment(self, comment_id: Id) -> CommentLikeResponse:
        body = await self.request("POST", "/comment-like", json={"commentId": str(comment_id)})
        return CommentLikeResponse.model_validate(body)

    async def award_comment(self, comment_id: Id) -> CommentAwardResponse:
        body = await self.request("POST", "/comment-award", json={"commentId": str(comment_id)})
        return CommentAwardResponse.model_validate(body)

    # ============================================================
    # Donations
    # ============================================================
    async def donate(
        self,
        event_id: Id,
        amount: float,
        payment_method: str = "card",
        is_anonymous: bool = False,
        is_recurring: bool = False,
        message: Optional[str] = None,
    ) -> DonationCreateResponse:
        payload: Dict[str, Any] = {
            "eventId": str(event_id),
            "amount": amount,
            "paymentMethod": payment_method,
            "isAnonymous": is_anonymous,
            "isRecurring": is_recurring,
        }
        if message:
            payload["message"] = message
        return DonationCreateResponse.model_validate(await self.request("POST", "/donation-create", json=payload))

    # ============================================================
    # Notifications
    # ============================================================
    async def list_notifications(
        self,
        page: int = 1,
        limit: int = 20,
        notification_type: Optional[str] = None,
    ) -> NotificationListResponse:
        params: Dict[str, Any] = {"page": page, "limit": limit}
        if notification_type:
            params["type"] = notification_type
        return NotificationListResponse.model_validate(
            await self.request("GET", "/notification-list", params=params)
        )

    async def unread_count(self) -> int:
        body = await self.request("GET", "/notification-unread-count")
        return body["count"]

    async def mark_read(self, notification_id: Id) -> bool:
        body = await self.request("PATCH", "/notification-read", params={"id": str(notification_id)})
        return body["success"]

    async def mark_all_read(self) -> int:
        body = await self.request("PATCH", "/notification-read-all")
        return body["updated"]

    # ============================================================
    # Squads
    # ============================================================
    async def join_squad(self, squad_id: Id) -> SquadResponse:
        body = await self.request("POST", "/squad-join", json={"squadId": str(squad_id)})
        return SquadResponse.model_validate(body)

    async def leave_squad(self, squad_id: Id) -> None:
        await self.request("DELETE", "/squad-leave", params={"squadId": str(squad_id)})
