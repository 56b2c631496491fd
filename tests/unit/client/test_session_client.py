"""
Unit tests for SessionClient.

Runs the client against an httpx.MockTransport that imitates the auth
and message endpoints, including access token expiry.
"""

import asyncio
import json
from typing import List

import httpx
import pytest

from messager.client import (
    Conversation,
    SendFailedError,
    SessionClient,
    SessionClientError,
    SessionExpiredError,
)


class FakeApi:
    """
    In-process stand-in for the Messager API.

    Exactly one access token is valid at a time; `expire()` invalidates
    it. Refresh succeeds while `refresh_ok` is True and the refresh
    cookie is present.
    """

    def __init__(self):
        self.generation = 1
        self.refresh_ok = True
        self.retry_status = None
        self.send_status = 201
        self.refresh_calls = 0
        self.calls: List[httpx.Request] = []

    @property
    def valid_token(self) -> str:
        return f"access-{self.generation}"

    def expire(self) -> None:
        self.generation += 1

    def _authorized(self, request: httpx.Request) -> bool:
        return request.headers.get("authorization") == f"Bearer {self.valid_token}"

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        path = request.url.path

        if path == "/api/auth/login":
            body = json.loads(request.content)
            if body.get("password") != "secret1":
                return httpx.Response(
                    400,
                    json={
                        "error": "INVALID_CREDENTIALS",
                        "message": "Invalid credentials",
                    },
                )
            return httpx.Response(
                200,
                json={
                    "_id": "alice",
                    "fullName": "Alice",
                    "email": "alice@example.com",
                    "profilePic": "",
                    "createdAt": "2024-01-01T12:00:00+00:00",
                    "accessToken": self.valid_token,
                    "refreshToken": "refresh-1",
                },
                headers={
                    "set-cookie": "refresh_token=refresh-1; Path=/api/auth; HttpOnly"
                },
            )

        if path == "/api/auth/refresh":
            self.refresh_calls += 1
            if not self.refresh_ok or "refresh_token=" not in request.headers.get(
                "cookie", ""
            ):
                return httpx.Response(
                    401, json={"error": "TOKEN_EXPIRED", "message": "Token expired"}
                )
            self.expire()
            return httpx.Response(
                200,
                json={"accessToken": self.valid_token, "refreshToken": "refresh-2"},
            )

        if path == "/api/auth/logout":
            return httpx.Response(200, json={"message": "Logged out successfully"})

        # Protected routes; yield so concurrent requests overlap
        await asyncio.sleep(0.01)
        if not self._authorized(request):
            return httpx.Response(
                401, json={"error": "TOKEN_EXPIRED", "message": "Token expired"}
            )
        if self.retry_status and self.refresh_calls:
            return httpx.Response(self.retry_status, json={"error": "UNAUTHENTICATED"})

        if path.startswith("/api/messages/send/"):
            if self.send_status != 201:
                return httpx.Response(
                    self.send_status,
                    json={"error": "PAYLOAD_TOO_LARGE", "message": "Image is too large"},
                )
            body = json.loads(request.content)
            message = {
                "_id": "m-1",
                "senderId": "alice",
                "receiverId": path.rsplit("/", 1)[-1],
                "text": body.get("text"),
                "image": body.get("image"),
                "createdAt": "2024-01-01T12:00:00+00:00",
                "reactions": [],
                "status": "delivered",
                "clientMessageId": body.get("clientMessageId"),
            }
            return httpx.Response(
                201,
                json={
                    "message": message,
                    "status": "delivered",
                    "clientMessageId": body.get("clientMessageId"),
                },
            )

        if path == "/api/messages/bob":
            return httpx.Response(
                200,
                json=[
                    {
                        "_id": "m-0",
                        "senderId": "bob",
                        "receiverId": "alice",
                        "text": "hey",
                        "image": None,
                        "createdAt": "2024-01-01T11:00:00+00:00",
                        "reactions": [],
                        "status": "delivered",
                        "clientMessageId": None,
                    }
                ],
            )

        return httpx.Response(200, json={"ok": True})

    def refresh_requests(self) -> List[httpx.Request]:
        return [r for r in self.calls if r.url.path == "/api/auth/refresh"]


@pytest.fixture
def api() -> FakeApi:
    return FakeApi()


@pytest.fixture
async def session(api):
    expired = []
    client = SessionClient(
        "http://testserver",
        on_session_expired=lambda: expired.append(True),
        transport=httpx.MockTransport(api),
    )
    client.expired_signals = expired
    yield client
    await client.close()


class TestSessionLifecycle:
    """Login, logout and token handling."""

    async def test_login_stores_token_in_memory(self, session, api):
        """Test login keeps the access token and profile."""
        profile = await session.login("alice@example.com", "secret1")

        assert session.access_token == api.valid_token
        assert session.is_authenticated
        assert profile["_id"] == "alice"
        assert "accessToken" not in profile

    async def test_bad_login_raises_with_code(self, session):
        """Test rejected credentials surface the server error code."""
        with pytest.raises(SessionClientError) as exc_info:
            await session.login("alice@example.com", "wrong")

        assert exc_info.value.code == "INVALID_CREDENTIALS"
        assert exc_info.value.status_code == 400
        assert session.access_token is None

    async def test_request_sends_bearer(self, session, api):
        """Test authenticated requests carry the access token."""
        await session.login("alice@example.com", "secret1")

        response = await session.request("GET", "/api/messages/chats")

        assert response.status_code == 200
        assert api.calls[-1].headers["authorization"] == f"Bearer {api.valid_token}"

    async def test_logout_clears_token(self, session):
        """Test logout drops in-memory state."""
        await session.login("alice@example.com", "secret1")

        await session.logout()

        assert session.access_token is None
        assert session.profile is None


class TestRefreshThenRetry:
    """401 recovery behaviour."""

    async def test_refresh_once_then_retry(self, session, api):
        """Test an expired token triggers one refresh and one retry."""
        await session.login("alice@example.com", "secret1")
        api.expire()

        response = await session.request("GET", "/api/messages/chats")

        assert response.status_code == 200
        assert api.refresh_calls == 1
        assert "refresh_token=refresh-1" in api.refresh_requests()[0].headers["cookie"]
        assert session.access_token == api.valid_token
        chats_calls = [c for c in api.calls if c.url.path == "/api/messages/chats"]
        assert len(chats_calls) == 2

    async def test_retry_401_returned_as_is(self, session, api):
        """Test a second 401 after refresh is returned, never refreshed again."""
        await session.login("alice@example.com", "secret1")
        api.expire()
        api.retry_status = 401

        response = await session.request("GET", "/api/messages/chats")

        assert response.status_code == 401
        assert api.refresh_calls == 1
        assert session.expired_signals == []

    async def test_auth_endpoints_not_recovered(self, session, api):
        """Test 401 from an auth endpoint is returned without refreshing."""
        api.refresh_ok = False

        response = await session.request("POST", "/api/auth/refresh")

        assert response.status_code == 401
        assert api.refresh_calls == 1

    async def test_refresh_failure_expires_session_once(self, session, api):
        """Test failed refresh clears the token and signals exactly once."""
        await session.login("alice@example.com", "secret1")
        api.expire()
        api.refresh_ok = False

        with pytest.raises(SessionExpiredError):
            await session.request("GET", "/api/messages/chats")
        with pytest.raises(SessionExpiredError):
            await session.request("GET", "/api/messages/contacts")

        assert session.access_token is None
        assert session.expired_signals == [True]
        assert api.refresh_calls == 1

    async def test_login_rearms_signal(self, session, api):
        """Test a new login lets the next expiry signal again."""
        await session.login("alice@example.com", "secret1")
        api.expire()
        api.refresh_ok = False
        with pytest.raises(SessionExpiredError):
            await session.request("GET", "/api/messages/chats")

        await session.login("alice@example.com", "secret1")
        api.expire()
        with pytest.raises(SessionExpiredError):
            await session.request("GET", "/api/messages/chats")

        assert session.expired_signals == [True, True]

    async def test_concurrent_401s_share_one_refresh(self, session, api):
        """Test concurrent failing requests trigger a single refresh."""
        await session.login("alice@example.com", "secret1")
        api.expire()

        responses = await asyncio.gather(
            *(session.request("GET", "/api/messages/chats") for _ in range(5))
        )

        assert [r.status_code for r in responses] == [200] * 5
        assert api.refresh_calls == 1

    async def test_async_expiry_callback(self, api):
        """Test on_session_expired may be a coroutine function."""
        calls = []

        async def on_expired():
            calls.append(True)

        client = SessionClient(
            "http://testserver",
            on_session_expired=on_expired,
            transport=httpx.MockTransport(api),
        )
        api.refresh_ok = False
        try:
            with pytest.raises(SessionExpiredError):
                await client.request("GET", "/api/messages/chats")
        finally:
            await client.close()

        assert calls == [True]


class TestOptimisticSend:
    """send_message with optimistic conversation entries."""

    async def test_send_confirms_entry(self, session, api):
        """Test a successful send replaces the optimistic entry."""
        await session.login("alice@example.com", "secret1")
        conversation = Conversation(owner_id="alice", peer_id="bob")

        entry = await session.send_message(conversation, "bob", text="hi")

        assert entry.server_id == "m-1"
        assert entry.status == "delivered"
        assert not entry.is_pending
        assert len(conversation.entries) == 1
        sent = json.loads(api.calls[-1].content)
        assert sent["clientMessageId"] == entry.client_message_id

    async def test_send_failure_rolls_back(self, session, api):
        """Test a rejected send removes the optimistic entry."""
        await session.login("alice@example.com", "secret1")
        api.send_status = 413
        conversation = Conversation(owner_id="alice", peer_id="bob")

        with pytest.raises(SendFailedError) as exc_info:
            await session.send_message(conversation, "bob", image="x" * 10)

        assert exc_info.value.code == "PAYLOAD_TOO_LARGE"
        assert exc_info.value.status_code == 413
        assert conversation.entries == []

    async def test_send_network_error_rolls_back(self):
        """Test transport failures roll back too."""

        def broken(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = SessionClient("http://testserver", transport=httpx.MockTransport(broken))
        conversation = Conversation(owner_id="alice", peer_id="bob")
        try:
            with pytest.raises(SendFailedError) as exc_info:
                await client.send_message(conversation, "bob", text="hi")
        finally:
            await client.close()

        assert exc_info.value.code == "NETWORK_ERROR"
        assert conversation.entries == []

    async def test_send_after_session_expiry_rolls_back(self, session, api):
        """Test an expired session during send rolls back and reports it."""
        await session.login("alice@example.com", "secret1")
        api.expire()
        api.refresh_ok = False
        conversation = Conversation(owner_id="alice", peer_id="bob")

        with pytest.raises(SendFailedError) as exc_info:
            await session.send_message(conversation, "bob", text="hi")

        assert exc_info.value.code == "SESSION_EXPIRED"
        assert conversation.entries == []

    async def test_fetch_conversation(self, session):
        """Test history is loaded into a Conversation."""
        await session.login("alice@example.com", "secret1")

        conversation = await session.fetch_conversation("bob")

        assert conversation.owner_id == "alice"
        assert [e.server_id for e in conversation.entries] == ["m-0"]
