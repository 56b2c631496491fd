"""
Async HTTP session client for the Messager API.

Holds the access token in memory and the refresh token in the cookie
jar. A request rejected with 401 triggers one refresh and one retry;
concurrent rejections share a single in-flight refresh.
"""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Union

import httpx

from messager.client.conversation import Conversation, ConversationEntry

logger = logging.getLogger(__name__)

AUTH_PATHS = frozenset(
    {
        "/api/auth/login",
        "/api/auth/signup",
        "/api/auth/refresh",
        "/api/auth/logout",
    }
)

SessionExpiredCallback = Callable[[], Union[None, Awaitable[None]]]


class SessionClientError(Exception):
    """
    Error returned by the API or raised by the client.

    Attributes:
        message: Human-readable message
        code: Server error code (e.g. "INVALID_CREDENTIALS")
        status_code: HTTP status, if a response was received
    """

    def __init__(
        self,
        message: str,
        code: str = "CLIENT_ERROR",
        status_code: Optional[int] = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        super().__init__(message)


class SessionExpiredError(SessionClientError):
    """Refresh failed; the user has to log in again."""

    def __init__(self, message: str = "Session expired"):
        super().__init__(message, code="SESSION_EXPIRED", status_code=401)


class SendFailedError(SessionClientError):
    """An optimistic send was rolled back."""


class SessionClient:
    """
    HTTP client that keeps a user session alive.

    Attributes:
        base_url: API base URL
        profile: Public profile of the logged-in user, if any

    Examples:
        async with SessionClient("http://localhost:3000") as client:
            await client.login("ada@example.com", "secret1")
            chats = (await client.request("GET", "/api/messages/chats")).json()
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        on_session_expired: Optional[SessionExpiredCallback] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize session client.

        Args:
            base_url: API base URL (e.g., "http://localhost:3000")
            timeout: HTTP request timeout in seconds
            on_session_expired: Called once when the session cannot be renewed
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.on_session_expired = on_session_expired
        self.profile: Optional[Dict[str, Any]] = None

        self._client = httpx.AsyncClient(
            base_url=self.base_url, timeout=timeout, transport=transport
        )
        self._access_token: Optional[str] = None
        self._refresh_lock = asyncio.Lock()
        self._expired_signalled = False

    @property
    def access_token(self) -> Optional[str]:
        return self._access_token

    @property
    def is_authenticated(self) -> bool:
        return self._access_token is not None

    # ============================================================
    # Auth
    # ============================================================

    async def signup(self, full_name: str, email: str, password: str) -> Dict[str, Any]:
        """Create an account and start a session."""
        return await self._start_session(
            "/api/auth/signup",
            {"fullName": full_name, "email": email, "password": password},
        )

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        """
        Start a session.

        Returns:
            Public profile of the user

        Raises:
            SessionClientError: Credentials rejected
        """
        return await self._start_session(
            "/api/auth/login", {"email": email, "password": password}
        )

    async def logout(self) -> None:
        """End the session. Local state is cleared even if the call fails."""
        try:
            await self._client.post("/api/auth/logout")
        finally:
            self._access_token = None
            self.profile = None

    async def _start_session(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._client.post(path, json=body)
        if not response.is_success:
            raise self._error_from(response)

        data = response.json()
        self._access_token = data["accessToken"]
        self._expired_signalled = False
        self.profile = {
            key: value
            for key, value in data.items()
            if key not in ("accessToken", "refreshToken")
        }
        logger.debug(f"Session started for {self.profile.get('_id')}")
        return self.profile

    # ============================================================
    # Requests
    # ============================================================

    async def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """
        Send an authenticated request.

        On 401 (outside the auth endpoints) the session is refreshed once
        and the request retried once. The retried response is returned
        as-is, even if it is another 401.

        Raises:
            SessionExpiredError: Refresh was rejected
        """
        sent_token = self._access_token
        response = await self._send(method, path, sent_token, **kwargs)

        if response.status_code != 401 or path in AUTH_PATHS:
            return response

        if not await self._refresh(sent_token):
            raise SessionExpiredError()

        return await self._send(method, path, self._access_token, **kwargs)

    async def _send(
        self, method: str, path: str, token: Optional[str], **kwargs: Any
    ) -> httpx.Response:
        headers = dict(kwargs.pop("headers", None) or {})
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return await self._client.request(method, path, headers=headers, **kwargs)

    async def _refresh(self, stale_token: Optional[str]) -> bool:
        """
        Refresh the access token, at most one refresh in flight.

        Args:
            stale_token: Token the failed request carried

        Returns:
            True if a usable token is now held
        """
        async with self._refresh_lock:
            # Another request already refreshed or already gave up
            if self._access_token is not None and self._access_token != stale_token:
                return True
            if self._expired_signalled:
                return False

            response = await self._client.post("/api/auth/refresh")
            if response.is_success:
                self._access_token = response.json()["accessToken"]
                logger.debug("Access token refreshed")
                return True

            logger.info(f"Refresh rejected: HTTP {response.status_code}")
            self._access_token = None
            self.profile = None
            await self._signal_expired()
            return False

    async def _signal_expired(self) -> None:
        if self._expired_signalled:
            return
        self._expired_signalled = True
        if self.on_session_expired is None:
            return
        result = self.on_session_expired()
        if inspect.isawaitable(result):
            await result

    # ============================================================
    # Messages
    # ============================================================

    async def send_message(
        self,
        conversation: Conversation,
        recipient_id: str,
        text: Optional[str] = None,
        image: Optional[str] = None,
    ) -> ConversationEntry:
        """
        Send a message with an optimistic entry in the conversation.

        Returns:
            The confirmed entry

        Raises:
            SendFailedError: Send rejected or failed; the entry was removed
        """
        correlation_id = conversation.add_optimistic(text=text, image=image)
        body = {"text": text, "image": image, "clientMessageId": correlation_id}

        try:
            response = await self.request(
                "POST", f"/api/messages/send/{recipient_id}", json=body
            )
        except SessionExpiredError as e:
            conversation.rollback(correlation_id)
            raise SendFailedError(e.message, code=e.code, status_code=401) from e
        except httpx.HTTPError as e:
            conversation.rollback(correlation_id)
            raise SendFailedError(f"Network error: {e}", code="NETWORK_ERROR") from e

        if not response.is_success:
            conversation.rollback(correlation_id)
            error = self._error_from(response)
            raise SendFailedError(
                error.message, code=error.code, status_code=error.status_code
            )

        return conversation.confirm(correlation_id, response.json()["message"])

    async def fetch_conversation(self, peer_id: str) -> Conversation:
        """Load history with a peer into a new Conversation."""
        response = await self.request("GET", f"/api/messages/{peer_id}")
        if not response.is_success:
            raise self._error_from(response)

        owner_id = (self.profile or {}).get("_id", "")
        conversation = Conversation(owner_id=owner_id, peer_id=peer_id)
        for message in response.json():
            conversation.apply_incoming(message)
        return conversation

    # ============================================================
    # Helpers / lifecycle
    # ============================================================

    @staticmethod
    def _error_from(response: httpx.Response) -> SessionClientError:
        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}
        return SessionClientError(
            data.get("message") or f"HTTP {response.status_code}",
            code=data.get("error") or "HTTP_ERROR",
            status_code=response.status_code,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
