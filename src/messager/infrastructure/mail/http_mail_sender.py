"""
HTTP client for the external mail-sending service.

Used after signup to deliver the welcome email. Delivery problems are
reported through the return value, never raised, so they cannot fail
a signup.
"""

import asyncio
from typing import Any, Dict, Optional

import httpx

from messager.domain.services import IMailSender
from messager.reporter import Emoji, SystemReporter


class HttpMailSender(IMailSender):
    """
    Posts mail requests to the mail service.

    Attributes:
        service_url: Base URL of the mail service
        sender_name: Display name used in the From header
        client_url: Link included in the welcome template
        timeout: HTTP request timeout in seconds
        max_retries: Maximum attempts per mail
    """

    def __init__(
        self,
        service_url: str,
        sender_name: str = "Messager",
        client_url: str = "http://localhost:5173",
        timeout: float = 5.0,
        max_retries: int = 3,
        api_key: Optional[str] = None,
        reporter: Optional[SystemReporter] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.service_url = service_url.rstrip("/")
        self.sender_name = sender_name
        self.client_url = client_url
        self.timeout = timeout
        self.max_retries = max_retries
        self.api_key = api_key
        self.reporter = reporter
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers=headers,
                transport=self._transport,
            )
        return self._client

    async def send_welcome_email(self, email: str, full_name: str) -> bool:
        payload = {
            "template": "welcome",
            "to": email,
            "from_name": self.sender_name,
            "data": {"name": full_name, "client_url": self.client_url},
        }
        return await self._send(payload)

    async def _send(self, payload: Dict[str, Any]) -> bool:
        url = f"{self.service_url}/send"

        for attempt in range(self.max_retries):
            try:
                response = await self.client.post(url, json=payload)

                if response.is_success:
                    if self.reporter:
                        self.reporter.info(
                            f"{Emoji.MESSAGE.MAIL} Mail sent: "
                            f"template={payload['template']}, to={payload['to']}",
                            context="HttpMailSender",
                            verbose_level=2,
                        )
                    return True

                if response.is_client_error:
                    self._warn(
                        f"Mail rejected: HTTP {response.status_code}, "
                        f"body: {response.text[:200]}"
                    )
                    return False

                self._warn(
                    f"Mail failed (attempt {attempt + 1}/{self.max_retries}): "
                    f"HTTP {response.status_code}"
                )

            except httpx.TimeoutException:
                self._warn(f"Mail timeout (attempt {attempt + 1}/{self.max_retries})")

            except httpx.HTTPError as e:
                self._warn(
                    f"Mail transport error "
                    f"(attempt {attempt + 1}/{self.max_retries}): {e}"
                )

            if attempt < self.max_retries - 1:
                await asyncio.sleep(0.1 * (2**attempt))

        if self.reporter:
            self.reporter.error(
                f"{Emoji.ERROR.ERROR} Failed to send {payload['template']} mail "
                f"to {payload['to']} after {self.max_retries} attempts",
                context="HttpMailSender",
            )
        return False

    def _warn(self, msg: str) -> None:
        if self.reporter:
            self.reporter.warning(msg, context="HttpMailSender", verbose_level=2)

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
