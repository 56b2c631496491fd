"""
Message delivery exceptions.
"""

from messager.domain.exceptions.base import MessagerError


class PayloadTooLargeError(MessagerError):
    """Raised when a message attachment exceeds the configured size."""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(
            f"Image is too large ({size} bytes, limit {limit} bytes)",
            code="PAYLOAD_TOO_LARGE",
        )
