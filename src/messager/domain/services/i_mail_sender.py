"""
Mail sender service interface.

Outbound email is delegated to an external mail-sending service.
"""

from abc import ABC, abstractmethod


class IMailSender(ABC):
    """Sends transactional emails."""

    @abstractmethod
    async def send_welcome_email(self, email: str, full_name: str) -> bool:
        """
        Send the welcome email after signup.

        Returns:
            True if the mail service accepted the message
        """

    async def close(self) -> None:
        """Release network resources. No-op by default."""
        return None
