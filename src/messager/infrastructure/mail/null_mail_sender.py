"""
Mail sender used when no mail service is configured.
"""

from typing import Optional

from messager.domain.services import IMailSender
from messager.reporter import Emoji, SystemReporter


class NullMailSender(IMailSender):
    """Logs the mail that would have been sent."""

    def __init__(self, reporter: Optional[SystemReporter] = None):
        self.reporter = reporter

    async def send_welcome_email(self, email: str, full_name: str) -> bool:
        if self.reporter:
            self.reporter.debug(
                f"{Emoji.MESSAGE.MAIL} Mail service not configured, "
                f"skipping welcome mail to {email}",
                context="NullMailSender",
            )
        return False

    async def close(self) -> None:
        return None
