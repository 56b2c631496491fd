"""
Outbound mail adapters.
"""

from messager.infrastructure.mail.http_mail_sender import HttpMailSender
from messager.infrastructure.mail.null_mail_sender import NullMailSender

__all__ = ["HttpMailSender", "NullMailSender"]
