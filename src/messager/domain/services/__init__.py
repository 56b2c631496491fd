"""
Domain services package.
"""

from messager.domain.services.i_mail_sender import IMailSender
from messager.domain.services.i_password_hasher import IPasswordHasher

__all__ = ["IMailSender", "IPasswordHasher"]
