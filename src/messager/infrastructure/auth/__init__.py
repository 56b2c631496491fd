"""
Authentication infrastructure for Messager.
"""

from messager.infrastructure.auth.password_hasher import Argon2PasswordHasher
from messager.infrastructure.auth.token_service import TokenService, utc_now

__all__ = ["Argon2PasswordHasher", "TokenService", "utc_now"]
