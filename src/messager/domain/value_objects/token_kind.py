"""
TokenKind value object.
"""

from enum import Enum


class TokenKind(str, Enum):
    """Kind of signed credential, stored in the token's `type` claim."""

    ACCESS = "access"
    REFRESH = "refresh"
