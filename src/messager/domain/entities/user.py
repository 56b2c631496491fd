"""
User entity - a registered chat participant.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import uuid4


class User:
    """
    User entity.

    Attributes:
        id: Opaque user identifier
        full_name: Display name
        email: Normalized (lowercase) email address
        password_hash: Argon2 hash, never exposed
        profile_pic: Profile picture reference (may be empty)
        created_at: Registration timestamp
    """

    def __init__(
        self,
        full_name: str,
        email: str,
        password_hash: str,
        profile_pic: str = "",
        user_id: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ):
        self.id: str = user_id or uuid4().hex
        self.full_name = full_name
        self.email = email
        self.password_hash = password_hash
        self.profile_pic = profile_pic
        self.created_at: datetime = created_at or datetime.now(timezone.utc)

    def to_public_dict(self) -> Dict[str, Any]:
        """Serialize without secret material."""
        return {
            "_id": self.id,
            "fullName": self.full_name,
            "email": self.email,
            "profilePic": self.profile_pic,
            "createdAt": self.created_at.isoformat(),
        }

    def __eq__(self, other) -> bool:
        if not isinstance(other, User):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email})"
