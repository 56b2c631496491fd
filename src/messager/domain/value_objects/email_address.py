"""
EmailAddress value object - normalized email with format validation.
"""

import re
from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class EmailAddress:
    """
    Value object representing a validated email address.

    Stored lowercased and stripped so lookups are case-insensitive.
    """

    address: str

    PATTERN: ClassVar[re.Pattern] = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

    def __post_init__(self):
        """Normalize and validate on creation."""
        normalized = (self.address or "").strip().lower()
        if not self.PATTERN.match(normalized):
            raise ValueError("Invalid email format")
        object.__setattr__(self, "address", normalized)

    @property
    def value(self) -> str:
        """Get normalized address."""
        return self.address

    def __str__(self) -> str:
        return self.address
