"""
MessagePayload value object - text and/or a single image reference.
"""

from dataclasses import dataclass
from typing import Optional

from messager.domain.exceptions import PayloadTooLargeError, ValidationError


@dataclass(frozen=True)
class MessagePayload:
    """
    Content of a chat message.

    At least one of text or image must be present. Text is stored
    stripped; an all-whitespace text counts as absent.
    """

    text: Optional[str] = None
    image: Optional[str] = None

    def __post_init__(self):
        """Normalize and require content."""
        text = self.text.strip() if self.text else None
        image = self.image or None
        object.__setattr__(self, "text", text or None)
        object.__setattr__(self, "image", image)

        if self.text is None and self.image is None:
            raise ValidationError("Text or image is required")

    @property
    def image_size(self) -> int:
        """Size of the image reference in bytes."""
        return len(self.image.encode("utf-8")) if self.image else 0

    def check_limits(self, max_text_length: int, max_image_bytes: int) -> None:
        """
        Enforce size limits.

        Raises:
            ValidationError: If text is longer than max_text_length
            PayloadTooLargeError: If the image exceeds max_image_bytes
        """
        if self.text and len(self.text) > max_text_length:
            raise ValidationError(
                f"Message text too long (max {max_text_length} characters)"
            )

        if self.image_size > max_image_bytes:
            raise PayloadTooLargeError(self.image_size, max_image_bytes)
