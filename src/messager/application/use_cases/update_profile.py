"""
Use case for changing the authenticated user's profile picture.
"""

from typing import Optional

from messager.domain.entities import User
from messager.domain.exceptions import (
    NotFoundError,
    PayloadTooLargeError,
    ValidationError,
)
from messager.domain.repositories import IUserRepository
from messager.reporter import SystemReporter

DEFAULT_MAX_IMAGE_BYTES = 10 * 1024 * 1024


class UpdateProfileUseCase:
    """
    Stores a new profile picture reference.

    The reference is kept as given (for example an uploaded image URL
    or a data URI) and is held to the same size limit as message images.
    """

    def __init__(
        self,
        user_repository: IUserRepository,
        max_image_bytes: int = DEFAULT_MAX_IMAGE_BYTES,
        reporter: Optional[SystemReporter] = None,
    ):
        self.user_repository = user_repository
        self.max_image_bytes = max_image_bytes
        self.reporter = reporter

    async def execute(self, user_id: str, profile_pic: Optional[str]) -> User:
        """
        Replace a user's profile picture.

        Returns:
            Updated user

        Raises:
            ValidationError: Empty picture
            PayloadTooLargeError: Picture exceeds max_image_bytes
            NotFoundError: User no longer exists
        """
        if not profile_pic or not profile_pic.strip():
            raise ValidationError("Profile pic is required")

        size = len(profile_pic.encode("utf-8"))
        if size > self.max_image_bytes:
            raise PayloadTooLargeError(size, self.max_image_bytes)

        user = await self.user_repository.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)

        user.profile_pic = profile_pic
        user = await self.user_repository.update(user)

        if self.reporter:
            self.reporter.info(
                f"Profile picture updated: user={user_id} ({size} bytes)",
                context="UpdateProfile",
                verbose_level=2,
            )

        return user
