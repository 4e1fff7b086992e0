"""
User Entity - A registered user profile.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Optional
from chatsync.config.settings import Config
from chatsync.domain.value_objects.principal_id import PrincipalId
from chatsync.domain.value_objects.timestamp import Timestamp


@dataclass(frozen=True)
class User:
    # Required fields (no defaults) - must come first
    principal: PrincipalId
    username: str
    created_at: Timestamp
    # Optional fields (with defaults) - must come last
    bio: Optional[str] = None
    profile_picture: Optional[str] = None

    def __post_init__(self):
        if not self.username:
            raise ValueError("Username cannot be empty")
        if self.bio is not None and len(self.bio) > Config.USER_BIO_MAX_LENGTH:
            raise ValueError(
                f"Bio cannot exceed {Config.USER_BIO_MAX_LENGTH} characters"
            )

    def with_bio(self, bio: Optional[str]) -> User:
        return replace(self, bio=bio or None)

    def with_profile_picture(self, path: Optional[str]) -> User:
        return replace(self, profile_picture=path or None)
