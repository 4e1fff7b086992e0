"""User commands."""

from .register_user import RegisterUserCommand, RegisterUserHandler
from .update_profile import (
    UpdateBioCommand,
    UpdateProfilePictureCommand,
    UpdateProfileHandler,
)

__all__ = [
    "RegisterUserCommand",
    "RegisterUserHandler",
    "UpdateBioCommand",
    "UpdateProfilePictureCommand",
    "UpdateProfileHandler",
]
