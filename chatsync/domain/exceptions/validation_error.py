"""
DomainValidationError - Raised when command input violates a business rule.
"""

from chatsync.domain.exceptions.base import ChatSyncError


class DomainValidationError(ChatSyncError):
    """Exception raised for domain validation errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
