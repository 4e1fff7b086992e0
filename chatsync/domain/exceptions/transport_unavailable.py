"""
TransportUnavailable - Raised when there is no connection to the backend.
Queries keep serving the cached value; mutations fail without applying.
"""

from chatsync.domain.exceptions.base import ChatSyncError


class TransportUnavailable(ChatSyncError):
    """Raised when the backend cannot be reached"""

    def __init__(self, message: str = "Backend is not available"):
        super().__init__(message)
