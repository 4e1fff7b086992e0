"""
RemoteRejected - The backend call completed but reported failure.
Triggers a full rollback of the mutation's optimistic effect.
"""

from typing import Optional

from chatsync.domain.exceptions.base import ChatSyncError


class RemoteRejected(ChatSyncError):
    """Raised when the backend refuses an operation"""

    def __init__(
        self,
        message: str = "Backend rejected the call",
        operation: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.operation = operation
        self.status_code = status_code
