"""
DecodeError - A backend wire shape could not be turned into domain records.
MalformedListError - The recursive message list encoding is broken.
"""

from chatsync.domain.exceptions.base import ChatSyncError


class DecodeError(ChatSyncError):
    """Raised when a wire value does not have the expected shape"""


class MalformedListError(DecodeError):
    """Raised when a message list is neither a pair nor the terminator"""

    def __init__(self, message: str, position: int = 0):
        super().__init__(f"{message} (at element {position})")
        self.position = position
