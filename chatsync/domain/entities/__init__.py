"""
ENTITIES - Business objects with identity

Cached values are shared by every reader of the cache, so entities are
frozen dataclasses; changes produce new instances via the helper methods.
"""

from chatsync.domain.entities.chat import Chat
from chatsync.domain.entities.message import Message
from chatsync.domain.entities.user import User
from chatsync.domain.entities.file_reference import FileReference

__all__ = [
    "Chat",
    "Message",
    "User",
    "FileReference",
]
