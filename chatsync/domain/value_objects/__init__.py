"""
VALUE OBJECTS - Immutable domain types

Each value object:
- Has no identity (compared by value, not by ID)
- Is immutable (frozen dataclass)
- Validates itself on creation
"""

from chatsync.domain.value_objects.principal_id import PrincipalId
from chatsync.domain.value_objects.chat_id import ChatId
from chatsync.domain.value_objects.message_id import MessageId
from chatsync.domain.value_objects.file_path import FilePath
from chatsync.domain.value_objects.delete_scope import DeleteScope
from chatsync.domain.value_objects.timestamp import Timestamp
from chatsync.domain.value_objects.cache_key import (
    CacheKey,
    CHAT_LIST,
    MESSAGES,
    USER,
    USERNAME,
    FILE_LIST,
    FILE_REFERENCE,
    chat_list_key,
    messages_key,
    user_key,
    username_key,
    file_list_key,
    file_reference_key,
)

__all__ = [
    "PrincipalId",
    "ChatId",
    "MessageId",
    "FilePath",
    "DeleteScope",
    "Timestamp",
    "CacheKey",
    "CHAT_LIST",
    "MESSAGES",
    "USER",
    "USERNAME",
    "FILE_LIST",
    "FILE_REFERENCE",
    "chat_list_key",
    "messages_key",
    "user_key",
    "username_key",
    "file_list_key",
    "file_reference_key",
]
