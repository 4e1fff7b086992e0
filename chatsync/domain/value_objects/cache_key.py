"""
CacheKey Value Object - entity class plus discriminating parameters.

A key with fewer parameters than another of the same entity class acts as
a prefix for it, so CacheKey("user") addresses every cached user profile.
"""

from __future__ import annotations
from dataclasses import dataclass

CHAT_LIST = "chatList"
MESSAGES = "messages"
USER = "user"
USERNAME = "username"
FILE_LIST = "fileList"
FILE_REFERENCE = "fileReference"


@dataclass(frozen=True)
class CacheKey:
    entity: str
    params: tuple[str, ...] = ()

    def __post_init__(self):
        if not self.entity:
            raise ValueError("CacheKey entity cannot be empty")
        if not isinstance(self.params, tuple):
            object.__setattr__(self, "params", tuple(self.params))

    def matches(self, other: CacheKey) -> bool:
        """Return True if `other` equals this key or is addressed by it as a prefix."""
        return (
            self.entity == other.entity
            and other.params[: len(self.params)] == self.params
        )

    def __str__(self) -> str:
        return ":".join((self.entity, *self.params))


def chat_list_key() -> CacheKey:
    return CacheKey(CHAT_LIST)


def messages_key(chat_id) -> CacheKey:
    return CacheKey(MESSAGES, (str(chat_id),))


def user_key(principal) -> CacheKey:
    return CacheKey(USER, (str(principal),))


def username_key(username: str) -> CacheKey:
    return CacheKey(USERNAME, (username,))


def file_list_key() -> CacheKey:
    return CacheKey(FILE_LIST)


def file_reference_key(path) -> CacheKey:
    return CacheKey(FILE_REFERENCE, (str(path),))
