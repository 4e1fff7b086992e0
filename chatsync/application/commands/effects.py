"""
Optimistic effects - pure functions from a cached value to its predicted
next value. Each factory returns the function the mutation pipeline applies
to one cache key; `old` is None when nothing is cached yet.
"""

from typing import Callable, Optional

from chatsync.domain.entities.chat import Chat
from chatsync.domain.entities.file_reference import FileReference
from chatsync.domain.entities.message import Message
from chatsync.domain.entities.user import User
from chatsync.domain.value_objects.chat_id import ChatId
from chatsync.domain.value_objects.file_path import FilePath
from chatsync.domain.value_objects.message_id import MessageId


def append_message(message: Message) -> Callable[[Optional[tuple[Message, ...]]], tuple[Message, ...]]:
    def effect(old):
        return (*(old or ()), message)

    return effect


def remove_message(message_id: MessageId) -> Callable[[Optional[tuple[Message, ...]]], tuple[Message, ...]]:
    def effect(old):
        return tuple(m for m in old or () if m.id != message_id)

    return effect


def remove_chat(chat_id: ChatId) -> Callable[[Optional[tuple[Chat, ...]]], tuple[Chat, ...]]:
    def effect(old):
        return tuple(c for c in old or () if c.id != chat_id)

    return effect


def replace_bio(bio: Optional[str]) -> Callable[[Optional[User]], Optional[User]]:
    def effect(old):
        return old.with_bio(bio) if old else old

    return effect


def replace_profile_picture(path: Optional[str]) -> Callable[[Optional[User]], Optional[User]]:
    def effect(old):
        return old.with_profile_picture(path) if old else old

    return effect


def put_file_reference(ref: FileReference):
    """Insert or replace `ref` in the cached file list."""

    def effect(old):
        return (*(r for r in old or () if r.path != ref.path), ref)

    return effect


def drop_file_reference(path: FilePath):
    def effect(old):
        return tuple(r for r in old or () if r.path != path)

    return effect


def set_value(value):
    return lambda old: value
