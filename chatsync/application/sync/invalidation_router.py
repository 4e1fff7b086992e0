"""
Invalidation Router - which cache keys a committed mutation made stale.

The table is static: each mutation kind maps to a function of the
mutation's parameters. Routed keys go to CacheStore.mark_stale(); the query
coordinator refetches the ones somebody is subscribed to right away and the
rest when they are next subscribed.
"""

import logging
from enum import Enum
from typing import Any, Callable, Iterable, Mapping

from chatsync.domain.exceptions import DomainValidationError
from chatsync.domain.value_objects.cache_key import (
    CacheKey,
    chat_list_key,
    file_list_key,
    file_reference_key,
    messages_key,
    user_key,
)
from chatsync.infrastructure.cache.cache_store import CacheStore

logger = logging.getLogger(__name__)


class MutationKind(str, Enum):
    SEND_MESSAGE = "send_message"
    DELETE_MESSAGE_FOR_ME = "delete_message_for_me"
    DELETE_MESSAGE_FOR_EVERYONE = "delete_message_for_everyone"
    DELETE_CHAT_FOR_ME = "delete_chat_for_me"
    DELETE_CHAT_FOR_EVERYONE = "delete_chat_for_everyone"
    CREATE_CHAT = "create_chat"
    REGISTER_USER = "register_user"
    UPDATE_BIO = "update_bio"
    UPDATE_PROFILE_PICTURE = "update_profile_picture"
    REGISTER_FILE_REFERENCE = "register_file_reference"
    DROP_FILE_REFERENCE = "drop_file_reference"


Params = Mapping[str, Any]

_ROUTES: dict[MutationKind, Callable[[Params], set[CacheKey]]] = {
    # last activity of the chat changes too
    MutationKind.SEND_MESSAGE: lambda p: {messages_key(p["chat_id"]), chat_list_key()},
    MutationKind.DELETE_MESSAGE_FOR_ME: lambda p: {messages_key(p["chat_id"])},
    MutationKind.DELETE_MESSAGE_FOR_EVERYONE: lambda p: {messages_key(p["chat_id"])},
    MutationKind.DELETE_CHAT_FOR_ME: lambda p: {chat_list_key()},
    MutationKind.DELETE_CHAT_FOR_EVERYONE: lambda p: {chat_list_key()},
    MutationKind.CREATE_CHAT: lambda p: {chat_list_key()},
    MutationKind.REGISTER_USER: lambda p: {user_key(p["principal"])},
    MutationKind.UPDATE_BIO: lambda p: {user_key(p["principal"])},
    MutationKind.UPDATE_PROFILE_PICTURE: lambda p: {user_key(p["principal"])},
    MutationKind.REGISTER_FILE_REFERENCE: lambda p: {file_list_key(), file_reference_key(p["path"])},
    MutationKind.DROP_FILE_REFERENCE: lambda p: {file_list_key(), file_reference_key(p["path"])},
}


class InvalidationRouter:
    def __init__(self, store: CacheStore):
        self._store = store

    def route(self, kind: MutationKind, params: Params) -> frozenset[CacheKey]:
        """
        Keys whose cached value may be stale after `kind` committed.

        Raises:
            DomainValidationError: Unknown kind or a parameter the route needs is missing
        """
        try:
            return frozenset(_ROUTES[kind](params))
        except KeyError as e:
            raise DomainValidationError(
                f"Cannot route invalidation for {kind}: missing {e}"
            ) from e

    def dispatch(self, keys: Iterable[CacheKey]) -> list[CacheKey]:
        """Mark `keys` stale; returns every entry that was actually marked."""
        marked: list[CacheKey] = []
        for key in keys:
            marked.extend(self._store.mark_stale(key))
        logger.debug(f"Invalidated {len(marked)} cache entries")
        return marked
