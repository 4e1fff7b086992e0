"""
Query definitions - one per cached entity class.

Maps each CacheKey entity class to the query handler that loads it and to
its freshness window from Config.
"""

from chatsync.application.queries.chats import (
    GetMessagesHandler,
    GetMessagesQuery,
    ListChatsHandler,
    ListChatsQuery,
)
from chatsync.application.queries.files import (
    GetFileReferenceHandler,
    GetFileReferenceQuery,
    ListFileReferencesHandler,
    ListFileReferencesQuery,
)
from chatsync.application.queries.users import (
    GetUserByUsernameQuery,
    GetUserHandler,
    GetUserQuery,
)
from chatsync.application.sync.query_coordinator import QueryDefinition
from chatsync.config.settings import Config
from chatsync.domain.ports.backend import BackendPort
from chatsync.domain.value_objects.cache_key import (
    CHAT_LIST,
    FILE_LIST,
    FILE_REFERENCE,
    MESSAGES,
    USER,
    USERNAME,
    CacheKey,
)
from chatsync.domain.value_objects.chat_id import ChatId
from chatsync.domain.value_objects.file_path import FilePath
from chatsync.domain.value_objects.principal_id import PrincipalId


def build_query_definitions(backend: BackendPort) -> list[QueryDefinition]:
    chats = ListChatsHandler(backend)
    messages = GetMessagesHandler(backend)
    users = GetUserHandler(backend)
    file_list = ListFileReferencesHandler(backend)
    file_reference = GetFileReferenceHandler(backend)

    async def load_chat_list(key: CacheKey):
        return await chats.execute(ListChatsQuery())

    async def load_messages(key: CacheKey):
        return await messages.execute(GetMessagesQuery(ChatId(key.params[0])))

    async def load_user(key: CacheKey):
        return await users.execute(GetUserQuery(PrincipalId(key.params[0])))

    async def load_user_by_username(key: CacheKey):
        return await users.execute(GetUserByUsernameQuery(key.params[0]))

    async def load_file_list(key: CacheKey):
        return await file_list.execute(ListFileReferencesQuery())

    async def load_file_reference(key: CacheKey):
        return await file_reference.execute(GetFileReferenceQuery(FilePath(key.params[0])))

    return [
        QueryDefinition(CHAT_LIST, load_chat_list, Config.CHAT_LIST_STALE_SECONDS),
        QueryDefinition(MESSAGES, load_messages, Config.MESSAGES_STALE_SECONDS),
        QueryDefinition(USER, load_user, Config.USER_STALE_SECONDS),
        QueryDefinition(USERNAME, load_user_by_username, Config.USER_STALE_SECONDS),
        QueryDefinition(FILE_LIST, load_file_list, Config.FILE_LIST_STALE_SECONDS),
        QueryDefinition(FILE_REFERENCE, load_file_reference, Config.FILE_REFERENCE_STALE_SECONDS),
    ]
