"""List Chats Query."""

from dataclasses import dataclass
from chatsync.application.common.interfaces import Query, QueryHandler
from chatsync.domain.entities.chat import Chat
from chatsync.domain.ports.backend import BackendPort
from chatsync.domain.services.entity_codec import decode_chat


@dataclass(frozen=True)
class ListChatsQuery(Query[tuple[Chat, ...]]):
    pass


class ListChatsHandler(QueryHandler[tuple[Chat, ...]]):
    def __init__(self, backend: BackendPort):
        self._backend = backend

    async def execute(self, query: ListChatsQuery) -> tuple[Chat, ...]:
        raw = await self._backend.get_chat_list()
        return tuple(decode_chat(chat) for chat in raw)
