"""FindExistingChat Query - id of the chat two principals already share, if any. Not cached."""

from dataclasses import dataclass
from typing import Optional

from chatsync.application.common.interfaces import Query, QueryHandler
from chatsync.domain.ports.backend import BackendPort
from chatsync.domain.services.entity_codec import decode_optional
from chatsync.domain.value_objects.chat_id import ChatId
from chatsync.domain.value_objects.principal_id import PrincipalId


@dataclass(frozen=True)
class FindExistingChatQuery(Query[Optional[ChatId]]):
    participant1: PrincipalId
    participant2: PrincipalId


class FindExistingChatHandler(QueryHandler[Optional[ChatId]]):
    def __init__(self, backend: BackendPort):
        self._backend = backend

    async def execute(self, query: FindExistingChatQuery) -> Optional[ChatId]:
        raw = await self._backend.find_existing_chat(
            query.participant1.value, query.participant2.value
        )
        chat_id = decode_optional(raw)
        return ChatId(chat_id) if chat_id else None
