"""
GetMessages Query - Message sequence of one chat.

The backend sends the sequence in its recursive pair encoding; the codec
turns it into a tuple in backend order. A malformed list raises
MalformedListError and nothing is cached for it.
"""

from dataclasses import dataclass

from chatsync.application.common.interfaces import Query, QueryHandler
from chatsync.domain.entities.message import Message
from chatsync.domain.ports.backend import BackendPort
from chatsync.domain.services.entity_codec import decode_message_list
from chatsync.domain.value_objects.chat_id import ChatId


@dataclass(frozen=True)
class GetMessagesQuery(Query[tuple[Message, ...]]):
    chat_id: ChatId


class GetMessagesHandler(QueryHandler[tuple[Message, ...]]):
    def __init__(self, backend: BackendPort):
        self._backend = backend

    async def execute(self, query: GetMessagesQuery) -> tuple[Message, ...]:
        raw = await self._backend.get_messages(query.chat_id.value)
        return tuple(decode_message_list(raw))
