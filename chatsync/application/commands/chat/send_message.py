"""
SendMessage Command - append a message to a chat.

Optimistic effect: a provisional Message (synthesized id, local timestamp)
is appended to the chat's cached message sequence. After the backend
accepts the call, the message sequence and the chat list are invalidated
and the refetch replaces the provisional copy with the server's.
"""

import logging
from dataclasses import dataclass

from chatsync.application.commands.effects import append_message
from chatsync.application.common.interfaces import Command, CommandHandler
from chatsync.application.common.result import MutationResult
from chatsync.application.sync.invalidation_router import InvalidationRouter, MutationKind
from chatsync.application.sync.mutation_pipeline import MutationPipeline, MutationSpec
from chatsync.domain.entities.message import Message
from chatsync.domain.exceptions import DomainValidationError
from chatsync.domain.ports.backend import BackendPort
from chatsync.domain.value_objects.cache_key import messages_key
from chatsync.domain.value_objects.chat_id import ChatId
from chatsync.domain.value_objects.principal_id import PrincipalId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SendMessageCommand(Command[MutationResult[None]]):
    chat_id: ChatId
    sender: PrincipalId
    content: str


class SendMessageHandler(CommandHandler[MutationResult[None]]):
    def __init__(
        self,
        backend: BackendPort,
        pipeline: MutationPipeline,
        router: InvalidationRouter,
    ):
        self._backend = backend
        self._pipeline = pipeline
        self._router = router

    async def execute(self, command: SendMessageCommand) -> MutationResult[None]:
        content = command.content.strip()
        if not content:
            raise DomainValidationError("Message content cannot be empty")

        chat_id = command.chat_id
        provisional = Message.provisional_for(command.sender, content)
        params = {"chat_id": chat_id}

        spec = MutationSpec(
            kind=MutationKind.SEND_MESSAGE,
            remote=lambda: self._backend.send_message(chat_id.value, content),
            effects={messages_key(chat_id): append_message(provisional)},
            invalidates=self._router.route(MutationKind.SEND_MESSAGE, params),
            params=params,
        )
        return await self._pipeline.execute(spec)
