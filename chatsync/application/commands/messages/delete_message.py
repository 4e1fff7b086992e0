"""
DeleteMessage Command - remove a message for the acting user or for everyone.

Optimistic effect: the message is dropped from the chat's cached sequence.
Whether "for everyone" is limited to the sender is the backend's rule; the
client sends the request and rolls back if the backend refuses it.
"""

from dataclasses import dataclass

from chatsync.application.commands.effects import remove_message
from chatsync.application.common.interfaces import Command, CommandHandler
from chatsync.application.common.result import MutationResult
from chatsync.application.sync.invalidation_router import InvalidationRouter, MutationKind
from chatsync.application.sync.mutation_pipeline import MutationPipeline, MutationSpec
from chatsync.domain.exceptions import DomainValidationError
from chatsync.domain.ports.backend import BackendPort
from chatsync.domain.value_objects.cache_key import messages_key
from chatsync.domain.value_objects.chat_id import ChatId
from chatsync.domain.value_objects.delete_scope import DeleteScope
from chatsync.domain.value_objects.message_id import MessageId


@dataclass(frozen=True)
class DeleteMessageCommand(Command[MutationResult[None]]):
    chat_id: ChatId
    message_id: MessageId
    scope: DeleteScope = DeleteScope.FOR_ME


class DeleteMessageHandler(CommandHandler[MutationResult[None]]):
    def __init__(
        self,
        backend: BackendPort,
        pipeline: MutationPipeline,
        router: InvalidationRouter,
    ):
        self._backend = backend
        self._pipeline = pipeline
        self._router = router

    async def execute(self, command: DeleteMessageCommand) -> MutationResult[None]:
        if command.message_id.is_provisional:
            raise DomainValidationError("Message has not been confirmed by the backend yet")

        chat_id = command.chat_id.value
        message_id = command.message_id.value
        if command.scope is DeleteScope.FOR_EVERYONE:
            kind = MutationKind.DELETE_MESSAGE_FOR_EVERYONE
            remote = lambda: self._backend.delete_message_for_everyone(chat_id, message_id)
        else:
            kind = MutationKind.DELETE_MESSAGE_FOR_ME
            remote = lambda: self._backend.delete_message_for_me(message_id)

        params = {"chat_id": command.chat_id, "message_id": command.message_id}
        spec = MutationSpec(
            kind=kind,
            remote=remote,
            effects={messages_key(command.chat_id): remove_message(command.message_id)},
            invalidates=self._router.route(kind, params),
            params=params,
        )
        return await self._pipeline.execute(spec)
