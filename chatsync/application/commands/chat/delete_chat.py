"""
DeleteChat Command - remove a chat for the acting user or for everyone.

Optimistic effect: the chat disappears from the cached chat list.
"""

from dataclasses import dataclass

from chatsync.application.commands.effects import remove_chat
from chatsync.application.common.interfaces import Command, CommandHandler
from chatsync.application.common.result import MutationResult
from chatsync.application.sync.invalidation_router import InvalidationRouter, MutationKind
from chatsync.application.sync.mutation_pipeline import MutationPipeline, MutationSpec
from chatsync.domain.ports.backend import BackendPort
from chatsync.domain.value_objects.cache_key import chat_list_key
from chatsync.domain.value_objects.chat_id import ChatId
from chatsync.domain.value_objects.delete_scope import DeleteScope


@dataclass(frozen=True)
class DeleteChatCommand(Command[MutationResult[None]]):
    chat_id: ChatId
    scope: DeleteScope = DeleteScope.FOR_ME


class DeleteChatHandler(CommandHandler[MutationResult[None]]):
    def __init__(
        self,
        backend: BackendPort,
        pipeline: MutationPipeline,
        router: InvalidationRouter,
    ):
        self._backend = backend
        self._pipeline = pipeline
        self._router = router

    async def execute(self, command: DeleteChatCommand) -> MutationResult[None]:
        chat_id = command.chat_id.value
        if command.scope is DeleteScope.FOR_EVERYONE:
            kind = MutationKind.DELETE_CHAT_FOR_EVERYONE
            remote = lambda: self._backend.delete_chat_for_everyone(chat_id)
        else:
            kind = MutationKind.DELETE_CHAT_FOR_ME
            remote = lambda: self._backend.delete_chat_for_me(chat_id)

        params = {"chat_id": command.chat_id}
        spec = MutationSpec(
            kind=kind,
            remote=remote,
            effects={chat_list_key(): remove_chat(command.chat_id)},
            invalidates=self._router.route(kind, params),
            params=params,
        )
        return await self._pipeline.execute(spec)
