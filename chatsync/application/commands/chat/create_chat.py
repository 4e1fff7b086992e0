"""
CreateChat Command - start a chat with another principal.

No optimistic effect: the chat id only exists once the backend assigns it.
On success the chat list is invalidated so the new chat shows up.
"""

from dataclasses import dataclass

from chatsync.application.common.interfaces import Command, CommandHandler
from chatsync.application.common.result import MutationResult
from chatsync.application.sync.invalidation_router import InvalidationRouter, MutationKind
from chatsync.application.sync.mutation_pipeline import MutationPipeline, MutationSpec
from chatsync.domain.ports.backend import BackendPort
from chatsync.domain.value_objects.chat_id import ChatId
from chatsync.domain.value_objects.principal_id import PrincipalId


@dataclass(frozen=True)
class CreateChatCommand(Command[MutationResult[ChatId]]):
    participant: PrincipalId


class CreateChatHandler(CommandHandler[MutationResult[ChatId]]):
    def __init__(
        self,
        backend: BackendPort,
        pipeline: MutationPipeline,
        router: InvalidationRouter,
    ):
        self._backend = backend
        self._pipeline = pipeline
        self._router = router

    async def execute(self, command: CreateChatCommand) -> MutationResult[ChatId]:
        async def remote() -> ChatId:
            return ChatId(await self._backend.create_chat(command.participant.value))

        params = {"participant": command.participant}
        spec = MutationSpec(
            kind=MutationKind.CREATE_CHAT,
            remote=remote,
            invalidates=self._router.route(MutationKind.CREATE_CHAT, params),
            params=params,
        )
        return await self._pipeline.execute(spec)
