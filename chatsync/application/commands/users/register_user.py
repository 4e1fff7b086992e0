"""
RegisterUser Command - claim a username for the current principal.

Usernames are immutable once set, so there is nothing to predict locally;
on success the current user's profile key is invalidated.
"""

from dataclasses import dataclass

from chatsync.application.common.interfaces import Command, CommandHandler
from chatsync.application.common.result import MutationResult
from chatsync.application.sync.invalidation_router import InvalidationRouter, MutationKind
from chatsync.application.sync.mutation_pipeline import MutationPipeline, MutationSpec
from chatsync.domain.exceptions import DomainValidationError
from chatsync.domain.ports.backend import BackendPort
from chatsync.domain.value_objects.principal_id import PrincipalId


@dataclass(frozen=True)
class RegisterUserCommand(Command[MutationResult[None]]):
    principal: PrincipalId
    username: str


class RegisterUserHandler(CommandHandler[MutationResult[None]]):
    def __init__(
        self,
        backend: BackendPort,
        pipeline: MutationPipeline,
        router: InvalidationRouter,
    ):
        self._backend = backend
        self._pipeline = pipeline
        self._router = router

    async def execute(self, command: RegisterUserCommand) -> MutationResult[None]:
        username = command.username.strip()
        if not username:
            raise DomainValidationError("Username cannot be empty")

        params = {"principal": command.principal, "username": username}
        spec = MutationSpec(
            kind=MutationKind.REGISTER_USER,
            remote=lambda: self._backend.register_user(username),
            invalidates=self._router.route(MutationKind.REGISTER_USER, params),
            params=params,
        )
        return await self._pipeline.execute(spec)
