"""
Profile Commands - update the current user's bio or profile picture.

Optimistic effect: the cached profile of the acting principal is replaced
by a copy with the new field. Nothing is predicted when the profile has not
been loaded yet.
"""

from dataclasses import dataclass
from typing import Optional, Union

from chatsync.application.commands.effects import replace_bio, replace_profile_picture
from chatsync.application.common.interfaces import Command, CommandHandler
from chatsync.application.common.result import MutationResult
from chatsync.application.sync.invalidation_router import InvalidationRouter, MutationKind
from chatsync.application.sync.mutation_pipeline import MutationPipeline, MutationSpec
from chatsync.config.settings import Config
from chatsync.domain.exceptions import DomainValidationError
from chatsync.domain.ports.backend import BackendPort
from chatsync.domain.value_objects.cache_key import user_key
from chatsync.domain.value_objects.principal_id import PrincipalId


@dataclass(frozen=True)
class UpdateBioCommand(Command[MutationResult[None]]):
    principal: PrincipalId
    bio: str


@dataclass(frozen=True)
class UpdateProfilePictureCommand(Command[MutationResult[None]]):
    principal: PrincipalId
    path: Optional[str]


class UpdateProfileHandler(CommandHandler[MutationResult[None]]):
    def __init__(
        self,
        backend: BackendPort,
        pipeline: MutationPipeline,
        router: InvalidationRouter,
    ):
        self._backend = backend
        self._pipeline = pipeline
        self._router = router

    async def execute(
        self, command: Union[UpdateBioCommand, UpdateProfilePictureCommand]
    ) -> MutationResult[None]:
        params = {"principal": command.principal}

        if isinstance(command, UpdateBioCommand):
            bio = command.bio.strip()
            if len(bio) > Config.USER_BIO_MAX_LENGTH:
                raise DomainValidationError(
                    f"Bio cannot exceed {Config.USER_BIO_MAX_LENGTH} characters"
                )
            kind = MutationKind.UPDATE_BIO
            remote = lambda: self._backend.update_bio(bio)
            effect = replace_bio(bio)
        else:
            path = command.path or ""
            kind = MutationKind.UPDATE_PROFILE_PICTURE
            remote = lambda: self._backend.update_profile_picture(path)
            effect = replace_profile_picture(path)

        spec = MutationSpec(
            kind=kind,
            remote=remote,
            effects={user_key(command.principal): effect},
            invalidates=self._router.route(kind, params),
            params=params,
        )
        return await self._pipeline.execute(spec)
