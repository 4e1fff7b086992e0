"""
File Reference Commands - register or drop the path -> hash mapping of an uploaded blob.

Optimistic effect: the file list and the path's own key are updated at once.
"""

from dataclasses import dataclass
from typing import Union

from chatsync.application.commands import effects
from chatsync.application.common.interfaces import Command, CommandHandler
from chatsync.application.common.result import MutationResult
from chatsync.application.sync.invalidation_router import InvalidationRouter, MutationKind
from chatsync.application.sync.mutation_pipeline import MutationPipeline, MutationSpec
from chatsync.domain.entities.file_reference import FileReference
from chatsync.domain.exceptions import DomainValidationError
from chatsync.domain.ports.backend import BackendPort
from chatsync.domain.value_objects.cache_key import file_list_key, file_reference_key
from chatsync.domain.value_objects.file_path import FilePath


@dataclass(frozen=True)
class RegisterFileReferenceCommand(Command[MutationResult[None]]):
    path: FilePath
    hash: str


@dataclass(frozen=True)
class DropFileReferenceCommand(Command[MutationResult[None]]):
    path: FilePath


class FileReferenceHandler(CommandHandler[MutationResult[None]]):
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
        self, command: Union[RegisterFileReferenceCommand, DropFileReferenceCommand]
    ) -> MutationResult[None]:
        path = command.path
        params = {"path": path}

        if isinstance(command, RegisterFileReferenceCommand):
            if not command.hash:
                raise DomainValidationError("File hash cannot be empty")
            ref = FileReference(path=path, hash=command.hash)
            kind = MutationKind.REGISTER_FILE_REFERENCE
            remote = lambda: self._backend.register_file_reference(path.value, command.hash)
            predicted = {
                file_list_key(): effects.put_file_reference(ref),
                file_reference_key(path): effects.set_value(ref),
            }
        else:
            kind = MutationKind.DROP_FILE_REFERENCE
            remote = lambda: self._backend.drop_file_reference(path.value)
            predicted = {
                file_list_key(): effects.drop_file_reference(path),
                file_reference_key(path): effects.set_value(None),
            }

        spec = MutationSpec(
            kind=kind,
            remote=remote,
            effects=predicted,
            invalidates=self._router.route(kind, params),
            params=params,
        )
        return await self._pipeline.execute(spec)
