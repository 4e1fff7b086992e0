"""List File References Query."""

from dataclasses import dataclass
from chatsync.application.common.interfaces import Query, QueryHandler
from chatsync.domain.entities.file_reference import FileReference
from chatsync.domain.ports.backend import BackendPort
from chatsync.domain.services.entity_codec import decode_file_reference


@dataclass(frozen=True)
class ListFileReferencesQuery(Query[tuple[FileReference, ...]]):
    pass


class ListFileReferencesHandler(QueryHandler[tuple[FileReference, ...]]):
    def __init__(self, backend: BackendPort):
        self._backend = backend

    async def execute(self, query: ListFileReferencesQuery) -> tuple[FileReference, ...]:
        raw = await self._backend.list_file_references()
        return tuple(ref for ref in map(decode_file_reference, raw) if ref is not None)
