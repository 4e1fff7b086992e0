"""Get File Reference Query. Values stay fresh until the path is registered or dropped again."""

from dataclasses import dataclass
from typing import Optional

from chatsync.application.common.interfaces import Query, QueryHandler
from chatsync.domain.entities.file_reference import FileReference
from chatsync.domain.ports.backend import BackendPort
from chatsync.domain.services.entity_codec import decode_file_reference
from chatsync.domain.value_objects.file_path import FilePath


@dataclass(frozen=True)
class GetFileReferenceQuery(Query[Optional[FileReference]]):
    path: FilePath


class GetFileReferenceHandler(QueryHandler[Optional[FileReference]]):
    def __init__(self, backend: BackendPort):
        self._backend = backend

    async def execute(self, query: GetFileReferenceQuery) -> Optional[FileReference]:
        raw = await self._backend.get_file_reference(query.path.value)
        return decode_file_reference(raw)
