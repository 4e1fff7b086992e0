"""Get User Queries - profile by principal or by username. None when the backend has no such user."""

from dataclasses import dataclass
from typing import Optional, Union

from chatsync.application.common.interfaces import Query, QueryHandler
from chatsync.domain.entities.user import User
from chatsync.domain.ports.backend import BackendPort
from chatsync.domain.services.entity_codec import decode_user
from chatsync.domain.value_objects.principal_id import PrincipalId


@dataclass(frozen=True)
class GetUserQuery(Query[Optional[User]]):
    principal: PrincipalId


@dataclass(frozen=True)
class GetUserByUsernameQuery(Query[Optional[User]]):
    username: str


class GetUserHandler(QueryHandler[Optional[User]]):
    def __init__(self, backend: BackendPort):
        self._backend = backend

    async def execute(
        self, query: Union[GetUserQuery, GetUserByUsernameQuery]
    ) -> Optional[User]:
        if isinstance(query, GetUserByUsernameQuery):
            raw = await self._backend.get_user_by_username(query.username)
        else:
            raw = await self._backend.get_user_by_principal(query.principal.value)
        return decode_user(raw)
