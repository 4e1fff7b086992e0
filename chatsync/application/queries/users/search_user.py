"""
SearchUser Query - find a user from free text.

The term is tried as a username first, then as a principal. A term the
backend cannot parse as a principal is simply not found. Not cached: every
search goes to the backend.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from chatsync.application.common.interfaces import Query, QueryHandler
from chatsync.application.queries.users.get_user import (
    GetUserByUsernameQuery,
    GetUserHandler,
    GetUserQuery,
)
from chatsync.domain.entities.user import User
from chatsync.domain.exceptions import RemoteRejected
from chatsync.domain.value_objects.principal_id import PrincipalId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchUserQuery(Query[Optional[User]]):
    term: str


class SearchUserHandler(QueryHandler[Optional[User]]):
    def __init__(self, users: GetUserHandler):
        self._users = users

    async def execute(self, query: SearchUserQuery) -> Optional[User]:
        term = query.term.strip()
        if not term:
            return None

        user = await self._users.execute(GetUserByUsernameQuery(term))
        if user:
            return user

        try:
            return await self._users.execute(GetUserQuery(PrincipalId(term)))
        except RemoteRejected as e:
            logger.debug(f"'{term}' is not a known principal: {e}")
            return None
