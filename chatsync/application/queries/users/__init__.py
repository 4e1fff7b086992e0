"""User queries."""

from .get_user import GetUserQuery, GetUserByUsernameQuery, GetUserHandler
from .search_user import SearchUserQuery, SearchUserHandler

__all__ = [
    "GetUserQuery",
    "GetUserByUsernameQuery",
    "GetUserHandler",
    "SearchUserQuery",
    "SearchUserHandler",
]
