"""Chat queries."""

from .list_chats import ListChatsQuery, ListChatsHandler
from .get_messages import GetMessagesQuery, GetMessagesHandler
from .find_existing_chat import FindExistingChatQuery, FindExistingChatHandler

__all__ = [
    "ListChatsQuery",
    "ListChatsHandler",
    "GetMessagesQuery",
    "GetMessagesHandler",
    "FindExistingChatQuery",
    "FindExistingChatHandler",
]
