from chatsync.application.common.interfaces import (
    Command,
    CommandHandler,
    Query,
    QueryHandler,
)
from chatsync.application.common.result import MutationResult

__all__ = [
    "Command",
    "CommandHandler",
    "Query",
    "QueryHandler",
    "MutationResult",
]
