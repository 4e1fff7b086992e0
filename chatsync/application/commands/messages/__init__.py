"""Message commands."""

from .delete_message import DeleteMessageCommand, DeleteMessageHandler

__all__ = [
    "DeleteMessageCommand",
    "DeleteMessageHandler",
]
