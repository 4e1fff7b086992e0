"""Chat commands."""

from .send_message import SendMessageCommand, SendMessageHandler
from .forward_message import ForwardMessageCommand, ForwardMessageHandler
from .create_chat import CreateChatCommand, CreateChatHandler
from .delete_chat import DeleteChatCommand, DeleteChatHandler

__all__ = [
    "SendMessageCommand",
    "SendMessageHandler",
    "ForwardMessageCommand",
    "ForwardMessageHandler",
    "CreateChatCommand",
    "CreateChatHandler",
    "DeleteChatCommand",
    "DeleteChatHandler",
]
