"""
ForwardMessage Command - send a copy of a message's content to other chats.

Each target is an independent send-message mutation; one failing target
rolls back only its own provisional message.
"""

import asyncio
from dataclasses import dataclass

from chatsync.application.commands.chat.send_message import (
    SendMessageCommand,
    SendMessageHandler,
)
from chatsync.application.common.interfaces import Command, CommandHandler
from chatsync.application.common.result import MutationResult
from chatsync.domain.entities.message import Message
from chatsync.domain.exceptions import DomainValidationError
from chatsync.domain.value_objects.chat_id import ChatId
from chatsync.domain.value_objects.principal_id import PrincipalId

ForwardResults = dict[ChatId, MutationResult[None]]


@dataclass(frozen=True)
class ForwardMessageCommand(Command[ForwardResults]):
    message: Message
    targets: tuple[ChatId, ...]
    sender: PrincipalId


class ForwardMessageHandler(CommandHandler[ForwardResults]):
    def __init__(self, send_handler: SendMessageHandler):
        self._send = send_handler

    async def execute(self, command: ForwardMessageCommand) -> ForwardResults:
        targets = tuple(dict.fromkeys(command.targets))
        if not targets:
            raise DomainValidationError("Select at least one chat to forward to")

        results = await asyncio.gather(
            *(
                self._send.execute(
                    SendMessageCommand(
                        chat_id=chat_id,
                        sender=command.sender,
                        content=command.message.content,
                    )
                )
                for chat_id in targets
            )
        )
        return dict(zip(targets, results))
