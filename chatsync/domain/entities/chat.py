"""
Chat Entity - A conversation between participants.
"""

from dataclasses import dataclass, field
from chatsync.domain.entities.message import Message
from chatsync.domain.value_objects.chat_id import ChatId
from chatsync.domain.value_objects.principal_id import PrincipalId
from chatsync.domain.value_objects.timestamp import Timestamp


@dataclass(frozen=True)
class Chat:
    id: ChatId
    participants: tuple[PrincipalId, ...]
    last_activity: Timestamp
    created_at: Timestamp
    messages: tuple[Message, ...] = field(default=())

    def __post_init__(self):
        if self.last_activity < self.created_at:
            raise ValueError(
                f"Chat {self.id}: last activity precedes creation time"
            )
