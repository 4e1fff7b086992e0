"""
Message Entity - A single message in a chat.
"""

from __future__ import annotations
from dataclasses import dataclass
from uuid import uuid4
from chatsync.domain.value_objects.message_id import MessageId, PROVISIONAL_PREFIX
from chatsync.domain.value_objects.principal_id import PrincipalId
from chatsync.domain.value_objects.timestamp import Timestamp


@dataclass(frozen=True)
class Message:
    id: MessageId
    sender: PrincipalId
    content: str
    encrypted: bool
    timestamp: Timestamp
    provisional: bool = False

    @classmethod
    def provisional_for(cls, sender: PrincipalId, content: str) -> Message:
        """Factory for the locally predicted copy of a message being sent."""
        return cls(
            id=MessageId(f"{PROVISIONAL_PREFIX}{uuid4()}"),
            sender=sender,
            content=content,
            encrypted=True,
            timestamp=Timestamp.now(),
            provisional=True,
        )
