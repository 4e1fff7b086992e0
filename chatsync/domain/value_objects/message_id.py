"""
MessageId Value Object - unique within its chat.
"""

from dataclasses import dataclass

PROVISIONAL_PREFIX = "optimistic-"


@dataclass(frozen=True)
class MessageId:
    value: str

    def __post_init__(self):
        if not isinstance(self.value, str) or not self.value:
            raise ValueError("MessageId cannot be empty")

    def __str__(self) -> str:
        return self.value

    @property
    def is_provisional(self) -> bool:
        """True for ids synthesized locally before the backend confirmed the message."""
        return self.value.startswith(PROVISIONAL_PREFIX)
