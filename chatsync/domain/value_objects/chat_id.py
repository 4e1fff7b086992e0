"""
ChatId Value Object
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ChatId:
    value: str  # backend-assigned chat id

    def __post_init__(self):
        if not isinstance(self.value, str) or not self.value:
            raise ValueError("ChatId cannot be empty")

    def __str__(self) -> str:
        return self.value
