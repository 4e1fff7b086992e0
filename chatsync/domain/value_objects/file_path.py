"""
FilePath Value Object - key of a stored blob reference.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class FilePath:
    value: str  # storage path, unique key of a FileReference

    def __post_init__(self):
        if not self.value or not self.value.strip():
            raise ValueError("File path cannot be empty")

    def __str__(self) -> str:
        return self.value
