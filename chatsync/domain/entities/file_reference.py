"""
FileReference Entity - resolves a stored blob path to its content hash.
"""

from dataclasses import dataclass

from chatsync.domain.value_objects.file_path import FilePath


@dataclass(frozen=True)
class FileReference:
    path: FilePath
    hash: str

    def __post_init__(self):
        if not self.hash:
            raise ValueError(f"File reference {self.path} has no content hash")
