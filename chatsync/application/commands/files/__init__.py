"""File reference commands."""

from .file_references import (
    DropFileReferenceCommand,
    FileReferenceHandler,
    RegisterFileReferenceCommand,
)

__all__ = [
    "DropFileReferenceCommand",
    "FileReferenceHandler",
    "RegisterFileReferenceCommand",
]
