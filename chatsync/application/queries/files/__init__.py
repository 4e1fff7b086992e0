"""File reference queries."""

from .list_file_references import ListFileReferencesQuery, ListFileReferencesHandler
from .get_file_reference import GetFileReferenceQuery, GetFileReferenceHandler

__all__ = [
    "ListFileReferencesQuery",
    "ListFileReferencesHandler",
    "GetFileReferenceQuery",
    "GetFileReferenceHandler",
]
