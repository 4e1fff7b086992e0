"""
DOMAIN EXCEPTIONS - Engine error kinds

Raised by the codec, the transport and command validation. The mutation
pipeline turns ChatSyncError subclasses into failed MutationResults after
rolling back; the query coordinator leaves cached values untouched on them.
"""

from chatsync.domain.exceptions.base import ChatSyncError
from chatsync.domain.exceptions.transport_unavailable import TransportUnavailable
from chatsync.domain.exceptions.remote_rejected import RemoteRejected
from chatsync.domain.exceptions.decode_error import DecodeError, MalformedListError
from chatsync.domain.exceptions.validation_error import DomainValidationError

__all__ = [
    "ChatSyncError",
    "TransportUnavailable",
    "RemoteRejected",
    "DecodeError",
    "MalformedListError",
    "DomainValidationError",
]
