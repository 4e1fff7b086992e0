"""
DOMAIN SERVICES - Pure logic, no I/O.
"""

from chatsync.domain.services.entity_codec import (
    decode_chat,
    decode_file_reference,
    decode_message,
    decode_message_list,
    decode_optional,
    decode_time,
    decode_user,
    encode_message_list,
)

__all__ = [
    "decode_chat",
    "decode_file_reference",
    "decode_message",
    "decode_message_list",
    "decode_optional",
    "decode_time",
    "decode_user",
    "encode_message_list",
]
