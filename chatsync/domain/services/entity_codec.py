"""
Entity Codec - decodes backend wire shapes into domain entities.

Wire shapes (JSON rendering of the backend interface):

    Message       {"id", "sender", "content", "encrypted", "timestamp"}
    Chat          {"id", "participants", "messages", "lastActivity", "createdAt"}
    User          {"principal", "username", "createdAt", "bio"?, "profilePicture"?}
    FileReference {"path", "hash"}
    Time          integer nanoseconds since the Unix epoch
    Optional<T>   null | T | [] | [T]
    List          terminator | [head, tail]
                  terminator = null or []
                  the backend IDL wraps each node in an optional, so [[head, tail]]
                  is accepted as well

The message list is walked iteratively. A backend that sends a very deep or
cyclic list hits the MAX_LIST_LENGTH guard instead of the interpreter's
recursion limit.

Every function here is pure and deterministic.
"""

from typing import Any, Optional, Sequence

from chatsync.config.settings import Config
from chatsync.domain.entities.chat import Chat
from chatsync.domain.entities.file_reference import FileReference
from chatsync.domain.entities.message import Message
from chatsync.domain.entities.user import User
from chatsync.domain.exceptions import DecodeError, MalformedListError
from chatsync.domain.value_objects.chat_id import ChatId
from chatsync.domain.value_objects.file_path import FilePath
from chatsync.domain.value_objects.message_id import MessageId
from chatsync.domain.value_objects.principal_id import PrincipalId
from chatsync.domain.value_objects.timestamp import Timestamp


def _is_node(raw: Any) -> bool:
    return isinstance(raw, (list, tuple))


def decode_message_list(raw: Any, max_length: Optional[int] = None) -> list[Message]:
    """
    Decode the recursive (head, tail) encoding into an ordered list of messages.

    Args:
        raw: Terminator (None or empty list) or a [head, tail] pair
        max_length: Depth guard, defaults to Config.MAX_LIST_LENGTH

    Returns:
        Messages in encounter order

    Raises:
        MalformedListError: A node is neither a pair nor the terminator,
            an element is not a valid message, or the guard is exceeded
    """
    limit = Config.MAX_LIST_LENGTH if max_length is None else max_length
    messages: list[Message] = []
    node = raw

    while True:
        if node is None or (_is_node(node) and len(node) == 0):
            return messages

        position = len(messages)
        # Optional wrapper around the pair
        if _is_node(node) and len(node) == 1:
            node = node[0]

        if not _is_node(node) or len(node) != 2:
            raise MalformedListError(
                f"Expected a (head, tail) pair or terminator, got {type(node).__name__}",
                position,
            )
        if position >= limit:
            raise MalformedListError(
                f"Message list exceeds the maximum length of {limit}", position
            )

        head, node = node
        try:
            messages.append(decode_message(head))
        except DecodeError as e:
            raise MalformedListError(f"Invalid message: {e}", position) from e


def encode_message_list(messages: Sequence[dict[str, Any]]) -> Any:
    """Build the recursive pair encoding from message wire dicts (used by fakes and tools)."""
    node: Any = None
    for message in reversed(messages):
        node = [message, node]
    return node


def decode_time(raw: Any) -> Timestamp:
    """Backend Time (nanoseconds, possibly sent as a string) -> Timestamp, without losing precision."""
    if isinstance(raw, bool):
        raise DecodeError(f"Invalid time value: {raw!r}")
    if isinstance(raw, str) and raw.lstrip("-").isdigit():
        raw = int(raw)
    if not isinstance(raw, int):
        raise DecodeError(f"Invalid time value: {raw!r}")
    return Timestamp(raw)


def decode_optional(raw: Any) -> Any:
    """Unwrap an IDL optional: [] -> None, [x] -> x; bare values pass through."""
    if raw is None:
        return None
    if _is_node(raw):
        if len(raw) == 0:
            return None
        if len(raw) == 1:
            return raw[0]
        raise DecodeError(f"Invalid optional value with {len(raw)} elements")
    return raw


def decode_message(raw: Any) -> Message:
    if not isinstance(raw, dict):
        raise DecodeError(f"Message must be an object, got {type(raw).__name__}")
    try:
        return Message(
            id=MessageId(raw["id"]),
            sender=PrincipalId(raw["sender"]),
            content=str(raw["content"]),
            encrypted=bool(raw.get("encrypted", False)),
            timestamp=decode_time(raw["timestamp"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise DecodeError(f"Invalid message: {e!r}") from e


def decode_chat(raw: Any) -> Chat:
    if not isinstance(raw, dict):
        raise DecodeError(f"Chat must be an object, got {type(raw).__name__}")
    try:
        return Chat(
            id=ChatId(raw["id"]),
            participants=tuple(PrincipalId(p) for p in raw["participants"]),
            messages=tuple(decode_message_list(raw.get("messages"))),
            last_activity=decode_time(raw["lastActivity"]),
            created_at=decode_time(raw["createdAt"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise DecodeError(f"Invalid chat: {e!r}") from e


def decode_user(raw: Any) -> Optional[User]:
    """Decode an optional user; None means the backend has no such user."""
    raw = decode_optional(raw)
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise DecodeError(f"User must be an object, got {type(raw).__name__}")
    try:
        return User(
            principal=PrincipalId(raw["principal"]),
            username=raw["username"],
            created_at=decode_time(raw["createdAt"]),
            bio=decode_optional(raw.get("bio")),
            profile_picture=decode_optional(raw.get("profilePicture")),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise DecodeError(f"Invalid user: {e!r}") from e


def decode_file_reference(raw: Any) -> Optional[FileReference]:
    raw = decode_optional(raw)
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise DecodeError(f"File reference must be an object, got {type(raw).__name__}")
    try:
        return FileReference(path=FilePath(raw["path"]), hash=raw["hash"])
    except (KeyError, TypeError, ValueError) as e:
        raise DecodeError(f"Invalid file reference: {e!r}") from e
