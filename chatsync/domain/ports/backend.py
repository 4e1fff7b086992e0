"""
Backend Port - Interface for the remote messaging backend.
Implementation: chatsync/infrastructure/transport/http_backend.py

Methods return raw wire shapes (dicts, lists, the recursive message list).
Decoding into entities belongs to the application query handlers.

Failures:
- TransportUnavailable: no connection to the backend
- RemoteRejected: the call completed but the backend reported failure
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class BackendPort(ABC):
    @property
    @abstractmethod
    def is_available(self) -> bool:
        """False while the last call failed to reach the backend."""

    # Chats and messages
    @abstractmethod
    async def get_chat_list(self) -> list[dict[str, Any]]: ...

    @abstractmethod
    async def get_messages(self, chat_id: str) -> Any: ...

    @abstractmethod
    async def send_message(self, chat_id: str, content: str) -> None: ...

    @abstractmethod
    async def delete_message_for_me(self, message_id: str) -> None: ...

    @abstractmethod
    async def delete_message_for_everyone(self, chat_id: str, message_id: str) -> None: ...

    @abstractmethod
    async def delete_chat_for_me(self, chat_id: str) -> None: ...

    @abstractmethod
    async def delete_chat_for_everyone(self, chat_id: str) -> None: ...

    @abstractmethod
    async def create_chat(self, participant: str) -> str: ...

    @abstractmethod
    async def find_existing_chat(self, participant1: str, participant2: str) -> Any: ...

    # Users
    @abstractmethod
    async def get_user_by_principal(self, principal: str) -> Any: ...

    @abstractmethod
    async def get_user_by_username(self, username: str) -> Any: ...

    @abstractmethod
    async def register_user(self, username: str) -> None: ...

    @abstractmethod
    async def update_bio(self, bio: str) -> None: ...

    @abstractmethod
    async def update_profile_picture(self, path: str) -> None: ...

    # File references
    @abstractmethod
    async def list_file_references(self) -> list[dict[str, Any]]: ...

    @abstractmethod
    async def get_file_reference(self, path: str) -> Optional[dict[str, Any]]: ...

    @abstractmethod
    async def register_file_reference(self, path: str, hash: str) -> None: ...

    @abstractmethod
    async def drop_file_reference(self, path: str) -> None: ...
