"""
HTTP Backend - BackendPort over an HTTP gateway in front of the backend.

Wire protocol:
    POST {BACKEND_URL}/api/{operation}
    body     {"args": [...positional arguments...]}
    response {"result": <wire value>}      2xx
             {"detail": "<reason>"}        4xx/5xx

Error mapping:
- httpx.TransportError (connect, read, timeout) -> TransportUnavailable,
  and is_available turns False for `retry_after` seconds; after that the
  next call is let through to probe the backend again
- HTTP status >= 400 -> RemoteRejected with the backend's detail
- Non-JSON success body -> RemoteRejected

Authentication and retries are the gateway's concern; pass a preconfigured
httpx.AsyncClient to add headers or a custom transport.
"""

import logging
import time
from typing import Any, Callable, Optional

import httpx

from chatsync.config.settings import Config
from chatsync.domain.exceptions import RemoteRejected, TransportUnavailable
from chatsync.domain.ports.backend import BackendPort

logger = logging.getLogger(__name__)


class HttpBackend(BackendPort):
    """Calls backend operations through a JSON-over-HTTP gateway."""

    def __init__(
        self,
        base_url: str = Config.BACKEND_URL,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = Config.BACKEND_API_TIMEOUT,
        retry_after: float = Config.BACKEND_RETRY_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            base_url: Gateway URL, e.g. http://127.0.0.1:4943
            client: Optional preconfigured client (owned by the caller)
            timeout: Request timeout in seconds when creating our own client
            retry_after: Seconds is_available stays False after a connection failure
            clock: Monotonic time source
        """
        self._base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._retry_after = retry_after
        self._clock = clock
        self._unavailable_since: Optional[float] = None

    @property
    def is_available(self) -> bool:
        if self._unavailable_since is None:
            return True
        return self._clock() - self._unavailable_since >= self._retry_after

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _call(self, operation: str, *args: Any) -> Any:
        url = f"{self._base_url}/api/{operation}"
        try:
            response = await self._client.post(url, json={"args": list(args)})
        except httpx.TransportError as e:
            if self._unavailable_since is None:
                logger.warning(f"Backend unreachable during {operation}: {e!r}")
            self._unavailable_since = self._clock()
            raise TransportUnavailable(f"{operation}: {e}") from e

        if self._unavailable_since is not None:
            logger.info("Backend reachable again")
            self._unavailable_since = None

        if response.status_code >= 400:
            error_detail = response.text
            try:
                error_detail = response.json().get("detail", error_detail)
            except (ValueError, AttributeError):
                pass
            raise RemoteRejected(
                f"{operation} failed ({response.status_code}): {error_detail}",
                operation=operation,
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise RemoteRejected(
                f"{operation} returned a non-JSON body", operation=operation
            ) from e
        return data.get("result") if isinstance(data, dict) else None

    # ==================== CHATS AND MESSAGES ====================

    async def get_chat_list(self) -> list[dict[str, Any]]:
        return await self._call("getChatList") or []

    async def get_messages(self, chat_id: str) -> Any:
        return await self._call("getMessages", chat_id)

    async def send_message(self, chat_id: str, content: str) -> None:
        await self._call("sendMessage", chat_id, content)

    async def delete_message_for_me(self, message_id: str) -> None:
        await self._call("deleteMessageForMe", message_id)

    async def delete_message_for_everyone(self, chat_id: str, message_id: str) -> None:
        await self._call("deleteMessageForEveryone", chat_id, message_id)

    async def delete_chat_for_me(self, chat_id: str) -> None:
        await self._call("deleteChatForMe", chat_id)

    async def delete_chat_for_everyone(self, chat_id: str) -> None:
        await self._call("deleteChatForEveryone", chat_id)

    async def create_chat(self, participant: str) -> str:
        return await self._call("createChat", participant)

    async def find_existing_chat(self, participant1: str, participant2: str) -> Any:
        return await self._call("findExistingChat", participant1, participant2)

    # ==================== USERS ====================

    async def get_user_by_principal(self, principal: str) -> Any:
        return await self._call("getUserByPrincipal", principal)

    async def get_user_by_username(self, username: str) -> Any:
        return await self._call("getUserByUsername", username)

    async def register_user(self, username: str) -> None:
        await self._call("registerUser", username)

    async def update_bio(self, bio: str) -> None:
        await self._call("updateBio", bio)

    async def update_profile_picture(self, path: str) -> None:
        await self._call("updateProfilePicture", path)

    # ==================== FILE REFERENCES ====================

    async def list_file_references(self) -> list[dict[str, Any]]:
        return await self._call("listFileReferences") or []

    async def get_file_reference(self, path: str) -> Optional[dict[str, Any]]:
        return await self._call("getFileReference", path)

    async def register_file_reference(self, path: str, hash: str) -> None:
        await self._call("registerFileReference", path, hash)

    async def drop_file_reference(self, path: str) -> None:
        await self._call("dropFileReference", path)
