"""
Messaging Client - the surface the rendering layer talks to.

Two primitives:
- use_entity(key): subscribe to a cache key and read {value, is_stale, is_fetching}
- run_mutation(spec): run any MutationSpec through the pipeline

Everything else is a named shortcut that builds the matching query or
command for the signed-in principal.

Example Usage:
    container = create_container(PrincipalId("2vxsx-fae"))
    client = await container.get(MessagingClient)
    client.start()

    with client.use_entity(messages_key(chat_id), on_change) as sub:
        print(sub.view().value)
        await client.send_message(chat_id, "hello")

    await client.close()
"""

import logging
from typing import Any, Callable, Iterable, Optional

from chatsync.application.commands.chat import (
    CreateChatCommand,
    CreateChatHandler,
    DeleteChatCommand,
    DeleteChatHandler,
    ForwardMessageCommand,
    ForwardMessageHandler,
    SendMessageCommand,
    SendMessageHandler,
)
from chatsync.application.commands.files import (
    DropFileReferenceCommand,
    FileReferenceHandler,
    RegisterFileReferenceCommand,
)
from chatsync.application.commands.messages import DeleteMessageCommand, DeleteMessageHandler
from chatsync.application.commands.users import (
    RegisterUserCommand,
    RegisterUserHandler,
    UpdateBioCommand,
    UpdateProfileHandler,
    UpdateProfilePictureCommand,
)
from chatsync.application.common.result import MutationResult
from chatsync.application.dto.entity_view import EntityView
from chatsync.application.queries.chats import FindExistingChatHandler, FindExistingChatQuery
from chatsync.application.queries.users import GetUserHandler, SearchUserHandler, SearchUserQuery
from chatsync.application.sync.invalidation_router import InvalidationRouter
from chatsync.application.sync.mutation_pipeline import MutationPipeline, MutationSpec
from chatsync.application.sync.query_coordinator import QueryCoordinator
from chatsync.config.settings import Config
from chatsync.domain.entities.message import Message
from chatsync.domain.entities.user import User
from chatsync.domain.exceptions import TransportUnavailable
from chatsync.domain.ports.backend import BackendPort
from chatsync.domain.value_objects.cache_key import CacheKey, messages_key
from chatsync.domain.value_objects.chat_id import ChatId
from chatsync.domain.value_objects.delete_scope import DeleteScope
from chatsync.domain.value_objects.file_path import FilePath
from chatsync.domain.value_objects.message_id import MessageId
from chatsync.domain.value_objects.principal_id import PrincipalId
from chatsync.infrastructure.cache.cache_store import CacheStore

logger = logging.getLogger(__name__)

ViewListener = Callable[[EntityView], None]


class Subscription:
    """Live interest in one cache key; close it (or leave the with-block) to unsubscribe."""

    def __init__(self, client: "MessagingClient", key: CacheKey, listener: Optional[ViewListener]):
        self.key = key
        self._client = client
        self._listener = listener
        self._unsubscribe = client.store.subscribe(key, self._on_change)

    def _on_change(self, key, entry) -> None:
        if self._listener:
            self._listener(EntityView.from_entry(entry))

    def view(self) -> EntityView:
        return self._client.view(self.key)

    def close(self) -> None:
        self._unsubscribe()

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class MessagingClient:
    def __init__(
        self,
        principal: PrincipalId,
        backend: BackendPort,
        store: CacheStore,
        coordinator: QueryCoordinator,
        pipeline: MutationPipeline,
        router: InvalidationRouter,
    ):
        self.principal = principal
        self.store = store
        self._backend = backend
        self._coordinator = coordinator
        self._pipeline = pipeline

        self._send = SendMessageHandler(backend, pipeline, router)
        self._forward = ForwardMessageHandler(self._send)
        self._create_chat = CreateChatHandler(backend, pipeline, router)
        self._delete_chat = DeleteChatHandler(backend, pipeline, router)
        self._delete_message = DeleteMessageHandler(backend, pipeline, router)
        self._register_user = RegisterUserHandler(backend, pipeline, router)
        self._update_profile = UpdateProfileHandler(backend, pipeline, router)
        self._file_references = FileReferenceHandler(backend, pipeline, router)
        self._find_chat = FindExistingChatHandler(backend)
        self._search_user = SearchUserHandler(GetUserHandler(backend))

    # ==================== LIFECYCLE ====================

    def start(self, interval: float = Config.POLL_INTERVAL_SECONDS) -> None:
        """Start polling subscribed keys (requires a running event loop)."""
        self._coordinator.start(interval)

    async def close(self) -> None:
        """Stop polling, drop in-flight fetches and clear the cache (sign-out)."""
        await self._coordinator.stop()
        self.store.clear()
        logger.info(f"Session of {self.principal} closed")

    # ==================== READ PRIMITIVES ====================

    def use_entity(self, key: CacheKey, listener: Optional[ViewListener] = None) -> Subscription:
        """
        Subscribe to `key`. The first subscriber of a key triggers a fetch
        when it has no value or an expired one.
        """
        return Subscription(self, key, listener)

    def view(self, key: CacheKey) -> EntityView:
        return EntityView.from_entry(
            self.store.get(key), in_flight=self._coordinator.is_fetching(key)
        )

    async def refresh(self, key: CacheKey) -> Any:
        """
        Fetch `key` now.

        Without a backend connection the cached value is returned (None when
        nothing is cached). Other errors, e.g. MalformedListError or
        RemoteRejected, reach the caller; the cache keeps its value.
        """
        try:
            return await self._coordinator.fetch(key)
        except TransportUnavailable as e:
            entry = self.store.get(key)
            logger.info(f"Serving cached {key}, backend unavailable: {e}")
            return entry.value if entry is not None and entry.has_value else None

    async def get_messages(self, chat_id: ChatId) -> tuple[Message, ...]:
        return await self.refresh(messages_key(chat_id))

    async def find_existing_chat(self, other: PrincipalId) -> Optional[ChatId]:
        return await self._find_chat.execute(FindExistingChatQuery(self.principal, other))

    async def search_user(self, term: str) -> Optional[User]:
        return await self._search_user.execute(SearchUserQuery(term))

    # ==================== WRITE PRIMITIVE ====================

    async def run_mutation(self, spec: MutationSpec) -> MutationResult:
        return await self._pipeline.execute(spec)

    # ==================== CHATS AND MESSAGES ====================

    async def send_message(self, chat_id: ChatId, content: str) -> MutationResult[None]:
        return await self._send.execute(SendMessageCommand(chat_id, self.principal, content))

    async def forward_message(
        self, message: Message, targets: Iterable[ChatId]
    ) -> dict[ChatId, MutationResult[None]]:
        return await self._forward.execute(
            ForwardMessageCommand(message, tuple(targets), self.principal)
        )

    async def delete_message_for_me(self, chat_id: ChatId, message_id: MessageId) -> MutationResult[None]:
        return await self._delete_message.execute(
            DeleteMessageCommand(chat_id, message_id, DeleteScope.FOR_ME)
        )

    async def delete_message_for_everyone(self, chat_id: ChatId, message_id: MessageId) -> MutationResult[None]:
        return await self._delete_message.execute(
            DeleteMessageCommand(chat_id, message_id, DeleteScope.FOR_EVERYONE)
        )

    async def create_chat(self, participant: PrincipalId) -> MutationResult[ChatId]:
        return await self._create_chat.execute(CreateChatCommand(participant))

    async def open_chat_with(self, participant: PrincipalId) -> MutationResult[ChatId]:
        """Reuse the chat shared with `participant`, creating one if none exists."""
        existing = await self.find_existing_chat(participant)
        if existing:
            return MutationResult.success(existing)
        return await self.create_chat(participant)

    async def delete_chat_for_me(self, chat_id: ChatId) -> MutationResult[None]:
        return await self._delete_chat.execute(DeleteChatCommand(chat_id, DeleteScope.FOR_ME))

    async def delete_chat_for_everyone(self, chat_id: ChatId) -> MutationResult[None]:
        return await self._delete_chat.execute(DeleteChatCommand(chat_id, DeleteScope.FOR_EVERYONE))

    # ==================== PROFILE ====================

    async def register_user(self, username: str) -> MutationResult[None]:
        return await self._register_user.execute(RegisterUserCommand(self.principal, username))

    async def update_bio(self, bio: str) -> MutationResult[None]:
        return await self._update_profile.execute(UpdateBioCommand(self.principal, bio))

    async def update_profile_picture(self, path: Optional[str]) -> MutationResult[None]:
        return await self._update_profile.execute(UpdateProfilePictureCommand(self.principal, path))

    # ==================== FILE REFERENCES ====================

    async def register_file_reference(self, path: FilePath, hash: str) -> MutationResult[None]:
        return await self._file_references.execute(RegisterFileReferenceCommand(path, hash))

    async def drop_file_reference(self, path: FilePath) -> MutationResult[None]:
        return await self._file_references.execute(DropFileReferenceCommand(path))
