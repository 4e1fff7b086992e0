import asyncio
import itertools
from typing import Any, Optional

import pytest

from chatsync.application.messaging_client import MessagingClient
from chatsync.application.queries import build_query_definitions
from chatsync.application.sync.invalidation_router import InvalidationRouter
from chatsync.application.sync.mutation_pipeline import MutationPipeline
from chatsync.application.sync.query_coordinator import QueryCoordinator
from chatsync.domain.ports.backend import BackendPort
from chatsync.domain.services.entity_codec import encode_message_list
from chatsync.domain.value_objects.principal_id import PrincipalId
from chatsync.infrastructure.cache.cache_store import CacheStore

ALICE = "alice-principal"
BOB = "bob-principal"
CAROL = "carol-principal"

BASE_TIME_NS = 1_700_000_000_000_000_000


def wire_message(id: str, sender: str = BOB, content: str = "hi", ts: int = BASE_TIME_NS) -> dict:
    return {"id": id, "sender": sender, "content": content, "encrypted": True, "timestamp": ts}


def wire_chat(id: str, participants=(ALICE, BOB), created: int = BASE_TIME_NS, last: Optional[int] = None) -> dict:
    return {
        "id": id,
        "participants": list(participants),
        "lastActivity": last if last is not None else created,
        "createdAt": created,
    }


def wire_user(principal: str, username: str, bio: Optional[str] = None, picture: Optional[str] = None) -> dict:
    return {
        "principal": principal,
        "username": username,
        "createdAt": BASE_TIME_NS,
        "bio": [bio] if bio is not None else [],
        "profilePicture": [picture] if picture is not None else [],
    }


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeBackend(BackendPort):
    """In-memory backend. Calls can be held on a gate or made to fail per operation."""

    def __init__(self, principal: str = ALICE):
        self.principal = principal
        self.available = True
        self.calls: list[tuple[str, tuple]] = []
        self.chats: dict[str, dict] = {}
        self.messages: dict[str, list[dict]] = {}
        self.raw_messages: dict[str, Any] = {}
        self.users: dict[str, dict] = {}
        self.files: dict[str, str] = {}
        self.failures: dict[str, Exception] = {}
        self._gates: dict[str, asyncio.Event] = {}
        self._ids = itertools.count(1)

    # ----- test controls -----

    def hold(self, operation: str) -> None:
        self._gates[operation] = asyncio.Event()

    def release(self, operation: str) -> None:
        self._gates.pop(operation).set()

    def fail(self, operation: str, error: Exception) -> None:
        self.failures[operation] = error

    def count(self, operation: str) -> int:
        return sum(1 for op, _ in self.calls if op == operation)

    async def _enter(self, operation: str, *args) -> None:
        self.calls.append((operation, args))
        gate = self._gates.get(operation)
        if gate is not None:
            await gate.wait()
        error = self.failures.get(operation)
        if error is not None:
            raise error

    # ----- BackendPort -----

    @property
    def is_available(self) -> bool:
        return self.available

    async def get_chat_list(self):
        await self._enter("get_chat_list")
        return [
            {**chat, "messages": encode_message_list(self.messages.get(chat_id, []))}
            for chat_id, chat in self.chats.items()
        ]

    async def get_messages(self, chat_id):
        await self._enter("get_messages", chat_id)
        if chat_id in self.raw_messages:
            return self.raw_messages[chat_id]
        return encode_message_list(self.messages.get(chat_id, []))

    async def send_message(self, chat_id, content):
        await self._enter("send_message", chat_id, content)
        self.messages.setdefault(chat_id, []).append(
            wire_message(f"m{next(self._ids)}", self.principal, content)
        )

    async def delete_message_for_me(self, message_id):
        await self._enter("delete_message_for_me", message_id)
        for messages in self.messages.values():
            messages[:] = [m for m in messages if m["id"] != message_id]

    async def delete_message_for_everyone(self, chat_id, message_id):
        await self._enter("delete_message_for_everyone", chat_id, message_id)
        self.messages[chat_id] = [m for m in self.messages.get(chat_id, []) if m["id"] != message_id]

    async def delete_chat_for_me(self, chat_id):
        await self._enter("delete_chat_for_me", chat_id)
        self.chats.pop(chat_id, None)

    async def delete_chat_for_everyone(self, chat_id):
        await self._enter("delete_chat_for_everyone", chat_id)
        self.chats.pop(chat_id, None)
        self.messages.pop(chat_id, None)

    async def create_chat(self, participant):
        await self._enter("create_chat", participant)
        chat_id = f"chat-{next(self._ids)}"
        self.chats[chat_id] = wire_chat(chat_id, (self.principal, participant))
        return chat_id

    async def find_existing_chat(self, participant1, participant2):
        await self._enter("find_existing_chat", participant1, participant2)
        for chat_id, chat in self.chats.items():
            if {participant1, participant2} <= set(chat["participants"]):
                return [chat_id]
        return []

    async def get_user_by_principal(self, principal):
        await self._enter("get_user_by_principal", principal)
        user = self.users.get(principal)
        return [user] if user else []

    async def get_user_by_username(self, username):
        await self._enter("get_user_by_username", username)
        for user in self.users.values():
            if user["username"] == username:
                return [user]
        return []

    async def register_user(self, username):
        await self._enter("register_user", username)
        self.users[self.principal] = wire_user(self.principal, username)

    async def update_bio(self, bio):
        await self._enter("update_bio", bio)
        self.users[self.principal]["bio"] = [bio] if bio else []

    async def update_profile_picture(self, path):
        await self._enter("update_profile_picture", path)
        self.users[self.principal]["profilePicture"] = [path] if path else []

    async def list_file_references(self):
        await self._enter("list_file_references")
        return [{"path": path, "hash": hash} for path, hash in self.files.items()]

    async def get_file_reference(self, path):
        await self._enter("get_file_reference", path)
        if path not in self.files:
            return None
        return {"path": path, "hash": self.files[path]}

    async def register_file_reference(self, path, hash):
        await self._enter("register_file_reference", path, hash)
        self.files[path] = hash

    async def drop_file_reference(self, path):
        await self._enter("drop_file_reference", path)
        self.files.pop(path, None)


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def backend():
    return FakeBackend()


@pytest.fixture()
def store(clock):
    return CacheStore(clock=clock)


@pytest.fixture()
def router(store):
    return InvalidationRouter(store)


@pytest.fixture()
def coordinator(store, backend):
    return QueryCoordinator(store, build_query_definitions(backend))


@pytest.fixture()
def pipeline(store, router, backend):
    return MutationPipeline(store, router, backend)


@pytest.fixture()
async def client(backend, store, coordinator, pipeline, router):
    """Messaging client for ALICE wired to the fake backend."""
    messaging_client = MessagingClient(
        PrincipalId(ALICE), backend, store, coordinator, pipeline, router
    )
    yield messaging_client
    await messaging_client.close()
