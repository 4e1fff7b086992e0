"""
Tests for the dishka container wiring.

Run with: pytest tests/test_container.py -v
"""

from dishka import Provider, Scope, provide

from chatsync.application.messaging_client import MessagingClient
from chatsync.domain.ports.backend import BackendPort
from chatsync.domain.value_objects.cache_key import messages_key
from chatsync.domain.value_objects.chat_id import ChatId
from chatsync.domain.value_objects.principal_id import PrincipalId
from chatsync.infrastructure.cache.cache_store import CacheStore
from chatsync.setup.ioc import create_container
from tests.conftest import ALICE, FakeBackend


class FakeBackendProvider(Provider):
    def __init__(self, backend: FakeBackend):
        super().__init__()
        self._backend = backend

    @provide(scope=Scope.APP)
    def get_backend(self) -> BackendPort:
        return self._backend


async def test_container_builds_a_working_client():
    backend = FakeBackend()
    backend.messages["c1"] = []
    container = create_container(PrincipalId(ALICE), FakeBackendProvider(backend))

    client = await container.get(MessagingClient)
    assert client is await container.get(MessagingClient)
    assert client.store is await container.get(CacheStore)
    assert client.principal == PrincipalId(ALICE)

    result = await client.send_message(ChatId("c1"), "hello")
    assert result.ok
    assert backend.count("send_message") == 1

    await container.close()
    assert client.store.get(messages_key("c1")) is None
