"""
Unit tests for the optimistic mutation pipeline.

Run with: pytest tests/test_mutation_pipeline.py -v
"""

import asyncio

import pytest

from chatsync.application.sync.invalidation_router import MutationKind
from chatsync.application.sync.mutation_pipeline import MutationSpec
from chatsync.domain.exceptions import DomainValidationError, RemoteRejected, TransportUnavailable
from chatsync.domain.value_objects.cache_key import chat_list_key, messages_key, user_key
from chatsync.domain.value_objects.chat_id import ChatId
from chatsync.domain.value_objects.message_id import MessageId
from tests.conftest import ALICE, wire_message

C1 = ChatId("c1")
C2 = ChatId("c2")
KEY = messages_key(C1)


async def wait_for_call(backend, operation):
    while not backend.count(operation):
        await asyncio.sleep(0)


@pytest.fixture()
async def loaded(client, backend, store):
    """Chat c1 with one message from Bob, loaded into the cache."""
    backend.messages["c1"] = [wire_message("m1", content="hello alice")]
    await client.refresh(KEY)
    return store.get(KEY).value


class TestOptimisticApply:
    async def test_send_is_visible_before_backend_settles(self, client, backend, store, loaded):
        backend.hold("send_message")
        task = asyncio.create_task(client.send_message(C1, "hi bob"))
        await wait_for_call(backend, "send_message")

        predicted = store.get(KEY).value
        assert len(predicted) == 2
        assert predicted[-1].content == "hi bob"
        assert predicted[-1].provisional
        assert predicted[-1].id.is_provisional
        assert store.get(KEY).pending_mutations == 1

        backend.release("send_message")
        result = await task

        assert result.ok
        assert store.get(KEY).pending_mutations == 0

    async def test_refetch_replaces_provisional_copy(self, client, backend, store, coordinator, loaded):
        await client.send_message(C1, "hi bob")

        with client.use_entity(KEY):
            await coordinator.wait_idle()

        messages = store.get(KEY).value
        assert [m.content for m in messages] == ["hello alice", "hi bob"]
        assert not any(m.provisional for m in messages)

    async def test_empty_message_is_rejected_before_anything_is_applied(self, client, backend, store, loaded):
        with pytest.raises(DomainValidationError):
            await client.send_message(C1, "   ")

        assert store.get(KEY).value is loaded
        assert backend.count("send_message") == 0


class TestRollback:
    async def test_rejected_delete_restores_exact_previous_state(self, client, backend, store, loaded):
        backend.hold("delete_message_for_me")
        backend.fail("delete_message_for_me", RemoteRejected("not allowed"))
        task = asyncio.create_task(client.delete_message_for_me(C1, MessageId("m1")))
        await wait_for_call(backend, "delete_message_for_me")

        assert store.get(KEY).value == ()

        backend.release("delete_message_for_me")
        result = await task

        assert not result.ok
        assert isinstance(result.error, RemoteRejected)
        assert store.get(KEY).value is loaded
        assert not store.get(KEY).is_stale

    async def test_transport_lost_mid_flight_rolls_back(self, client, backend, store, loaded):
        backend.fail("send_message", TransportUnavailable())

        result = await client.send_message(C1, "hi bob")

        assert isinstance(result.error, TransportUnavailable)
        assert store.get(KEY).value is loaded
        with pytest.raises(TransportUnavailable):
            result.unwrap()

    async def test_transport_unavailable_refuses_without_applying(self, client, backend, store, loaded):
        backend.available = False
        seen = []
        store.subscribe(KEY, lambda key, entry: seen.append(entry))

        result = await client.send_message(C1, "hi bob")

        assert isinstance(result.error, TransportUnavailable)
        assert backend.count("send_message") == 0
        assert store.get(KEY).value is loaded
        assert all(entry.value is loaded for entry in seen)

    async def test_later_committed_mutation_wins_over_earlier_rollback(self, client, backend, store, loaded):
        backend.hold("delete_message_for_me")
        backend.fail("delete_message_for_me", RemoteRejected("not allowed"))
        delete = asyncio.create_task(client.delete_message_for_me(C1, MessageId("m1")))
        await wait_for_call(backend, "delete_message_for_me")

        sent = await client.send_message(C1, "hi bob")
        assert sent.ok
        after_send = store.get(KEY).value

        backend.release("delete_message_for_me")
        deleted = await delete

        assert not deleted.ok
        assert store.get(KEY).value is after_send
        assert [m.content for m in after_send] == ["hi bob"]
        assert store.get(KEY).is_stale

    async def test_restore_after_superseded_rollback_refetches_at_once(
        self, client, backend, store, coordinator, loaded
    ):
        with client.use_entity(KEY):
            backend.hold("delete_message_for_me")
            backend.fail("delete_message_for_me", RemoteRejected("not allowed"))
            delete = asyncio.create_task(client.delete_message_for_me(C1, MessageId("m1")))
            await wait_for_call(backend, "delete_message_for_me")

            backend.hold("send_message")
            backend.fail("send_message", RemoteRejected("chat closed"))
            send = asyncio.create_task(client.send_message(C1, "hi bob"))
            await wait_for_call(backend, "send_message")

            backend.release("delete_message_for_me")
            assert not (await delete).ok
            assert backend.count("get_messages") == 1

            backend.release("send_message")
            assert not (await send).ok
            await coordinator.wait_idle()

        assert backend.count("get_messages") == 2
        assert store.get(KEY).value == loaded
        assert not store.get(KEY).is_stale

    async def test_unexpected_error_rolls_back_then_propagates(self, client, store, loaded):
        async def remote():
            raise RuntimeError("bug in remote call")

        spec = MutationSpec(
            kind=MutationKind.SEND_MESSAGE,
            remote=remote,
            effects={KEY: lambda old: ()},
        )

        with pytest.raises(RuntimeError):
            await client.run_mutation(spec)

        assert store.get(KEY).value is loaded
        assert store.get(KEY).pending_mutations == 0

    async def test_cancelled_mutation_rolls_back(self, client, backend, store, loaded):
        backend.hold("send_message")
        task = asyncio.create_task(client.send_message(C1, "hi bob"))
        await wait_for_call(backend, "send_message")

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert store.get(KEY).value is loaded


class TestInvalidationAfterCommit:
    async def test_send_invalidates_exactly_messages_and_chat_list(self, client, store):
        for key in (chat_list_key(), messages_key(C1), messages_key(C2), user_key(ALICE)):
            store.set(key, ())

        await client.send_message(C1, "hi bob")

        stale = {key for key in store.keys() if store.get(key).is_stale}
        assert stale == {messages_key(C1), chat_list_key()}

    async def test_rollback_invalidates_nothing(self, client, backend, store):
        store.set(chat_list_key(), ())
        store.set(KEY, ())
        backend.fail("send_message", RemoteRejected("chat is gone"))

        await client.send_message(C1, "hi bob")

        assert not store.get(chat_list_key()).is_stale
        assert not store.get(KEY).is_stale
