"""
Tests for the HTTP transport, using httpx.MockTransport.

Run with: pytest tests/test_http_backend.py -v
"""

import json

import httpx
import pytest

from chatsync.application.commands.chat import SendMessageCommand, SendMessageHandler
from chatsync.application.sync.mutation_pipeline import MutationPipeline
from chatsync.domain.exceptions import RemoteRejected, TransportUnavailable
from chatsync.domain.value_objects.chat_id import ChatId
from chatsync.domain.value_objects.principal_id import PrincipalId
from chatsync.infrastructure.transport.http_backend import HttpBackend
from tests.conftest import ALICE, FakeClock

BASE_URL = "http://backend.test"


def make_backend(handler, **kwargs) -> HttpBackend:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpBackend(base_url=BASE_URL + "/", client=client, **kwargs)


async def test_call_posts_positional_args():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"result": [{"id": "m1"}, None]})

    backend = make_backend(handler)
    result = await backend.get_messages("c1")

    assert result == [{"id": "m1"}, None]
    assert requests[0].method == "POST"
    assert requests[0].url == httpx.URL(f"{BASE_URL}/api/getMessages")
    assert json.loads(requests[0].content) == {"args": ["c1"]}


async def test_multiple_arguments_keep_their_order():
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"result": None})

    backend = make_backend(handler)
    await backend.delete_message_for_everyone("c1", "m1")

    assert bodies == [{"args": ["c1", "m1"]}]


async def test_rejection_carries_backend_detail():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json={"detail": "Only the sender can delete for everyone"})

    backend = make_backend(handler)
    with pytest.raises(RemoteRejected) as exc_info:
        await backend.delete_message_for_everyone("c1", "m1")

    assert exc_info.value.status_code == 403
    assert exc_info.value.operation == "deleteMessageForEveryone"
    assert "Only the sender" in str(exc_info.value)
    assert backend.is_available


async def test_non_json_body_is_rejected():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>gateway</html>")

    backend = make_backend(handler)
    with pytest.raises(RemoteRejected):
        await backend.get_chat_list()


async def test_connection_failure_marks_backend_unavailable_until_next_success():
    state = {"down": True}

    def handler(request: httpx.Request) -> httpx.Response:
        if state["down"]:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, json={"result": []})

    backend = make_backend(handler)
    with pytest.raises(TransportUnavailable):
        await backend.get_chat_list()
    assert not backend.is_available

    state["down"] = False
    assert await backend.get_chat_list() == []
    assert backend.is_available


async def test_unavailability_expires_after_retry_window():
    clock = FakeClock()

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    backend = make_backend(handler, retry_after=5, clock=clock)
    with pytest.raises(TransportUnavailable):
        await backend.get_chat_list()

    clock.advance(4.9)
    assert not backend.is_available
    clock.advance(0.1)
    assert backend.is_available

    # A failed retry starts a new window
    with pytest.raises(TransportUnavailable):
        await backend.get_chat_list()
    assert not backend.is_available


async def test_mutations_resume_once_retry_window_has_passed(store, router):
    clock = FakeClock()
    state = {"down": True}
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if state["down"]:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, json={"result": None})

    backend = make_backend(handler, retry_after=5, clock=clock)
    send = SendMessageHandler(backend, MutationPipeline(store, router, backend), router)
    command = SendMessageCommand(ChatId("c1"), PrincipalId(ALICE), "hello")

    first = await send.execute(command)
    assert isinstance(first.error, TransportUnavailable)

    state["down"] = False
    refused = await send.execute(command)
    assert isinstance(refused.error, TransportUnavailable)
    assert len(requests) == 1

    clock.advance(5)
    result = await send.execute(command)

    assert result.ok
    assert len(requests) == 2
    assert backend.is_available


async def test_owned_client_is_closed():
    backend = HttpBackend(base_url=BASE_URL)

    await backend.aclose()

    assert backend._client.is_closed
