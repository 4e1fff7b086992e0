"""
Unit tests for the entity codec.

Run with: pytest tests/test_entity_codec.py -v
"""

from datetime import datetime, timezone

import pytest

from chatsync.domain.exceptions import DecodeError, MalformedListError
from chatsync.domain.services.entity_codec import (
    decode_chat,
    decode_file_reference,
    decode_message_list,
    decode_optional,
    decode_time,
    decode_user,
    encode_message_list,
)
from chatsync.domain.value_objects.file_path import FilePath
from chatsync.domain.value_objects.timestamp import Timestamp
from tests.conftest import ALICE, BASE_TIME_NS, BOB, wire_chat, wire_message, wire_user


class TestMessageList:
    """Recursive (head, tail) list decoding."""

    @pytest.mark.parametrize("raw", [None, []])
    def test_terminator_decodes_to_empty_list(self, raw):
        assert decode_message_list(raw) == []

    def test_pairs_decode_in_encounter_order(self):
        raw = encode_message_list([
            wire_message("m1", content="first"),
            wire_message("m2", content="second"),
            wire_message("m3", content="third"),
        ])

        messages = decode_message_list(raw)

        assert [m.id.value for m in messages] == ["m1", "m2", "m3"]
        assert [m.content for m in messages] == ["first", "second", "third"]
        assert not any(m.provisional for m in messages)

    def test_optional_wrapped_nodes_are_accepted(self):
        """The backend IDL renders each node as an optional: [[head, tail]]."""
        raw = [[wire_message("m1"), [[wire_message("m2"), []]]]]

        messages = decode_message_list(raw)

        assert [m.id.value for m in messages] == ["m1", "m2"]

    @pytest.mark.parametrize(
        "raw",
        [
            "oops",
            42,
            {"id": "m1"},
            [wire_message("m1"), None, None],
        ],
    )
    def test_non_pair_raises(self, raw):
        with pytest.raises(MalformedListError):
            decode_message_list(raw)

    def test_broken_tail_raises_instead_of_partial_result(self):
        raw = [wire_message("m1"), [wire_message("m2"), "broken"]]

        with pytest.raises(MalformedListError) as exc_info:
            decode_message_list(raw)

        assert exc_info.value.position == 2

    def test_invalid_head_reports_position(self):
        raw = [wire_message("m1"), [{"id": "m2"}, None]]

        with pytest.raises(MalformedListError) as exc_info:
            decode_message_list(raw)

        assert exc_info.value.position == 1
        assert "element 1" in str(exc_info.value)

    def test_deep_list_does_not_hit_recursion_limit(self):
        raw = encode_message_list([wire_message(f"m{i}") for i in range(50_000)])

        messages = decode_message_list(raw)

        assert len(messages) == 50_000
        assert messages[-1].id.value == "m49999"

    def test_length_guard(self):
        raw = encode_message_list([wire_message(f"m{i}") for i in range(3)])

        assert len(decode_message_list(raw, max_length=3)) == 3
        with pytest.raises(MalformedListError):
            decode_message_list(raw, max_length=2)

    def test_cyclic_list_hits_length_guard(self):
        node = [wire_message("m1"), None]
        node[1] = node

        with pytest.raises(MalformedListError):
            decode_message_list(node, max_length=10)


class TestScalars:
    def test_time_is_nanoseconds_since_epoch(self):
        assert decode_time(0).to_datetime() == datetime(1970, 1, 1, tzinfo=timezone.utc)
        assert decode_time(1_500_000_000).to_datetime() == datetime(1970, 1, 1, 0, 0, 1, 500000, tzinfo=timezone.utc)

    def test_time_keeps_nanosecond_precision(self):
        earlier = decode_time(BASE_TIME_NS)
        later = decode_time(BASE_TIME_NS + 10)

        assert later.ns - earlier.ns == 10
        assert later > earlier
        assert later != earlier
        assert later.to_datetime() == earlier.to_datetime()

    def test_time_accepts_numeric_string(self):
        assert decode_time(str(BASE_TIME_NS)) == decode_time(BASE_TIME_NS)

    @pytest.mark.parametrize("raw", [None, "soon", 1.5, True])
    def test_invalid_time_raises(self, raw):
        with pytest.raises(DecodeError):
            decode_time(raw)

    def test_optional_unwrapping(self):
        assert decode_optional([]) is None
        assert decode_optional(None) is None
        assert decode_optional(["x"]) == "x"
        assert decode_optional("x") == "x"
        with pytest.raises(DecodeError):
            decode_optional(["x", "y"])


class TestRecords:
    def test_user_optional_fields(self):
        user = decode_user([wire_user(BOB, "bob", bio="hello")])

        assert user.username == "bob"
        assert user.bio == "hello"
        assert user.profile_picture is None

    @pytest.mark.parametrize("raw", [None, []])
    def test_absent_user_is_none(self, raw):
        assert decode_user(raw) is None

    def test_user_missing_field_raises(self):
        with pytest.raises(DecodeError):
            decode_user({"principal": BOB, "createdAt": BASE_TIME_NS})

    def test_chat_with_embedded_messages(self):
        raw = {
            **wire_chat("c1", last=BASE_TIME_NS + 10),
            "messages": encode_message_list([wire_message("m1")]),
        }

        chat = decode_chat(raw)

        assert chat.id.value == "c1"
        assert [p.value for p in chat.participants] == [ALICE, BOB]
        assert [m.id.value for m in chat.messages] == ["m1"]
        assert chat.last_activity == Timestamp(BASE_TIME_NS + 10)
        assert chat.last_activity > chat.created_at

    def test_chat_activity_before_creation_is_rejected(self):
        raw = wire_chat("c1", created=BASE_TIME_NS, last=BASE_TIME_NS - 1_000_000)

        with pytest.raises(DecodeError):
            decode_chat(raw)

    def test_activity_one_nanosecond_before_creation_is_rejected(self):
        raw = wire_chat("c1", created=BASE_TIME_NS, last=BASE_TIME_NS - 1)

        with pytest.raises(DecodeError):
            decode_chat(raw)

    def test_file_reference(self):
        ref = decode_file_reference({"path": "avatars/alice.png", "hash": "abc123"})

        assert ref.path == FilePath("avatars/alice.png")
        assert ref.hash == "abc123"
        assert decode_file_reference(None) is None
