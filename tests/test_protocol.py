"""Tests for push reply decoding."""

import pytest

from resp_pubsub.errors import PubSubProtocolError
from resp_pubsub.protocol import PushDecoder
from resp_pubsub.types import (
    EventKind,
    Message,
    PMessage,
    PSubscribed,
    PUnsubscribed,
    Subscribed,
    Unsubscribed,
)


@pytest.fixture()
def decoder():
    return PushDecoder()


class TestDecode:
    def test_subscribe(self, decoder):
        event = decoder.decode(["subscribe", "foo", 1])
        assert event == Subscribed("foo", 1)
        assert event.kind is EventKind.SUBSCRIBE

    def test_unsubscribe(self, decoder):
        assert decoder.decode(["unsubscribe", "foo", 0]) == Unsubscribed("foo", 0)

    def test_unsubscribe_nil_name(self, decoder):
        assert decoder.decode(["unsubscribe", None, 0]) == Unsubscribed(None, 0)
        assert decoder.decode(["punsubscribe", None, 0]) == PUnsubscribed(None, 0)

    def test_message(self, decoder):
        assert decoder.decode(["message", "foo", "hello"]) == Message("foo", "hello")

    def test_psubscribe(self, decoder):
        assert decoder.decode(["psubscribe", "f*", 2]) == PSubscribed("f*", 2)

    def test_pmessage(self, decoder):
        event = decoder.decode(["pmessage", "f*", "foo", "hi"])
        assert event == PMessage("f*", "foo", "hi")

    def test_bytes_names_decoded_payload_untouched(self, decoder):
        event = decoder.decode([b"message", b"foo", b"\xff\x00"])
        assert event.channel == "foo"
        assert event.payload == b"\xff\x00"

    def test_kind_is_case_insensitive(self, decoder):
        assert decoder.decode(["SUBSCRIBE", "foo", 1]).kind is EventKind.SUBSCRIBE

    def test_numeric_string_count(self, decoder):
        assert decoder.decode(["subscribe", "foo", b"3"]).total == 3

    def test_custom_encoding(self):
        decoder = PushDecoder("latin-1")
        assert decoder.decode([b"message", b"caf\xe9", b"x"]).channel == "café"


class TestMalformed:
    @pytest.mark.parametrize(
        "reply",
        [
            "PONG",
            [],
            None,
            ["bogus", "foo", 1],
            ["message", "foo"],
            ["pmessage", "f*", "foo"],
            ["subscribe", "foo", "many"],
            ["subscribe", 42, 1],
            [b"message", b"\xff", b"x"],
        ],
    )
    def test_rejected(self, decoder, reply):
        with pytest.raises(PubSubProtocolError):
            decoder.decode(reply)
