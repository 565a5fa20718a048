# =============================================================================
# RESP Pub/Sub -- Push Reply Decoder
# =============================================================================
#
# Translates raw subscription-mode replies into push events:
#
#   ["subscribe", channel, total]          -> Subscribed
#   ["unsubscribe", channel|nil, total]    -> Unsubscribed
#   ["message", channel, payload]          -> Message
#   ["psubscribe", pattern, total]         -> PSubscribed
#   ["punsubscribe", pattern|nil, total]   -> PUnsubscribed
#   ["pmessage", pattern, channel, payload] -> PMessage
#
# Names are always decoded to str; payloads are passed through untouched.
# =============================================================================

from __future__ import annotations

from typing import Any

from .constants import DEFAULT_ENCODING, PUSH_ARITY
from .errors import PubSubProtocolError
from .types import (
    EventKind,
    Message,
    PMessage,
    PSubscribed,
    PUnsubscribed,
    PushEvent,
    Subscribed,
    Unsubscribed,
)


class PushDecoder:
    """Decode subscription-mode replies into :data:`PushEvent` values.

    Args:
        encoding: Codec used when the transport hands back ``bytes``.
    """

    def __init__(self, encoding: str = DEFAULT_ENCODING) -> None:
        self._encoding = encoding

    def decode(self, reply: Any) -> PushEvent:
        """Decode one push reply.

        Raises:
            PubSubProtocolError: If the reply is not a well-formed push array.
        """
        if not isinstance(reply, (list, tuple)) or not reply:
            raise PubSubProtocolError(f"Expected a push reply array, got {reply!r}")

        head = self._text(reply[0], "kind")
        try:
            kind = EventKind(head.lower())
        except ValueError:
            raise PubSubProtocolError(f"Unknown push reply kind {head!r}") from None

        if len(reply) != PUSH_ARITY[kind.value]:
            raise PubSubProtocolError(
                f"Malformed {kind.value} reply: expected {PUSH_ARITY[kind.value]} "
                f"elements, got {len(reply)}"
            )

        if kind is EventKind.MESSAGE:
            return Message(self._text(reply[1], "channel"), reply[2])
        if kind is EventKind.PMESSAGE:
            return PMessage(
                self._text(reply[1], "pattern"),
                self._text(reply[2], "channel"),
                reply[3],
            )

        total = self._count(reply[2])
        if kind is EventKind.SUBSCRIBE:
            return Subscribed(self._text(reply[1], "channel"), total)
        if kind is EventKind.PSUBSCRIBE:
            return PSubscribed(self._text(reply[1], "pattern"), total)

        # A bare unsubscribe with nothing subscribed acks with a nil name
        name = None if reply[1] is None else self._text(reply[1], "name")
        if kind is EventKind.UNSUBSCRIBE:
            return Unsubscribed(name, total)
        return PUnsubscribed(name, total)

    # -- Helpers ---------------------------------------------------------------

    def _text(self, value: Any, field: str) -> str:
        if isinstance(value, str):
            return value
        if isinstance(value, (bytes, bytearray)):
            try:
                return value.decode(self._encoding)
            except UnicodeDecodeError as exc:
                raise PubSubProtocolError(f"Undecodable {field}: {value!r}") from exc
        raise PubSubProtocolError(f"Expected a string {field}, got {value!r}")

    def _count(self, value: Any) -> int:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        try:
            return int(value)
        except (TypeError, ValueError):
            raise PubSubProtocolError(
                f"Expected an integer subscription count, got {value!r}"
            ) from None
