# =============================================================================
# RESP Pub/Sub -- Type Definitions
# =============================================================================

from __future__ import annotations

import os

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Union

from .constants import (
    DEFAULT_ENCODING,
    DEFAULT_URL,
    DRAIN_TIMEOUT,
    ENV_DRAIN_TIMEOUT,
    ENV_SOCKET_CONNECT_TIMEOUT,
    ENV_SOCKET_TIMEOUT,
    ENV_URL,
    PUSH_MESSAGE,
    PUSH_PMESSAGE,
    PUSH_PSUBSCRIBE,
    PUSH_PUNSUBSCRIBE,
    PUSH_SUBSCRIBE,
    PUSH_UNSUBSCRIBE,
    SOCKET_CONNECT_TIMEOUT,
    SOCKET_TIMEOUT,
)


class EventKind(str, Enum):
    """Push event kinds, valued by their wire name."""

    SUBSCRIBE = PUSH_SUBSCRIBE
    UNSUBSCRIBE = PUSH_UNSUBSCRIBE
    MESSAGE = PUSH_MESSAGE
    PSUBSCRIBE = PUSH_PSUBSCRIBE
    PUNSUBSCRIBE = PUSH_PUNSUBSCRIBE
    PMESSAGE = PUSH_PMESSAGE


class SubscriptionKind(str, Enum):
    """The two disjoint namespaces a connection can subscribe in."""

    CHANNEL = "channel"
    PATTERN = "pattern"


class DispatchState(str, Enum):
    """Dispatch loop lifecycle.

    ENTERING -> ACTIVE -> TERMINATED on the normal path.
    DRAINING sits between ACTIVE (or ENTERING) and TERMINATED when the
    loop is torn down after a handler error or an early STOP.
    """

    ENTERING = "entering"
    ACTIVE = "active"
    DRAINING = "draining"
    TERMINATED = "terminated"


class HandlerResult(str, Enum):
    """Value a handler may return to steer its dispatch loop.

    Returning ``None`` is the same as CONTINUE. STOP ends the subscribe
    call that owns the handler: every remaining subscription is dropped
    and the call returns normally.
    """

    CONTINUE = "continue"
    STOP = "stop"


STOP = HandlerResult.STOP


@dataclass(frozen=True, slots=True)
class Subscribed:
    kind: ClassVar[EventKind] = EventKind.SUBSCRIBE
    name: str
    total: int


@dataclass(frozen=True, slots=True)
class Unsubscribed:
    kind: ClassVar[EventKind] = EventKind.UNSUBSCRIBE
    name: str | None
    total: int


@dataclass(frozen=True, slots=True)
class Message:
    kind: ClassVar[EventKind] = EventKind.MESSAGE
    channel: str
    payload: Any


@dataclass(frozen=True, slots=True)
class PSubscribed:
    kind: ClassVar[EventKind] = EventKind.PSUBSCRIBE
    pattern: str
    total: int


@dataclass(frozen=True, slots=True)
class PUnsubscribed:
    kind: ClassVar[EventKind] = EventKind.PUNSUBSCRIBE
    pattern: str | None
    total: int


@dataclass(frozen=True, slots=True)
class PMessage:
    kind: ClassVar[EventKind] = EventKind.PMESSAGE
    pattern: str
    channel: str
    payload: Any


PushEvent = Union[Subscribed, Unsubscribed, Message, PSubscribed, PUnsubscribed, PMessage]

# Acknowledgement events and the namespace they belong to
ACK_KINDS: dict[EventKind, SubscriptionKind] = {
    EventKind.SUBSCRIBE: SubscriptionKind.CHANNEL,
    EventKind.UNSUBSCRIBE: SubscriptionKind.CHANNEL,
    EventKind.PSUBSCRIBE: SubscriptionKind.PATTERN,
    EventKind.PUNSUBSCRIBE: SubscriptionKind.PATTERN,
}


@dataclass
class ClientConfig:
    """Connection and teardown settings for :class:`PubSubClient`.

    Attributes:
        url: Server URL, e.g. ``"redis://localhost:6379/0"``.
        drain_timeout: Seconds allowed for unsubscribing after a handler
            error or STOP. ``None`` waits indefinitely.
        socket_timeout: Read timeout for ordinary commands. Subscription
            reads ignore it while waiting for the next event, but it still
            bounds reading the rest of a push reply once it has started.
        socket_connect_timeout: Timeout for opening the socket.
        decode_responses: Decode payloads to ``str`` using *encoding*.
        encoding: Codec for channel names and decoded payloads.
    """

    url: str = DEFAULT_URL
    drain_timeout: float | None = DRAIN_TIMEOUT
    socket_timeout: float | None = SOCKET_TIMEOUT
    socket_connect_timeout: float | None = SOCKET_CONNECT_TIMEOUT
    decode_responses: bool = True
    encoding: str = DEFAULT_ENCODING

    @classmethod
    def from_env(cls) -> ClientConfig:
        """Build a config from ``RESP_PUBSUB_*`` environment variables.

        Unset timeouts keep their defaults; an empty value means ``None``
        (no limit).
        """
        return cls(
            url=os.environ.get(ENV_URL, DEFAULT_URL),
            drain_timeout=_env_seconds(ENV_DRAIN_TIMEOUT, DRAIN_TIMEOUT),
            socket_timeout=_env_seconds(ENV_SOCKET_TIMEOUT, SOCKET_TIMEOUT),
            socket_connect_timeout=_env_seconds(
                ENV_SOCKET_CONNECT_TIMEOUT, SOCKET_CONNECT_TIMEOUT
            ),
        )


def _env_seconds(name: str, default: float | None) -> float | None:
    value = os.environ.get(name)
    if value is None:
        return default
    if not value.strip():
        return None
    return float(value)
