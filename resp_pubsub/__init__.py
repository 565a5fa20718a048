"""Blocking Redis pub/sub client with reentrant handlers.

Usage::

    from resp_pubsub import STOP, connect

    with connect("redis://localhost:6379/0") as client:

        def register(on):
            @on.subscribe
            def joined(ctl, channel, total):
                if channel == "foo":
                    ctl.subscribe("bar")     # folds into the running loop

            @on.message
            def received(ctl, channel, payload):
                if payload == "done":
                    return STOP              # drop everything, return normally

        client.subscribe("foo", register)   # blocks until nothing is subscribed
        client.ping()

Handlers always receive the loop's controller first. Raising from a handler
unsubscribes from everything, then re-raises out of ``subscribe``.
"""

from ._version import __version__
from .client import PubSubClient
from .controller import SubscriptionController
from .errors import (
    CommandError,
    CommandNotAllowedError,
    MissingRegistrationError,
    NoActiveSubscriptionError,
    PubSubConnectionError,
    PubSubError,
    PubSubProtocolError,
    PubSubTimeoutError,
)
from .registry import Registration
from .types import (
    STOP,
    ClientConfig,
    DispatchState,
    EventKind,
    HandlerResult,
    Message,
    PMessage,
    PSubscribed,
    PUnsubscribed,
    Subscribed,
    SubscriptionKind,
    Unsubscribed,
)


def connect(
    url: str | None = None,
    **kwargs,
) -> PubSubClient:
    """Create a pub/sub client.

    Usable as a context manager, which closes the connection on exit.
    Keyword arguments are forwarded to :class:`PubSubClient` -- ``config``
    and ``transport``.

    Args:
        url: Server URL, e.g. ``"redis://localhost:6379/0"``. Defaults to
            ``config.url``.
        **kwargs: Passed to :class:`PubSubClient`.

    Returns:
        A :class:`PubSubClient` instance. The socket opens on first use.
    """
    return PubSubClient(url, **kwargs)


__all__ = [
    "__version__",
    "connect",
    "PubSubClient",
    "SubscriptionController",
    "Registration",
    "ClientConfig",
    "HandlerResult",
    "STOP",
    "EventKind",
    "SubscriptionKind",
    "DispatchState",
    "Subscribed",
    "Unsubscribed",
    "Message",
    "PSubscribed",
    "PUnsubscribed",
    "PMessage",
    "PubSubError",
    "MissingRegistrationError",
    "NoActiveSubscriptionError",
    "CommandNotAllowedError",
    "CommandError",
    "PubSubTimeoutError",
    "PubSubProtocolError",
    "PubSubConnectionError",
]
