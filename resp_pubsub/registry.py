# =============================================================================
# RESP Pub/Sub -- Callback Registry
# =============================================================================

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

from .types import EventKind, HandlerResult

if TYPE_CHECKING:
    from .controller import SubscriptionController

# Handlers take the controller first, then the event fields
Handler = Callable[..., HandlerResult | None]


class CallbackRegistry:
    """At most one handler per event kind; missing kinds are no-ops."""

    def __init__(self) -> None:
        self._handlers: dict[EventKind, Handler] = {}

    def set(self, kind: EventKind, fn: Handler) -> None:
        self._handlers[kind] = fn

    def get(self, kind: EventKind) -> Handler | None:
        return self._handlers.get(kind)

    def __contains__(self, kind: EventKind) -> bool:
        return kind in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    def invoke(
        self, kind: EventKind, controller: SubscriptionController, *fields: Any
    ) -> HandlerResult | None:
        handler = self._handlers.get(kind)
        if handler is None:
            return None
        return handler(controller, *fields)


class Registration:
    """Builder handed to the ``register`` callable of a subscribe call.

    Every method registers the handler for one event kind and returns it
    unchanged, so each can also be used as a decorator. Registering a kind
    twice keeps the last handler.

    Example::

        def register(on):
            @on.message
            def handle(ctl, channel, payload):
                if payload == "bye":
                    ctl.unsubscribe()

        client.subscribe("news", register)
    """

    def __init__(self, registry: CallbackRegistry) -> None:
        self._registry = registry

    def subscribe(self, fn: Handler) -> Handler:
        """``fn(ctl, channel, total)`` after each channel subscribe ack."""
        self._registry.set(EventKind.SUBSCRIBE, fn)
        return fn

    def unsubscribe(self, fn: Handler) -> Handler:
        """``fn(ctl, channel, total)`` after each channel unsubscribe ack."""
        self._registry.set(EventKind.UNSUBSCRIBE, fn)
        return fn

    def message(self, fn: Handler) -> Handler:
        """``fn(ctl, channel, payload)`` for each channel message."""
        self._registry.set(EventKind.MESSAGE, fn)
        return fn

    def psubscribe(self, fn: Handler) -> Handler:
        """``fn(ctl, pattern, total)`` after each pattern subscribe ack."""
        self._registry.set(EventKind.PSUBSCRIBE, fn)
        return fn

    def punsubscribe(self, fn: Handler) -> Handler:
        """``fn(ctl, pattern, total)`` after each pattern unsubscribe ack."""
        self._registry.set(EventKind.PUNSUBSCRIBE, fn)
        return fn

    def pmessage(self, fn: Handler) -> Handler:
        """``fn(ctl, pattern, channel, payload)`` for each pattern message."""
        self._registry.set(EventKind.PMESSAGE, fn)
        return fn
