# =============================================================================
# RESP Pub/Sub -- Event Dispatcher
# =============================================================================
#
# The subscription loop: read one push reply, decode it, fold acks into the
# session, invoke the matching handler.  Runs until the session is
# exhausted or a handler returns STOP.  Handler errors are wrapped in
# HandlerFailure so the guard can tell them apart from transport errors.
# =============================================================================

from __future__ import annotations

import time

from typing import Any

from ._logging import logger
from .controller import SubscriptionController
from .errors import PubSubTimeoutError
from .protocol import PushDecoder
from .registry import CallbackRegistry
from .session import SubscriptionSession
from .transport import Transport
from .types import (
    ACK_KINDS,
    DispatchState,
    EventKind,
    HandlerResult,
    Message,
    PMessage,
    PSubscribed,
    PUnsubscribed,
    PushEvent,
    Subscribed,
    Unsubscribed,
)


class HandlerFailure(Exception):
    """Carries an exception raised by a user handler out of the loop."""

    def __init__(self, error: Exception) -> None:
        super().__init__(f"Handler raised {type(error).__name__}: {error}")
        self.error = error


def event_fields(event: PushEvent) -> tuple[Any, ...]:
    """Handler arguments for *event*, after the controller."""
    if isinstance(event, (Subscribed, Unsubscribed)):
        return (event.name, event.total)
    if isinstance(event, (PSubscribed, PUnsubscribed)):
        return (event.pattern, event.total)
    if isinstance(event, Message):
        return (event.channel, event.payload)
    if isinstance(event, PMessage):
        return (event.pattern, event.channel, event.payload)
    raise TypeError(f"Not a push event: {event!r}")


class EventDispatcher:
    """Single-reader dispatch loop for one subscribe call.

    Args:
        transport: The connection, exclusively owned while the loop runs.
        session: Subscription state for this call.
        registry: Handlers registered by the initiating call.
        controller: Passed as first argument to every handler.
        decoder: Push reply decoder.
    """

    def __init__(
        self,
        transport: Transport,
        session: SubscriptionSession,
        registry: CallbackRegistry,
        controller: SubscriptionController,
        decoder: PushDecoder | None = None,
    ) -> None:
        self._transport = transport
        self._session = session
        self._registry = registry
        self._controller = controller
        self._decoder = decoder or PushDecoder()
        self.state = DispatchState.ENTERING
        self.events_dispatched = 0

    def run(self, deadline: float | None = None) -> HandlerResult:
        """Dispatch events until the session is exhausted.

        Args:
            deadline: ``time.monotonic()`` value after which the loop fails
                with :class:`PubSubTimeoutError`; ``None`` waits forever.

        Returns:
            ``HandlerResult.STOP`` if a handler asked to stop, otherwise
            ``HandlerResult.CONTINUE``.

        Raises:
            HandlerFailure: A handler raised; the original is ``.error``.
        """
        while not self._session.is_exhausted():
            event = self.next_event(deadline)
            if self.dispatch(event) is HandlerResult.STOP:
                logger.debug("Handler for %s returned STOP", event.kind.value)
                return HandlerResult.STOP
        self.state = DispatchState.TERMINATED
        return HandlerResult.CONTINUE

    def next_event(self, deadline: float | None = None) -> PushEvent:
        """Block for the next push event, honouring *deadline*."""
        timeout = None
        if deadline is not None:
            timeout = deadline - time.monotonic()
            if timeout <= 0:
                raise PubSubTimeoutError("Subscription deadline exceeded")
        return self._decoder.decode(self._transport.read_push(timeout))

    def apply(self, event: PushEvent) -> None:
        """Fold *event* into the session without running any handler."""
        if event.kind in ACK_KINDS:
            name, total = event_fields(event)
            self._session.apply_ack(event.kind, name, total)
            if self.state is DispatchState.ENTERING and event.kind in (
                EventKind.SUBSCRIBE,
                EventKind.PSUBSCRIBE,
            ):
                self.state = DispatchState.ACTIVE

    def dispatch(self, event: PushEvent) -> HandlerResult | None:
        """Apply *event* and hand it to its registered handler."""
        self.apply(event)
        self.events_dispatched += 1
        try:
            return self._registry.invoke(
                event.kind, self._controller, *event_fields(event)
            )
        except Exception as exc:
            raise HandlerFailure(exc) from exc
