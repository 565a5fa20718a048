# =============================================================================
# RESP Pub/Sub -- Connection Guard
# =============================================================================
#
# Wraps the dispatch loop so that every way out of it leaves the connection
# in a known state:
#
#   loop exhausted        -> connection back in request/response mode
#   handler returned STOP -> drain, return normally
#   handler raised        -> drain, re-raise the handler's exception
#   deadline / transport  -> disconnect (unread replies are never reused)
#
# Draining unsubscribes from everything still live and consumes acks until
# the session is exhausted, discarding messages and running no handlers.
# =============================================================================

from __future__ import annotations

import time

from typing import Callable

from ._logging import logger
from .constants import CMD_PUNSUBSCRIBE, CMD_UNSUBSCRIBE, DRAIN_TIMEOUT
from .dispatcher import EventDispatcher, HandlerFailure
from .errors import PubSubConnectionError, PubSubProtocolError, PubSubTimeoutError
from .session import SubscriptionSession
from .transport import Transport
from .types import ACK_KINDS, DispatchState, HandlerResult, SubscriptionKind

_TRANSPORT_ERRORS = (PubSubTimeoutError, PubSubConnectionError, PubSubProtocolError)


class ConnectionGuard:
    """Runs one dispatch loop and restores the connection afterwards.

    Args:
        transport: The connection shared with the dispatcher.
        session: Subscription state shared with the dispatcher.
        dispatcher: The loop to run.
        drain_timeout: Seconds allowed for draining; ``None`` waits forever.
    """

    def __init__(
        self,
        transport: Transport,
        session: SubscriptionSession,
        dispatcher: EventDispatcher,
        *,
        drain_timeout: float | None = DRAIN_TIMEOUT,
    ) -> None:
        self._transport = transport
        self._session = session
        self._dispatcher = dispatcher
        self._drain_timeout = drain_timeout

    def run(self, begin: Callable[[], None], timeout: float | None = None) -> None:
        """Send the initial request via *begin*, then run the loop.

        Args:
            begin: Writes the initial SUBSCRIBE/PSUBSCRIBE.
            timeout: Bound in seconds on the whole call, request included.

        Raises:
            PubSubTimeoutError: *timeout* expired; the transport is dropped.
            Exception: Whatever a handler raised, after draining.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        try:
            begin()
            result = self._dispatcher.run(deadline)
        except HandlerFailure as failure:
            error = failure.error
        except PubSubTimeoutError:
            self._abandon("subscription deadline exceeded")
            raise
        except BaseException as exc:
            self._abandon(f"{type(exc).__name__} during subscription")
            raise
        else:
            if result is HandlerResult.STOP:
                self.drain(deadline)
            return

        logger.info(
            "Handler raised %s, unsubscribing before re-raising",
            type(error).__name__,
        )
        self.drain(deadline)
        raise error

    def drain(self, deadline: float | None = None) -> None:
        """Unsubscribe from everything and consume acks until exhausted.

        Bounded by *drain_timeout* and, when given, by the enclosing call's
        *deadline*, whichever comes first.

        Raises:
            PubSubTimeoutError: The bound expired; the transport is dropped.
        """
        dispatcher = self._dispatcher
        session = self._session
        dispatcher.state = DispatchState.DRAINING
        if self._drain_timeout is not None:
            limit = time.monotonic() + self._drain_timeout
            deadline = limit if deadline is None else min(deadline, limit)
        discarded = 0
        try:
            if session.has_any(SubscriptionKind.CHANNEL):
                self._transport.send_command(CMD_UNSUBSCRIBE)
                session.record_unsubscribe(SubscriptionKind.CHANNEL, ())
            if session.has_any(SubscriptionKind.PATTERN):
                self._transport.send_command(CMD_PUNSUBSCRIBE)
                session.record_unsubscribe(SubscriptionKind.PATTERN, ())
            while not session.is_exhausted():
                event = dispatcher.next_event(deadline)
                if event.kind in ACK_KINDS:
                    dispatcher.apply(event)
                else:
                    discarded += 1
        except _TRANSPORT_ERRORS as exc:
            logger.error("Drain failed, dropping connection: %s", exc)
            self._disconnect()
            raise
        dispatcher.state = DispatchState.TERMINATED
        logger.debug("Drained subscriptions, discarded %d message(s)", discarded)

    def _abandon(self, reason: str) -> None:
        logger.warning("Dropping connection: %s", reason)
        self._disconnect()

    def _disconnect(self) -> None:
        self._dispatcher.state = DispatchState.TERMINATED
        self._transport.disconnect()
