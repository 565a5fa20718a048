# =============================================================================
# RESP Pub/Sub -- Client
# =============================================================================
#
# Primary public API.  Ordinary commands are request/response; subscribe
# and psubscribe switch the connection into subscription mode and block,
# dispatching push events to handlers until every subscription is gone.
# =============================================================================

from __future__ import annotations

import dataclasses

from collections.abc import Sequence
from typing import Any, Callable

from ._logging import logger
from .constants import CMD_PING, CMD_PUBLISH, CMD_PUBSUB
from .controller import SubscriptionController
from .dispatcher import EventDispatcher
from .errors import (
    CommandNotAllowedError,
    MissingRegistrationError,
    NoActiveSubscriptionError,
)
from .guard import ConnectionGuard
from .protocol import PushDecoder
from .registry import CallbackRegistry, Registration
from .session import SubscriptionSession
from .transport import RedisTransport, Transport
from .types import ClientConfig, SubscriptionKind

Register = Callable[[Registration], Any]


class PubSubClient:
    """Blocking pub/sub client for one Redis-protocol connection.

    Args:
        url: Server URL. Overrides ``config.url`` when given.
        config: Connection and teardown settings.
        transport: Pre-built transport; skips creating a redis-py
            connection from the config.

    Example::

        client = PubSubClient("redis://localhost:6379/0")

        def register(on):
            on.subscribe(lambda ctl, channel, total: print("joined", channel))

            @on.message
            def handle(ctl, channel, payload):
                print(channel, payload)
                if payload == "quit":
                    ctl.unsubscribe()

        client.subscribe("news", register)   # blocks until unsubscribed
        client.ping()                        # back in request/response mode
    """

    def __init__(
        self,
        url: str | None = None,
        *,
        config: ClientConfig | None = None,
        transport: Transport | None = None,
    ) -> None:
        config = config or ClientConfig()
        if url is not None:
            config = dataclasses.replace(config, url=url)
        self._config = config
        if transport is None:
            transport = RedisTransport.from_url(
                self._config.url,
                socket_timeout=self._config.socket_timeout,
                socket_connect_timeout=self._config.socket_connect_timeout,
                decode_responses=self._config.decode_responses,
                encoding=self._config.encoding,
            )
        self._transport = transport
        self._decoder = PushDecoder(self._config.encoding)
        self._controller: SubscriptionController | None = None

    # -- Context manager ------------------------------------------------------

    def __enter__(self) -> PubSubClient:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def close(self) -> None:
        self._transport.disconnect()

    # -- Properties -----------------------------------------------------------

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def subscribed(self) -> bool:
        """True while a dispatch loop owns this connection."""
        return self._controller is not None

    # -- Ordinary commands ----------------------------------------------------

    def execute_command(self, *args: Any) -> Any:
        """Send one command and return its reply.

        Raises:
            CommandNotAllowedError: While a subscription loop is running.
            CommandError: The server replied with an error.
        """
        if self._controller is not None:
            raise CommandNotAllowedError(
                f"{args[0] if args else 'command'} is not allowed while subscribed; "
                "only (P)SUBSCRIBE and (P)UNSUBSCRIBE can be issued"
            )
        self._transport.send_command(*args)
        return self._transport.read_reply()

    def ping(self) -> Any:
        return self.execute_command(CMD_PING)

    def publish(self, channel: str, message: Any) -> int:
        """Publish *message*; returns the number of receiving clients."""
        return self.execute_command(CMD_PUBLISH, channel, message)

    def pubsub_channels(self, pattern: str | None = None) -> list[str]:
        """Channels with at least one subscriber, optionally glob-filtered."""
        args = [CMD_PUBSUB, "CHANNELS"]
        if pattern is not None:
            args.append(pattern)
        return [self._text(name) for name in self.execute_command(*args)]

    def pubsub_numsub(self, *channels: str) -> list[tuple[str, int]]:
        """Subscriber count per channel, in argument order."""
        reply = self.execute_command(CMD_PUBSUB, "NUMSUB", *channels)
        return [
            (self._text(reply[i]), int(reply[i + 1])) for i in range(0, len(reply), 2)
        ]

    def pubsub_numpat(self) -> int:
        """Number of pattern subscriptions across all clients."""
        return int(self.execute_command(CMD_PUBSUB, "NUMPAT"))

    # -- Subscription mode ----------------------------------------------------

    def subscribe(
        self, channels: str | Sequence[str], register: Register | None = None
    ) -> None:
        """Subscribe to *channels* and dispatch events until unsubscribed.

        Called from a handler of this client's running loop, the channels
        are added to that loop instead and the call returns immediately.

        Raises:
            MissingRegistrationError: No *register* callable at top level.
        """
        self._enter(SubscriptionKind.CHANNEL, channels, register, None)

    def psubscribe(
        self, patterns: str | Sequence[str], register: Register | None = None
    ) -> None:
        """Pattern counterpart of :meth:`subscribe`."""
        self._enter(SubscriptionKind.PATTERN, patterns, register, None)

    def subscribe_with_timeout(
        self,
        timeout: float,
        channels: str | Sequence[str],
        register: Register | None = None,
    ) -> None:
        """Like :meth:`subscribe`, with the whole call bounded by *timeout*.

        Raises:
            PubSubTimeoutError: The loop did not finish in time. The
                connection is dropped and reopened on the next command.
        """
        self._enter(SubscriptionKind.CHANNEL, channels, register, timeout)

    def psubscribe_with_timeout(
        self,
        timeout: float,
        patterns: str | Sequence[str],
        register: Register | None = None,
    ) -> None:
        """Pattern counterpart of :meth:`subscribe_with_timeout`."""
        self._enter(SubscriptionKind.PATTERN, patterns, register, timeout)

    def unsubscribe(self, *channels: str) -> None:
        """Unsubscribe the running loop from *channels* (all when none given).

        Raises:
            NoActiveSubscriptionError: No loop is running, or it has no
                channel subscription.
        """
        self._active_controller("UNSUBSCRIBE").unsubscribe(*channels)

    def punsubscribe(self, *patterns: str) -> None:
        """Pattern counterpart of :meth:`unsubscribe`."""
        self._active_controller("PUNSUBSCRIBE").punsubscribe(*patterns)

    # -- Internal -------------------------------------------------------------

    def _enter(
        self,
        kind: SubscriptionKind,
        names: str | Sequence[str],
        register: Register | None,
        timeout: float | None,
    ) -> None:
        names = [names] if isinstance(names, str) else list(names)
        if not names:
            raise ValueError(f"At least one {kind.value} is required")

        if self._controller is not None:
            if register is not None:
                logger.warning(
                    "Nested subscribe ignores its handlers; the enclosing "
                    "registration stays in effect"
                )
            self._fold(kind, names)
            return

        if register is None:
            raise MissingRegistrationError(
                "subscribe requires a register callable to attach handlers"
            )
        registry = CallbackRegistry()
        register(Registration(registry))

        session = SubscriptionSession()
        controller = SubscriptionController(self._transport, session)
        dispatcher = EventDispatcher(
            self._transport, session, registry, controller, self._decoder
        )
        guard = ConnectionGuard(
            self._transport,
            session,
            dispatcher,
            drain_timeout=self._config.drain_timeout,
        )

        logger.info("Entering subscription mode (%s: %s)", kind.value, names)
        self._controller = controller
        try:
            guard.run(lambda: self._fold(kind, names), timeout)
        finally:
            controller.close()
            self._controller = None
        logger.info(
            "Left subscription mode after %d event(s)", dispatcher.events_dispatched
        )

    def _fold(self, kind: SubscriptionKind, names: list[str]) -> None:
        controller = self._controller
        if kind is SubscriptionKind.CHANNEL:
            controller.subscribe(*names)
        else:
            controller.psubscribe(*names)

    def _active_controller(self, command: str) -> SubscriptionController:
        if self._controller is None:
            raise NoActiveSubscriptionError(
                f"{command} called outside of a running subscription"
            )
        return self._controller

    def _text(self, value: Any) -> str:
        if isinstance(value, bytes):
            return value.decode(self._config.encoding)
        return value
