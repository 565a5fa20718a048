# =============================================================================
# RESP Pub/Sub -- Subscription Controller
# =============================================================================
#
# Handed to every handler of a running dispatch loop.  Commands issued
# through it are written straight to the shared connection; the enclosing
# loop reads their acks like any other push event, so no second loop is
# ever started.
# =============================================================================

from __future__ import annotations

from collections.abc import Sequence

from ._logging import logger
from .constants import CMD_PSUBSCRIBE, CMD_PUNSUBSCRIBE, CMD_SUBSCRIBE, CMD_UNSUBSCRIBE
from .errors import NoActiveSubscriptionError
from .session import SubscriptionSession
from .transport import Transport
from .types import SubscriptionKind

_COMMANDS = {
    SubscriptionKind.CHANNEL: (CMD_SUBSCRIBE, CMD_UNSUBSCRIBE),
    SubscriptionKind.PATTERN: (CMD_PSUBSCRIBE, CMD_PUNSUBSCRIBE),
}


class SubscriptionController:
    """Reentrant subscribe/unsubscribe bound to one dispatch loop.

    Valid only while that loop runs; afterwards every call raises
    :class:`NoActiveSubscriptionError`.
    """

    def __init__(self, transport: Transport, session: SubscriptionSession) -> None:
        self._transport = transport
        self._session = session
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    @property
    def channels(self) -> frozenset[str]:
        """Channels confirmed by the server so far."""
        return frozenset(self._session.channels)

    @property
    def patterns(self) -> frozenset[str]:
        """Patterns confirmed by the server so far."""
        return frozenset(self._session.patterns)

    def subscribe(self, *channels: str) -> None:
        self._subscribe(SubscriptionKind.CHANNEL, channels)

    def psubscribe(self, *patterns: str) -> None:
        self._subscribe(SubscriptionKind.PATTERN, patterns)

    def unsubscribe(self, *channels: str) -> None:
        """Unsubscribe from *channels*, or from every channel when none given."""
        self._unsubscribe(SubscriptionKind.CHANNEL, channels)

    def punsubscribe(self, *patterns: str) -> None:
        """Unsubscribe from *patterns*, or from every pattern when none given."""
        self._unsubscribe(SubscriptionKind.PATTERN, patterns)

    def close(self) -> None:
        self._active = False

    # -- Internal --------------------------------------------------------------

    def _subscribe(self, kind: SubscriptionKind, names: Sequence[str]) -> None:
        command = _COMMANDS[kind][0]
        self._check_active(command)
        if not names:
            raise ValueError(f"{command} requires at least one {kind.value}")
        self._transport.send_command(command, *names)
        self._session.record_subscribe(kind, names)
        logger.debug("%s %s", command, list(names))

    def _unsubscribe(self, kind: SubscriptionKind, names: Sequence[str]) -> None:
        command = _COMMANDS[kind][1]
        self._check_active(command)
        if not self._session.has_any(kind):
            raise NoActiveSubscriptionError(
                f"{command} called with no active {kind.value} subscription"
            )
        self._transport.send_command(command, *names)
        self._session.record_unsubscribe(kind, names)
        logger.debug("%s %s", command, list(names) or "(all)")

    def _check_active(self, command: str) -> None:
        if not self._active:
            raise NoActiveSubscriptionError(
                f"{command} called outside of a running subscription"
            )
