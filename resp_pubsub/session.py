# =============================================================================
# RESP Pub/Sub -- Subscription Session
# =============================================================================
#
# Tracks the channels and patterns live on one connection for the duration
# of a single top-level subscribe call.
#
# Two views are kept per kind:
#   active    -- confirmed by acks read so far
#   projected -- what the server will hold once every sent command is
#                processed; the server handles commands in order and nobody
#                else writes to this connection, so the projection is exact
#
# The projection tells how many acks a bare UNSUBSCRIBE produces (one per
# subscribed name, or a single nil-named ack when there are none), so the
# session always knows how many acks are still on the wire.
# =============================================================================

from __future__ import annotations

from collections.abc import Sequence

from ._logging import logger
from .types import ACK_KINDS, EventKind, SubscriptionKind


class SubscriptionSession:
    """Active channel/pattern sets plus the server's last reported totals."""

    def __init__(self) -> None:
        self.channels: set[str] = set()
        self.patterns: set[str] = set()
        self.channel_count = 0
        self.pattern_count = 0
        self.outstanding_acks = 0
        self._projected: dict[SubscriptionKind, set[str]] = {
            SubscriptionKind.CHANNEL: set(),
            SubscriptionKind.PATTERN: set(),
        }

    # -- Commands sent ---------------------------------------------------------

    def record_subscribe(self, kind: SubscriptionKind, names: Sequence[str]) -> None:
        """Account for a SUBSCRIBE/PSUBSCRIBE that was just written."""
        self._projected[kind].update(names)
        self.outstanding_acks += len(names)

    def record_unsubscribe(self, kind: SubscriptionKind, names: Sequence[str]) -> None:
        """Account for an UNSUBSCRIBE/PUNSUBSCRIBE; empty *names* means all."""
        projected = self._projected[kind]
        if names:
            projected.difference_update(names)
            self.outstanding_acks += len(names)
        else:
            self.outstanding_acks += max(1, len(projected))
            projected.clear()

    # -- Acks read -------------------------------------------------------------

    def apply_ack(self, event_kind: EventKind, name: str | None, total: int) -> None:
        """Fold one (un)subscribe acknowledgement into the session.

        *total* is the server's subscription count and is kept as-is; a
        disagreement with the tracked sets is logged, never raised.
        """
        kind = ACK_KINDS[event_kind]
        active = self.channels if kind is SubscriptionKind.CHANNEL else self.patterns
        if event_kind in (EventKind.SUBSCRIBE, EventKind.PSUBSCRIBE):
            active.add(name)
        elif name is not None:
            active.discard(name)

        if kind is SubscriptionKind.CHANNEL:
            self.channel_count = total
        else:
            self.pattern_count = total

        if self.outstanding_acks > 0:
            self.outstanding_acks -= 1
        else:
            logger.warning("Unexpected %s ack for %r", event_kind.value, name)

        # Redis reports channels and patterns as one combined count
        tracked = len(self.channels) + len(self.patterns)
        if total != tracked:
            logger.warning(
                "Server reports %d subscriptions after %s %r, client tracks %d",
                total,
                event_kind.value,
                name,
                tracked,
            )

    # -- Queries ---------------------------------------------------------------

    def has_any(self, kind: SubscriptionKind) -> bool:
        """True if *kind* has subscriptions live or requested."""
        return bool(self._projected[kind])

    def is_exhausted(self) -> bool:
        """True once nothing is subscribed and no ack is still pending."""
        return (
            not self.channels
            and not self.patterns
            and self.outstanding_acks == 0
            and not self._projected[SubscriptionKind.CHANNEL]
            and not self._projected[SubscriptionKind.PATTERN]
        )
