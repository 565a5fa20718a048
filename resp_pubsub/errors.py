# =============================================================================
# RESP Pub/Sub -- Error Types
# =============================================================================


class PubSubError(Exception):
    """Base exception for all resp_pubsub errors."""


class MissingRegistrationError(PubSubError):
    """subscribe/psubscribe called without a handler registration callable."""


class NoActiveSubscriptionError(PubSubError):
    """Unsubscribe with nothing of that kind active, or no dispatch loop running."""


class CommandNotAllowedError(PubSubError):
    """Ordinary command issued while the connection is in subscription mode."""


class CommandError(PubSubError):
    """Error reply returned by the server for an ordinary command."""


class PubSubTimeoutError(PubSubError):
    """Deadline exceeded while waiting for a reply."""


class PubSubProtocolError(PubSubError):
    """Malformed reply for the current protocol mode."""


class PubSubConnectionError(PubSubError):
    """Transport failure (connect, read or write)."""
