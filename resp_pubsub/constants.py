# =============================================================================
# RESP Pub/Sub -- Protocol Constants
# =============================================================================
#
# Command names and push reply kinds follow the Redis pub/sub protocol.
# =============================================================================

# -- Connection ----------------------------------------------------------------

DEFAULT_URL = "redis://localhost:6379/0"
DEFAULT_ENCODING = "utf-8"

# -- Timing (seconds) ----------------------------------------------------------

DRAIN_TIMEOUT = 5.0
SOCKET_CONNECT_TIMEOUT = 5.0
SOCKET_TIMEOUT: float | None = None

# -- Environment ---------------------------------------------------------------

ENV_URL = "RESP_PUBSUB_URL"
ENV_DRAIN_TIMEOUT = "RESP_PUBSUB_DRAIN_TIMEOUT"
ENV_SOCKET_TIMEOUT = "RESP_PUBSUB_SOCKET_TIMEOUT"
ENV_SOCKET_CONNECT_TIMEOUT = "RESP_PUBSUB_SOCKET_CONNECT_TIMEOUT"

# -- Commands ------------------------------------------------------------------

CMD_SUBSCRIBE = "SUBSCRIBE"
CMD_UNSUBSCRIBE = "UNSUBSCRIBE"
CMD_PSUBSCRIBE = "PSUBSCRIBE"
CMD_PUNSUBSCRIBE = "PUNSUBSCRIBE"
CMD_PUBLISH = "PUBLISH"
CMD_PUBSUB = "PUBSUB"
CMD_PING = "PING"

# -- Push reply kinds ----------------------------------------------------------

PUSH_SUBSCRIBE = "subscribe"
PUSH_UNSUBSCRIBE = "unsubscribe"
PUSH_MESSAGE = "message"
PUSH_PSUBSCRIBE = "psubscribe"
PUSH_PUNSUBSCRIBE = "punsubscribe"
PUSH_PMESSAGE = "pmessage"

# Element count of each push reply, kind included
PUSH_ARITY = {
    PUSH_SUBSCRIBE: 3,
    PUSH_UNSUBSCRIBE: 3,
    PUSH_MESSAGE: 3,
    PUSH_PSUBSCRIBE: 3,
    PUSH_PUNSUBSCRIBE: 3,
    PUSH_PMESSAGE: 4,
}
