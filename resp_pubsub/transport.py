# =============================================================================
# RESP Pub/Sub -- Transport
# =============================================================================
#
# The engine only needs to write commands and read replies on one
# connection.  RedisTransport provides that on top of a single redis-py
# Connection and translates redis.exceptions into resp_pubsub errors.
# =============================================================================

from __future__ import annotations

import contextlib

from collections.abc import Iterator
from typing import Any, Protocol, runtime_checkable

import redis
import redis.exceptions
from redis.connection import Connection

from ._logging import logger
from .errors import (
    CommandError,
    PubSubConnectionError,
    PubSubProtocolError,
    PubSubTimeoutError,
)


@runtime_checkable
class Transport(Protocol):
    """One exclusively owned, ordered request/reply stream."""

    def send_command(self, *args: Any) -> None:
        """Write one command."""
        ...

    def read_reply(self) -> Any:
        """Read the reply to an ordinary command."""
        ...

    def read_push(self, timeout: float | None = None) -> Any:
        """Read the next subscription-mode reply.

        ``None`` blocks until something arrives, regardless of the
        socket's read timeout.
        """
        ...

    def disconnect(self) -> None:
        """Drop the socket along with any unread replies."""
        ...


@contextlib.contextmanager
def _translate_errors() -> Iterator[None]:
    try:
        yield
    except redis.exceptions.TimeoutError as exc:
        raise PubSubTimeoutError(str(exc)) from exc
    except redis.exceptions.ConnectionError as exc:
        raise PubSubConnectionError(str(exc)) from exc
    except redis.exceptions.ResponseError as exc:
        raise CommandError(str(exc)) from exc
    except redis.exceptions.InvalidResponse as exc:
        raise PubSubProtocolError(str(exc)) from exc


class RedisTransport:
    """:class:`Transport` backed by one ``redis.connection.Connection``.

    The connection is opened lazily by redis-py on first use and
    re-opened the same way after :meth:`disconnect`.

    Args:
        connection: A dedicated, unpooled redis-py connection.
    """

    def __init__(self, connection: Connection) -> None:
        self._connection = connection

    @classmethod
    def from_url(cls, url: str, **kwargs: Any) -> RedisTransport:
        """Create a transport for *url*; *kwargs* go to the redis-py connection."""
        pool = redis.ConnectionPool.from_url(url, **kwargs)
        return cls(pool.make_connection())

    @property
    def connection(self) -> Connection:
        return self._connection

    def send_command(self, *args: Any) -> None:
        logger.debug("-> %s", args[0] if args else "")
        with _translate_errors():
            self._connection.send_command(*args)

    def read_reply(self) -> Any:
        with _translate_errors():
            return self._connection.read_response()

    def read_push(self, timeout: float | None = None) -> Any:
        """Wait up to *timeout* for a push reply to start, then read it.

        *timeout* only bounds the wait for the first bytes. The rest of the
        reply is read under the connection's ``socket_timeout``, so a frame
        stalled halfway can outlast *timeout*; set ``socket_timeout`` to cap
        that case.
        """
        with _translate_errors():
            if not self._connection.can_read(timeout=timeout):
                raise PubSubTimeoutError(f"No push reply within {timeout}s")
            return self._connection.read_response()

    def disconnect(self) -> None:
        self._connection.disconnect()
