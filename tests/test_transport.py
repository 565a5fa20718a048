"""Tests for RedisTransport over a mocked redis-py connection."""

from unittest.mock import MagicMock, patch

import pytest
import redis.exceptions

from resp_pubsub.errors import (
    CommandError,
    PubSubConnectionError,
    PubSubProtocolError,
    PubSubTimeoutError,
)
from resp_pubsub.transport import RedisTransport, Transport


@pytest.fixture()
def connection():
    return MagicMock()


@pytest.fixture()
def redis_transport(connection):
    return RedisTransport(connection)


class TestRedisTransport:
    def test_satisfies_protocol(self, redis_transport):
        assert isinstance(redis_transport, Transport)

    def test_send_and_read(self, redis_transport, connection):
        connection.read_response.return_value = "PONG"
        redis_transport.send_command("PING")
        assert redis_transport.read_reply() == "PONG"
        connection.send_command.assert_called_once_with("PING")

    def test_read_push_blocks_without_timeout(self, redis_transport, connection):
        connection.can_read.return_value = True
        connection.read_response.return_value = ["message", "foo", "x"]
        assert redis_transport.read_push() == ["message", "foo", "x"]
        connection.can_read.assert_called_once_with(timeout=None)

    def test_read_push_timeout(self, redis_transport, connection):
        connection.can_read.return_value = False
        with pytest.raises(PubSubTimeoutError):
            redis_transport.read_push(0.25)
        connection.can_read.assert_called_once_with(timeout=0.25)
        connection.read_response.assert_not_called()

    def test_read_push_timeout_bounds_only_the_wait(self, redis_transport, connection):
        # Once bytes are readable, the body is read under the socket timeout
        connection.can_read.return_value = True
        connection.read_response.side_effect = redis.exceptions.TimeoutError(
            "Timeout reading from socket"
        )
        with pytest.raises(PubSubTimeoutError):
            redis_transport.read_push(0.25)
        connection.can_read.assert_called_once_with(timeout=0.25)
        connection.read_response.assert_called_once_with()

    def test_disconnect(self, redis_transport, connection):
        redis_transport.disconnect()
        connection.disconnect.assert_called_once_with()

    def test_connection_property(self, redis_transport, connection):
        assert redis_transport.connection is connection


class TestErrorTranslation:
    @pytest.mark.parametrize(
        ("raised", "expected"),
        [
            (redis.exceptions.TimeoutError("slow"), PubSubTimeoutError),
            (redis.exceptions.ConnectionError("refused"), PubSubConnectionError),
            (redis.exceptions.ResponseError("ERR wrong"), CommandError),
            (redis.exceptions.InvalidResponse("garbage"), PubSubProtocolError),
        ],
    )
    def test_read_errors(self, redis_transport, connection, raised, expected):
        connection.read_response.side_effect = raised
        with pytest.raises(expected) as info:
            redis_transport.read_reply()
        assert info.value.__cause__ is raised

    def test_send_error(self, redis_transport, connection):
        connection.send_command.side_effect = redis.exceptions.ConnectionError("gone")
        with pytest.raises(PubSubConnectionError):
            redis_transport.send_command("SUBSCRIBE", "foo")


class TestFromUrl:
    def test_builds_dedicated_connection(self):
        with patch("resp_pubsub.transport.redis.ConnectionPool.from_url") as from_url:
            transport = RedisTransport.from_url(
                "redis://localhost:6379/2", decode_responses=True
            )
        from_url.assert_called_once_with("redis://localhost:6379/2", decode_responses=True)
        assert transport.connection is from_url.return_value.make_connection.return_value
