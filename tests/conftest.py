"""Shared fixtures: an in-memory broker and clients attached to it."""

import pytest

from fake_redis import FakeBroker, FakeTransport
from resp_pubsub import PubSubClient
from resp_pubsub.controller import SubscriptionController
from resp_pubsub.session import SubscriptionSession


@pytest.fixture()
def broker():
    return FakeBroker()


@pytest.fixture()
def transport(broker):
    return FakeTransport(broker)


@pytest.fixture()
def client(transport):
    """Client whose dispatch loops run against the fake transport."""
    return PubSubClient(transport=transport)


@pytest.fixture()
def publisher(broker):
    """A second client on the same broker, never subscribed."""
    return PubSubClient(transport=FakeTransport(broker))


@pytest.fixture()
def session():
    return SubscriptionSession()


@pytest.fixture()
def controller(transport, session):
    return SubscriptionController(transport, session)
