"""Tests for SubscriptionSession bookkeeping."""

import logging

from resp_pubsub.session import SubscriptionSession
from resp_pubsub.types import EventKind, SubscriptionKind

CHANNEL = SubscriptionKind.CHANNEL
PATTERN = SubscriptionKind.PATTERN


class TestInitialState:
    def test_fresh_session_is_exhausted(self):
        session = SubscriptionSession()
        assert session.is_exhausted()
        assert session.channels == set()
        assert session.patterns == set()
        assert session.outstanding_acks == 0

    def test_has_any_false(self):
        session = SubscriptionSession()
        assert not session.has_any(CHANNEL)
        assert not session.has_any(PATTERN)


class TestSubscribe:
    def test_requested_subscription_is_not_exhausted(self):
        session = SubscriptionSession()
        session.record_subscribe(CHANNEL, ["foo"])
        assert session.has_any(CHANNEL)
        assert not session.is_exhausted()
        assert session.outstanding_acks == 1

    def test_ack_moves_name_into_active_set(self):
        session = SubscriptionSession()
        session.record_subscribe(CHANNEL, ["foo", "bar"])
        session.apply_ack(EventKind.SUBSCRIBE, "foo", 1)
        assert session.channels == {"foo"}
        assert session.channel_count == 1
        assert session.outstanding_acks == 1
        session.apply_ack(EventKind.SUBSCRIBE, "bar", 2)
        assert session.channels == {"foo", "bar"}
        assert session.outstanding_acks == 0

    def test_pattern_ack(self):
        session = SubscriptionSession()
        session.record_subscribe(PATTERN, ["f*"])
        session.apply_ack(EventKind.PSUBSCRIBE, "f*", 1)
        assert session.patterns == {"f*"}
        assert session.pattern_count == 1
        assert session.channels == set()


class TestUnsubscribe:
    def test_named_unsubscribe_exhausts(self):
        session = SubscriptionSession()
        session.record_subscribe(CHANNEL, ["foo"])
        session.apply_ack(EventKind.SUBSCRIBE, "foo", 1)
        session.record_unsubscribe(CHANNEL, ["foo"])
        assert not session.has_any(CHANNEL)
        assert not session.is_exhausted()
        session.apply_ack(EventKind.UNSUBSCRIBE, "foo", 0)
        assert session.is_exhausted()

    def test_bare_unsubscribe_expects_one_ack_per_projected_name(self):
        session = SubscriptionSession()
        session.record_subscribe(CHANNEL, ["a", "b", "c"])
        session.apply_ack(EventKind.SUBSCRIBE, "a", 1)
        # b and c acks still in flight
        session.record_unsubscribe(CHANNEL, ())
        assert session.outstanding_acks == 2 + 3

    def test_bare_unsubscribe_with_nothing_projected_expects_nil_ack(self):
        session = SubscriptionSession()
        session.record_unsubscribe(CHANNEL, ())
        assert session.outstanding_acks == 1
        session.apply_ack(EventKind.UNSUBSCRIBE, None, 0)
        assert session.is_exhausted()

    def test_patterns_keep_session_alive(self):
        session = SubscriptionSession()
        session.record_subscribe(CHANNEL, ["foo"])
        session.record_subscribe(PATTERN, ["f*"])
        session.apply_ack(EventKind.SUBSCRIBE, "foo", 1)
        session.apply_ack(EventKind.PSUBSCRIBE, "f*", 2)
        session.record_unsubscribe(CHANNEL, ())
        session.apply_ack(EventKind.UNSUBSCRIBE, "foo", 1)
        assert session.channels == set()
        assert not session.is_exhausted()


class TestCountMismatch:
    def test_mismatch_is_logged_not_raised(self, caplog):
        session = SubscriptionSession()
        session.record_subscribe(CHANNEL, ["foo"])
        with caplog.at_level(logging.WARNING, logger="resp_pubsub"):
            session.apply_ack(EventKind.SUBSCRIBE, "foo", 7)
        assert session.channel_count == 7
        assert "Server reports 7" in caplog.text

    def test_unexpected_ack_is_logged(self, caplog):
        session = SubscriptionSession()
        with caplog.at_level(logging.WARNING, logger="resp_pubsub"):
            session.apply_ack(EventKind.UNSUBSCRIBE, "foo", 0)
        assert session.outstanding_acks == 0
        assert "Unexpected unsubscribe ack" in caplog.text
