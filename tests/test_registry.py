"""Tests for CallbackRegistry and the Registration builder."""

from resp_pubsub.registry import CallbackRegistry, Registration
from resp_pubsub.types import STOP, EventKind


class TestCallbackRegistry:
    def test_missing_kind_is_noop(self):
        registry = CallbackRegistry()
        assert registry.invoke(EventKind.MESSAGE, object(), "foo", "x") is None
        assert EventKind.MESSAGE not in registry
        assert len(registry) == 0

    def test_invoke_passes_controller_first(self):
        registry = CallbackRegistry()
        calls = []
        registry.set(EventKind.MESSAGE, lambda ctl, *fields: calls.append((ctl, fields)))
        ctl = object()
        registry.invoke(EventKind.MESSAGE, ctl, "foo", "hello")
        assert calls == [(ctl, ("foo", "hello"))]

    def test_return_value_propagates(self):
        registry = CallbackRegistry()
        registry.set(EventKind.SUBSCRIBE, lambda ctl, name, total: STOP)
        assert registry.invoke(EventKind.SUBSCRIBE, None, "foo", 1) is STOP

    def test_last_registration_wins(self):
        registry = CallbackRegistry()
        registry.set(EventKind.MESSAGE, lambda *a: "first")
        registry.set(EventKind.MESSAGE, lambda *a: "second")
        assert registry.invoke(EventKind.MESSAGE, None, "c", "p") == "second"
        assert len(registry) == 1


class TestRegistration:
    def test_each_method_maps_to_its_kind(self):
        registry = CallbackRegistry()
        on = Registration(registry)
        handlers = {
            EventKind.SUBSCRIBE: on.subscribe(lambda *a: None),
            EventKind.UNSUBSCRIBE: on.unsubscribe(lambda *a: None),
            EventKind.MESSAGE: on.message(lambda *a: None),
            EventKind.PSUBSCRIBE: on.psubscribe(lambda *a: None),
            EventKind.PUNSUBSCRIBE: on.punsubscribe(lambda *a: None),
            EventKind.PMESSAGE: on.pmessage(lambda *a: None),
        }
        for kind, fn in handlers.items():
            assert registry.get(kind) is fn

    def test_decorator_returns_function(self):
        registry = CallbackRegistry()
        on = Registration(registry)

        @on.message
        def handle(ctl, channel, payload):
            return None

        assert callable(handle)
        assert registry.get(EventKind.MESSAGE) is handle
