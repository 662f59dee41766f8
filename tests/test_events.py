import pytest

from app.services.events import EventDispatcher


class TestEventDispatcher:
    def test_trigger_without_handlers_returns_empty_list(self):
        assert EventDispatcher().trigger("onNothing", 1, 2) == []

    def test_results_follow_registration_order(self):
        dispatcher = EventDispatcher()
        dispatcher.add_handler("onPing", lambda value: f"first {value}")
        dispatcher.add_handler("onPing", lambda value: f"second {value}")

        assert dispatcher.trigger("onPing", "x") == ["first x", "second x"]

    def test_handlers_receive_all_arguments(self):
        dispatcher = EventDispatcher()
        received = []
        dispatcher.add_handler("onUserAvatar", lambda *args: received.append(args))

        dispatcher.trigger("onUserAvatar", 3, "a@b.io", {"k": "v"})

        assert received == [(3, "a@b.io", {"k": "v"})]

    def test_remove_handler(self):
        dispatcher = EventDispatcher()

        def handler():
            return "hit"

        dispatcher.add_handler("onPing", handler)
        dispatcher.remove_handler("onPing", handler)
        dispatcher.remove_handler("onPing", handler)

        assert dispatcher.has_handlers("onPing") is False
        assert dispatcher.trigger("onPing") == []

    def test_clear_single_event_or_everything(self):
        dispatcher = EventDispatcher()
        dispatcher.add_handler("onA", lambda: 1)
        dispatcher.add_handler("onB", lambda: 2)

        dispatcher.clear("onA")
        assert dispatcher.has_handlers("onA") is False
        assert dispatcher.has_handlers("onB") is True

        dispatcher.clear()
        assert dispatcher.has_handlers("onB") is False

    def test_handler_errors_propagate(self):
        dispatcher = EventDispatcher()

        def broken():
            raise RuntimeError("boom")

        dispatcher.add_handler("onPing", broken)

        with pytest.raises(RuntimeError, match="boom"):
            dispatcher.trigger("onPing")
