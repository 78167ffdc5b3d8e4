"""Unit tests for Signal/Subscription."""

from combinedata._signal import Signal


class TestSignal:

    def test_emit_calls_handlers_in_order(self):
        signal = Signal("s")
        calls = []
        signal.connect(lambda x: calls.append(("first", x)))
        signal.connect(lambda x: calls.append(("second", x)))

        signal.emit(1)

        assert calls == [("first", 1), ("second", 1)]

    def test_disconnect_stops_delivery(self):
        signal = Signal("s")
        calls = []
        sub = signal.connect(calls.append)
        sub.disconnect()
        signal.emit(1)
        assert calls == []
        assert not sub.connected
        assert len(signal) == 0

    def test_disconnect_twice_is_noop(self):
        signal = Signal("s")
        sub = signal.connect(lambda: None)
        sub.disconnect()
        sub.disconnect()
        assert len(signal) == 0

    def test_handler_may_disconnect_later_handler(self):
        signal = Signal("s")
        calls = []
        later = None

        def first():
            calls.append("first")
            later.disconnect()

        signal.connect(first)
        later = signal.connect(lambda: calls.append("later"))

        signal.emit()

        assert calls == ["first"]

    def test_disconnect_all(self):
        signal = Signal("s")
        subs = [signal.connect(lambda: None) for _ in range(3)]
        signal.disconnect_all()
        assert len(signal) == 0
        assert not any(s.connected for s in subs)
