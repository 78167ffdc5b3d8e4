"""
Minimal observer primitives for dataset lifecycle notifications.

A Signal holds an ordered list of handlers. connect() returns a Subscription
that can be revoked with disconnect(); disconnecting twice is a no-op.

Handlers run synchronously, in connection order, on the emitting thread.
"""

from __future__ import annotations

from typing import Any, Callable

from combinedata._logging import get_logger

logger = get_logger(__name__)

Handler = Callable[..., Any]


class Subscription:
    """Revocable link between a Signal and one handler."""

    __slots__ = ("_signal", "_handler")

    def __init__(self, signal: Signal, handler: Handler):
        self._signal: Signal | None = signal
        self._handler = handler

    @property
    def connected(self) -> bool:
        return self._signal is not None

    def disconnect(self) -> None:
        """Detach the handler. Safe to call more than once."""
        if self._signal is None:
            return
        self._signal._discard(self)
        self._signal = None

    def _fire(self, *args: Any) -> None:
        self._handler(*args)


class Signal:
    """
    Synchronous notification channel.

    Example:
        removed = Signal("about_to_be_removed")
        sub = removed.connect(lambda ds: print("bye", ds.name))
        removed.emit(dataset)
        sub.disconnect()
    """

    def __init__(self, name: str = "signal"):
        self.name = name
        self._subscriptions: list[Subscription] = []

    def __len__(self) -> int:
        return len(self._subscriptions)

    def __repr__(self) -> str:
        return f"Signal({self.name!r}, handlers={len(self)})"

    def connect(self, handler: Handler) -> Subscription:
        subscription = Subscription(self, handler)
        self._subscriptions.append(subscription)
        return subscription

    def emit(self, *args: Any) -> None:
        """
        Call every connected handler with args.

        Iterates over a snapshot so handlers may disconnect themselves
        (or others) while the signal is being emitted. A handler that was
        disconnected by an earlier handler in the same emission is skipped.
        """
        logger.debug(f"Emitting {self.name} to {len(self)} handler(s)")
        for subscription in list(self._subscriptions):
            if subscription.connected:
                subscription._fire(*args)

    def disconnect_all(self) -> None:
        for subscription in list(self._subscriptions):
            subscription.disconnect()

    def _discard(self, subscription: Subscription) -> None:
        try:
            self._subscriptions.remove(subscription)
        except ValueError:
            pass
