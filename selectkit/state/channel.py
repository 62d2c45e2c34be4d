"""Replay-latest observable channel.

A channel is a single-slot cache plus an ordered list of subscribers.
New subscribers receive the cached value immediately; every ``publish``
then pushes synchronously to all subscribers in subscription order.
"""

from __future__ import annotations

import logging
from typing import Callable, Generic, List, Optional, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


class Subscription:
    """Handle returned by :meth:`ReplayChannel.subscribe`."""

    def __init__(self, release: Callable[[], None]) -> None:
        self._release: Optional[Callable[[], None]] = release

    @property
    def closed(self) -> bool:
        return self._release is None

    def unsubscribe(self) -> None:
        """Detach the callback. Calling it again does nothing."""
        release, self._release = self._release, None
        if release is not None:
            release()

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.unsubscribe()


class _Subscriber(Generic[T]):
    __slots__ = ("callback", "active")

    def __init__(self, callback: Callable[[T], None]) -> None:
        self.callback = callback
        self.active = True


class ReplayChannel(Generic[T]):
    """Observable cell that caches and replays its latest value.

    Usage:
        channel = ReplayChannel([], name="genres.list")
        sub = channel.subscribe(print)   # prints [] right away
        channel.publish([1, 2])          # prints [1, 2]
        sub.unsubscribe()
    """

    def __init__(self, initial: T, name: str = "") -> None:
        self._value = initial
        self._name = name
        self._subscribers: List[_Subscriber[T]] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def value(self) -> T:
        """Latest published value."""
        return self._value

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self, callback: Callable[[T], None]) -> Subscription:
        """Register ``callback`` and deliver the current value to it at once.

        Args:
            callback: Called with each value, starting with the cached one

        Returns:
            Subscription whose ``unsubscribe()`` detaches the callback
        """
        subscriber = _Subscriber(callback)
        self._subscribers.append(subscriber)
        self._deliver(subscriber, self._value)
        return Subscription(lambda: self._remove(subscriber))

    def publish(self, value: T) -> None:
        """Cache ``value`` and push it to every current subscriber."""
        self._value = value
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Channel '{self._name}' emitting to {len(self._subscribers)} subscriber(s)")
        # Iterate a snapshot so callbacks may (un)subscribe while we deliver
        for subscriber in list(self._subscribers):
            if subscriber.active:
                self._deliver(subscriber, value)

    def _remove(self, subscriber: _Subscriber[T]) -> None:
        subscriber.active = False
        if subscriber in self._subscribers:
            self._subscribers.remove(subscriber)

    def _deliver(self, subscriber: _Subscriber[T], value: T) -> None:
        """Call one subscriber; a failure is logged and does not stop delivery."""
        try:
            subscriber.callback(value)
        except Exception as exc:
            callback_name = getattr(subscriber.callback, "__name__", str(subscriber.callback))
            logger.exception(
                f"Subscriber '{callback_name}' failed on channel '{self._name}'",
                exc_info=exc,
            )

    def __repr__(self) -> str:
        return f"ReplayChannel(name={self._name!r}, subscribers={len(self._subscribers)})"
