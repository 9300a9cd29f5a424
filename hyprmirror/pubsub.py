"""Minimal observer used for change and event notifications."""

from collections.abc import Callable
from logging import Logger
from types import TracebackType
from typing import Generic, Self, TypeVar

__all__ = ["Publisher", "Subscription"]

T = TypeVar("T")


class Subscription:
    """Handle returned by `Publisher.subscribe`, closing it stops the notifications."""

    def __init__(self, publisher: "Publisher", callback: Callable) -> None:
        self._publisher = publisher
        self.callback = callback

    @property
    def active(self) -> bool:
        """Return True until closed."""
        return self in self._publisher.subscriptions

    def close(self) -> None:
        """Unsubscribe, can be called several times."""
        if self.active:
            self._publisher.subscriptions.remove(self)

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type: type[BaseException] | None, exc_val: BaseException | None, exc_tb: TracebackType | None) -> None:
        self.close()


class Publisher(Generic[T]):
    """Deliver values to the subscribed callbacks, in subscription order."""

    def __init__(self, log: Logger) -> None:
        self.log = log
        self.subscriptions: list[Subscription] = []

    def subscribe(self, callback: Callable[[T], None]) -> Subscription:
        """Call `callback(value)` on every `publish`."""
        subscription = Subscription(self, callback)
        self.subscriptions.append(subscription)
        return subscription

    def publish(self, value: T) -> None:
        """Notify every subscriber, a failing callback doesn't prevent the others from running."""
        for subscription in list(self.subscriptions):
            try:
                subscription.callback(value)
            except Exception:  # pylint: disable=broad-exception-caught
                self.log.exception("subscriber %s failed on %s", subscription.callback, value)
