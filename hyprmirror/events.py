"""Event classification and refresh debouncing."""

import asyncio
from collections.abc import Callable
from enum import Enum

from .constants import DEBOUNCED_EVENTS, IMMEDIATE_EVENTS

__all__ = ["Debouncer", "RefreshPolicy", "classify"]


class RefreshPolicy(Enum):
    """What an event triggers."""

    IMMEDIATE = "immediate"
    DEBOUNCED = "debounced"
    NONE = "none"


def classify(name: str) -> RefreshPolicy:
    """Return the refresh policy of the event `name`."""
    if name in IMMEDIATE_EVENTS:
        return RefreshPolicy.IMMEDIATE
    if name in DEBOUNCED_EVENTS:
        return RefreshPolicy.DEBOUNCED
    return RefreshPolicy.NONE


class Debouncer:
    """Single-shot timer calling `callback` once `delay` elapsed since the last `trigger`."""

    def __init__(self, delay: float, callback: Callable[[], object]) -> None:
        self.delay = delay
        self.callback = callback
        self._handle: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> bool:
        """Return True if a call is scheduled."""
        return self._handle is not None

    def trigger(self) -> None:
        """(Re)start the timer, dropping any scheduled call.

        Must be called from the event loop thread.
        """
        self.cancel()
        self._handle = asyncio.get_running_loop().call_later(self.delay, self._fire)

    def cancel(self) -> None:
        """Drop the scheduled call, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        self.callback()
