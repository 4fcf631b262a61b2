"""Reachability state tracking and change notification."""

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Union

logger = logging.getLogger(__name__)


class ReachabilityListener(ABC):
    """Receives reachability transitions for a monitored host."""

    @abstractmethod
    def on_reachability_changed(self, reachable: bool) -> None:
        """Called with the new reachability after every transition."""
        pass


Listener = Union[ReachabilityListener, Callable[[bool], None]]


def as_listener_callable(listener: Listener) -> Callable[[bool], None]:
    """Normalize a ReachabilityListener or plain function to a callable."""
    if isinstance(listener, ReachabilityListener):
        return listener.on_reachability_changed
    if callable(listener):
        return listener
    raise TypeError(f"Listener must be a ReachabilityListener or callable, got {type(listener).__name__}")


@dataclass(frozen=True)
class ReachabilityState:
    """Last known reachability of a target."""
    is_reachable: bool = False
    has_checked: bool = False


class ChangeNotifier:
    """Decides when a new probe result is a transition worth reporting.

    report() is the single entry point for both the scheduled probes and
    the disconnect listener. It holds one lock across the compare, the
    update and the listener call, so listener invocations are totally
    ordered and no transition is fired twice. The lock is re-entrant so a
    listener may read the state back, or close the notifier.

    After close() returns, report() is a no-op and no listener call is in
    progress on another thread.
    """

    def __init__(self, listener: Listener):
        self._listener = as_listener_callable(listener)
        self._state = ReachabilityState()
        self._closed = False
        self._lock = threading.RLock()

    @property
    def state(self) -> ReachabilityState:
        with self._lock:
            return self._state

    @property
    def is_reachable(self) -> bool:
        return self.state.is_reachable

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    def close(self) -> None:
        """Stop notifying. Waits for a listener call on another thread."""
        with self._lock:
            self._closed = True

    def report(self, reachable: bool) -> bool:
        """Record a result and notify the listener if it is a transition.

        Args:
            reachable: Result of the latest check.

        Returns:
            True if the listener was notified.
        """
        reachable = bool(reachable)
        with self._lock:
            if self._closed:
                return False
            if self._state.has_checked and reachable == self._state.is_reachable:
                return False

            previous = self._state
            self._state = ReachabilityState(is_reachable=reachable, has_checked=True)
            if previous.has_checked:
                logger.info(f"Reachability changed: {previous.is_reachable} -> {reachable}")
            else:
                logger.info(f"Initial reachability: {reachable}")

            try:
                self._listener(reachable)
            except Exception:
                logger.exception("Reachability listener raised")
            return True
