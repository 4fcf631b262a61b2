"""Connectivity-change subscriptions and the disconnect short-circuit."""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional

from .gate import NetworkGate
from .notifier import ChangeNotifier

logger = logging.getLogger(__name__)


class Subscription:
    """Handle for a registered connectivity callback.

    unsubscribe() releases the registration exactly once; further calls
    are no-ops.
    """

    def __init__(self, release: Callable[[], None]):
        self._release: Optional[Callable[[], None]] = release
        self._lock = threading.Lock()

    @property
    def active(self) -> bool:
        with self._lock:
            return self._release is not None

    def unsubscribe(self) -> None:
        with self._lock:
            release, self._release = self._release, None
        if release is not None:
            release()


class ConnectivityWatcher(ABC):
    """Source of "network state changed, check again" events."""

    @abstractmethod
    def subscribe(self, callback: Callable[[], None]) -> Subscription:
        """Register a callback for connectivity changes."""
        pass


class PollingConnectivityWatcher(ConnectivityWatcher):
    """Watches a NetworkGate and reports every flip of its answer.

    A single daemon thread polls the gate while at least one subscription
    is active. Callbacks run on that thread.
    """

    def __init__(
        self,
        gate: NetworkGate,
        poll_interval: float = 1.0,
        context: Any = None,
    ):
        self.gate = gate
        self.poll_interval = poll_interval
        self.context = context

        self._callbacks: List[Callable[[], None]] = []
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def subscribe(self, callback: Callable[[], None]) -> Subscription:
        with self._lock:
            self._callbacks.append(callback)
            if self._thread is None:
                self._stop_event = threading.Event()
                self._thread = threading.Thread(
                    target=self._poll_loop,
                    args=(self._stop_event,),
                    name="connectivity-watcher",
                    daemon=True,
                )
                self._thread.start()
                logger.debug(f"Connectivity watcher started (interval={self.poll_interval}s)")

        return Subscription(lambda: self._unsubscribe(callback))

    def _unsubscribe(self, callback: Callable[[], None]) -> None:
        with self._lock:
            self._callbacks.remove(callback)
            if self._callbacks or self._thread is None:
                return
            self._stop_event.set()
            self._thread = None
        logger.debug("Connectivity watcher stopped")

    def _has_network(self) -> bool:
        try:
            return self.gate.has_any_network(self.context)
        except Exception as e:
            logger.warning(f"Network gate failed: {e}")
            return False

    def _poll_loop(self, stop_event: threading.Event) -> None:
        connected = self._has_network()
        while not stop_event.wait(self.poll_interval):
            now_connected = self._has_network()
            if now_connected == connected:
                continue

            logger.info(f"Device network {'attached' if now_connected else 'lost'}")
            connected = now_connected
            with self._lock:
                callbacks = list(self._callbacks)
            for callback in callbacks:
                try:
                    callback()
                except Exception:
                    logger.exception("Connectivity callback raised")


class DisconnectListener:
    """Forces an immediate "unreachable" when the device loses its network.

    A regained network is ignored; only a real probe can say the host is
    back. Once detached it ignores events a watcher had already
    dispatched.
    """

    def __init__(
        self,
        gate: NetworkGate,
        notifier: ChangeNotifier,
        context: Any = None,
    ):
        self.gate = gate
        self.notifier = notifier
        self.context = context
        self._subscription: Optional[Subscription] = None
        self._detached = False
        self._lock = threading.Lock()

    @property
    def detached(self) -> bool:
        with self._lock:
            return self._detached

    def on_connectivity_changed(self) -> None:
        if self.detached or self.gate.has_any_network(self.context):
            return
        if self.notifier.is_reachable:
            logger.info("Network lost, marking host unreachable")
            self.notifier.report(False)

    def attach(self, watcher: ConnectivityWatcher) -> Subscription:
        """Subscribe to connectivity changes reported by a watcher."""
        with self._lock:
            if self._subscription is not None and self._subscription.active:
                raise RuntimeError("DisconnectListener is already attached")
            self._detached = False
            self._subscription = watcher.subscribe(self.on_connectivity_changed)
        return self._subscription

    def detach(self) -> None:
        """Unsubscribe. Later connectivity events are ignored."""
        with self._lock:
            self._detached = True
            subscription, self._subscription = self._subscription, None
        if subscription is not None:
            subscription.unsubscribe()
