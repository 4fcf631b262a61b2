"""Reachability monitor - wires probe, scheduler and notifications together."""

import logging
import threading
from concurrent.futures import Executor
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from .config import MonitorConfig
from .connectivity import ConnectivityWatcher, DisconnectListener, PollingConnectivityWatcher
from .gate import NetworkGate, SysfsNetworkGate
from .notifier import ChangeNotifier, Listener
from .probe import CustomCheck, ReachabilityProbe, as_check_callable
from .scheduler import Scheduler, TimerFactory

logger = logging.getLogger(__name__)


class MonitorAlreadyRunningError(RuntimeError):
    """Raised when start() is called while a session is active."""


@dataclass(frozen=True)
class MonitorTarget:
    """What to monitor: a host for the default HTTP check, or a custom check.

    watch_connectivity enables the disconnect short-circuit, which reports
    "unreachable" as soon as the device loses its network.
    """

    host: Optional[str] = None
    check: Optional[CustomCheck] = None
    watch_connectivity: bool = False

    def __post_init__(self):
        if (self.host is None) == (self.check is None):
            raise ValueError("MonitorTarget needs exactly one of a host or a custom check")
        if self.check is not None:
            as_check_callable(self.check)

    @classmethod
    def for_host(cls, host: str, watch_connectivity: bool = False) -> "MonitorTarget":
        return cls(host=host, watch_connectivity=watch_connectivity)

    @classmethod
    def for_check(cls, check: CustomCheck, watch_connectivity: bool = True) -> "MonitorTarget":
        return cls(check=check, watch_connectivity=watch_connectivity)

    @property
    def description(self) -> str:
        if self.host is not None:
            return self.host
        return getattr(self.check, "__name__", type(self.check).__name__)


@dataclass
class MonitorSession:
    """One start -> stop lifecycle of a Monitor."""

    target: MonitorTarget
    notifier: ChangeNotifier
    scheduler: Scheduler
    disconnect_listener: Optional[DisconnectListener] = None
    keep_monitoring: bool = True
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def close(self) -> None:
        """Tear the session down. Later calls do nothing."""
        with self._lock:
            if not self.keep_monitoring:
                return
            self.keep_monitoring = False

        self.notifier.close()
        self.scheduler.stop()
        if self.disconnect_listener is not None:
            try:
                self.disconnect_listener.detach()
            except Exception as e:
                logger.warning(f"Failed to release connectivity subscription: {e}")


class Monitor:
    """Continuously tracks whether one target is reachable.

    Usage:
        monitor = Monitor()
        monitor.start_monitoring_host("https://www.example.com", on_change)
        ...
        monitor.stop()

    on_change receives True/False on the first result and on every
    transition afterwards, from a background thread.
    """

    def __init__(
        self,
        config: Optional[MonitorConfig] = None,
        gate: Optional[NetworkGate] = None,
        watcher: Optional[ConnectivityWatcher] = None,
        executor_factory: Optional[Callable[[], Executor]] = None,
        timer_factory: Optional[TimerFactory] = None,
    ):
        self.config = config or MonitorConfig()
        self.gate = gate or SysfsNetworkGate()
        self.watcher = watcher
        self.probe = ReachabilityProbe(
            gate=self.gate,
            timeout=self.config.check_timeout,
            user_agent=self.config.user_agent,
        )
        self._executor_factory = executor_factory
        self._timer_factory = timer_factory

        # re-entrant so listeners running inline may read current_state()
        self._lock = threading.RLock()
        self._session: Optional[MonitorSession] = None
        self._notifier: Optional[ChangeNotifier] = None

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._session is not None

    @property
    def session(self) -> Optional[MonitorSession]:
        with self._lock:
            return self._session

    def current_state(self) -> bool:
        """Last reported reachability; False before the first result."""
        with self._lock:
            notifier = self._notifier
        return notifier.is_reachable if notifier is not None else False

    def start(
        self,
        target: MonitorTarget,
        listener: Listener,
        context: Any = None,
    ) -> MonitorSession:
        """Start monitoring a target.

        Args:
            target: Host or custom check to monitor.
            listener: Called with the new reachability on every transition.
            context: Opaque value passed to the gate and custom check.

        Returns:
            The new session.

        Raises:
            MonitorAlreadyRunningError: If a session is already active.
        """
        def task() -> bool:
            return self.probe.check(
                target.host,
                custom_check=target.check,
                context=context,
            )

        with self._lock:
            if self._session is not None:
                raise MonitorAlreadyRunningError(
                    f"Already monitoring {self._session.target.description}, call stop() first"
                )

            notifier = ChangeNotifier(listener)
            scheduler = Scheduler(
                executor_factory=self._executor_factory,
                timer_factory=self._timer_factory,
            )
            session = MonitorSession(target=target, notifier=notifier, scheduler=scheduler)
            self._session = session
            self._notifier = notifier

            logger.info(
                f"Monitoring {target.description} "
                f"(timeout={self.config.check_timeout}s, interval={self.config.recheck_interval}s)"
            )

            try:
                if target.watch_connectivity:
                    watcher = self.watcher or PollingConnectivityWatcher(self.gate, context=context)
                    session.disconnect_listener = DisconnectListener(self.gate, notifier, context)
                    session.disconnect_listener.attach(watcher)

                scheduler.start(task, self.config.recheck_interval, notifier.report)
            except Exception:
                self._session = None
                session.close()
                raise

        return session

    def start_monitoring_host(
        self,
        host: str,
        listener: Listener,
        context: Any = None,
    ) -> MonitorSession:
        """Monitor a host with the default HTTP check."""
        return self.start(MonitorTarget.for_host(host), listener, context)

    def start_monitoring_check(
        self,
        check: CustomCheck,
        listener: Listener,
        context: Any = None,
    ) -> MonitorSession:
        """Monitor with a custom check, reacting to network loss immediately."""
        return self.start(MonitorTarget.for_check(check), listener, context)

    def stop(self) -> None:
        """Stop monitoring. Safe without start() and when called twice."""
        with self._lock:
            session, self._session = self._session, None

        if session is None:
            return

        session.close()
        logger.info(f"Stopped monitoring {session.target.description}")
