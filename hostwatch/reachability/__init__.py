"""Host reachability monitoring core.

Public API:
    - Monitor: tracks one target and reports reachability transitions
    - MonitorTarget: a host URL or a custom check to monitor
    - host_is_reachable: one-shot blocking check

Usage:
    from hostwatch.reachability import Monitor

    monitor = Monitor()
    monitor.start_monitoring_host("https://www.example.com", print)
"""

from .config import MonitorConfig
from .connectivity import (
    ConnectivityWatcher,
    DisconnectListener,
    PollingConnectivityWatcher,
    Subscription,
)
from .gate import NetworkGate, StaticNetworkGate, SysfsNetworkGate
from .monitor import Monitor, MonitorAlreadyRunningError, MonitorSession, MonitorTarget
from .notifier import ChangeNotifier, ReachabilityListener, ReachabilityState
from .probe import ReachabilityCheck, ReachabilityProbe, fetch_status, host_is_reachable
from .scheduler import Scheduler, SchedulerError, SchedulerState

__all__ = [
    "ChangeNotifier",
    "ConnectivityWatcher",
    "DisconnectListener",
    "Monitor",
    "MonitorAlreadyRunningError",
    "MonitorConfig",
    "MonitorSession",
    "MonitorTarget",
    "NetworkGate",
    "PollingConnectivityWatcher",
    "ReachabilityCheck",
    "ReachabilityListener",
    "ReachabilityProbe",
    "ReachabilityState",
    "Scheduler",
    "SchedulerError",
    "SchedulerState",
    "StaticNetworkGate",
    "Subscription",
    "SysfsNetworkGate",
    "fetch_status",
    "host_is_reachable",
]
