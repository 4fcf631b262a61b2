"""hostwatch - host reachability monitoring."""

__version__ = "0.1.0"

from .reachability import (
    ChangeNotifier,
    Monitor,
    MonitorAlreadyRunningError,
    MonitorConfig,
    MonitorTarget,
    ReachabilityCheck,
    ReachabilityListener,
    host_is_reachable,
)

__all__ = [
    "ChangeNotifier",
    "Monitor",
    "MonitorAlreadyRunningError",
    "MonitorConfig",
    "MonitorTarget",
    "ReachabilityCheck",
    "ReachabilityListener",
    "host_is_reachable",
]
