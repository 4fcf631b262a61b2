"""Host watch service - monitors configured hosts and publishes transitions."""

import logging
import signal
import threading
from typing import Callable, Dict, List, Optional

from hostwatch.reachability import (
    ConnectivityWatcher,
    Monitor,
    MonitorTarget,
    NetworkGate,
    PollingConnectivityWatcher,
    StaticNetworkGate,
    SysfsNetworkGate,
)

from .config import TargetConfig, WatchConfig
from .publisher import TransitionPublisher

logger = logging.getLogger(__name__)


class HostWatchService:
    """Runs one Monitor per configured target until told to stop."""

    def __init__(
        self,
        config: WatchConfig,
        gate: Optional[NetworkGate] = None,
        publisher: Optional[TransitionPublisher] = None,
        monitor_factory: Optional[Callable[..., Monitor]] = None,
    ):
        self.config = config
        self.gate = gate or self._create_gate()
        self.publisher = publisher
        if self.publisher is None and config.publish_transitions:
            self.publisher = TransitionPublisher(config.mqtt, config.mqtt_topic)

        self._monitor_factory = monitor_factory or Monitor
        self._watcher: Optional[ConnectivityWatcher] = None
        self._monitors: Dict[str, Monitor] = {}
        self._stop_event = threading.Event()

    def _create_gate(self) -> NetworkGate:
        if self.config.network_gate == "static":
            return StaticNetworkGate(connected=True)
        return SysfsNetworkGate()

    def _on_transition(self, target: TargetConfig, reachable: bool) -> None:
        if reachable:
            logger.info(f"Connected to {target.url}")
        else:
            logger.warning(f"Not connected to {target.url}")

        if self.publisher and self.publisher.is_connected:
            try:
                self.publisher.publish_transition(target.name, target.url, reachable)
            except Exception as e:
                logger.error(f"Failed to publish transition for {target.name}: {e}")

    def _make_listener(self, target: TargetConfig) -> Callable[[bool], None]:
        def listener(reachable: bool) -> None:
            self._on_transition(target, reachable)

        return listener

    @property
    def targets(self) -> List[TargetConfig]:
        return list(self.config.targets)

    def start(self) -> None:
        """Connect to MQTT (if enabled) and start every monitor."""
        if self.publisher and not self.publisher.is_connected:
            if not self.publisher.connect():
                logger.warning("Continuing without MQTT, transitions will only be logged")

        if self.config.watch_connectivity and self._watcher is None:
            self._watcher = PollingConnectivityWatcher(
                self.gate,
                poll_interval=self.config.connectivity_poll_interval,
            )

        monitor_config = self.config.monitor_config()
        for target in self.config.targets:
            if target.name in self._monitors:
                continue
            monitor = self._monitor_factory(
                config=monitor_config,
                gate=self.gate,
                watcher=self._watcher,
            )
            monitor.start(
                MonitorTarget.for_host(target.url, watch_connectivity=self.config.watch_connectivity),
                self._make_listener(target),
            )
            self._monitors[target.name] = monitor

        logger.info(f"Watching {len(self._monitors)} target(s)")

    def stop(self) -> None:
        """Stop every monitor and disconnect from MQTT. Idempotent."""
        self._stop_event.set()

        monitors, self._monitors = self._monitors, {}
        for name, monitor in monitors.items():
            try:
                monitor.stop()
            except Exception as e:
                logger.error(f"Failed to stop monitor for {name}: {e}")

        if self.publisher:
            self.publisher.disconnect()

    def status(self) -> Dict[str, bool]:
        """Current reachability of every running target, by name."""
        return {name: monitor.current_state() for name, monitor in self._monitors.items()}

    def _setup_signal_handlers(self):
        """Set up signal handlers for graceful shutdown."""
        def signal_handler(signum, frame):
            signame = signal.Signals(signum).name
            logger.info(f"Received {signame}, shutting down...")
            self._stop_event.set()

        signal.signal(signal.SIGTERM, signal_handler)
        signal.signal(signal.SIGINT, signal_handler)

    def run(self) -> None:
        """Run the service until SIGINT or SIGTERM (blocking)."""
        self._setup_signal_handlers()
        self._stop_event.clear()

        logger.info(
            f"Starting host watch (targets={', '.join(t.url for t in self.config.targets)}, "
            f"interval={self.config.recheck_interval}s)"
        )

        try:
            self.start()
            while not self._stop_event.wait(timeout=1.0):
                pass
        except KeyboardInterrupt:
            logger.info("Shutting down host watch...")
        finally:
            self.stop()
