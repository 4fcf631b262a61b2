"""Configuration for the hostwatch service."""

import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from hostwatch.reachability.config import (
    DEFAULT_CHECK_TIMEOUT,
    DEFAULT_RECHECK_INTERVAL,
    DEFAULT_USER_AGENT,
    MonitorConfig,
)
from hostwatch.shared.config import get_log_level, load_yaml_config
from hostwatch.shared.mqtt import MQTTConfig, topic_segment

NETWORK_GATES = ("sysfs", "static")


@dataclass
class TargetConfig:
    """A monitored host and the name it is published under."""
    name: str
    url: str

    @classmethod
    def from_value(cls, value: Union[str, dict]) -> "TargetConfig":
        """Create from a bare URL or a {name, url} mapping."""
        if isinstance(value, str):
            return cls(name=topic_segment(value), url=value)
        if isinstance(value, dict) and "url" in value:
            return cls(name=value.get("name") or topic_segment(value["url"]), url=value["url"])
        raise ValueError(f"Target must be a URL or a mapping with 'url', got {value!r}")


def _default_targets() -> List[TargetConfig]:
    return [TargetConfig(name="google", url="http://www.google.com")]


@dataclass
class WatchConfig:
    """Configuration for host watching."""

    targets: List[TargetConfig] = field(default_factory=_default_targets)

    # Check settings
    check_timeout: int = DEFAULT_CHECK_TIMEOUT  # seconds
    recheck_interval: int = DEFAULT_RECHECK_INTERVAL  # seconds
    user_agent: str = DEFAULT_USER_AGENT

    # Device network detection
    network_gate: str = "sysfs"
    watch_connectivity: bool = False
    connectivity_poll_interval: float = 1.0  # seconds

    # MQTT settings
    publish_transitions: bool = True
    mqtt: MQTTConfig = field(default_factory=MQTTConfig)
    mqtt_topic: str = "hostwatch/reachability"

    # Logging
    log_level: str = "INFO"

    def __post_init__(self):
        if self.network_gate not in NETWORK_GATES:
            raise ValueError(f"network_gate must be one of {NETWORK_GATES}, got {self.network_gate!r}")

        # names double as MQTT topic levels and service keys
        seen: Dict[str, TargetConfig] = {}
        for target in self.targets:
            if target.name in seen:
                raise ValueError(
                    f"Targets {seen[target.name].url!r} and {target.url!r} "
                    f"share the name {target.name!r}; give one an explicit name"
                )
            seen[target.name] = target

    def monitor_config(self) -> MonitorConfig:
        """Timing settings shared by every target's monitor."""
        return MonitorConfig(
            check_timeout=self.check_timeout,
            recheck_interval=self.recheck_interval,
            user_agent=self.user_agent,
        )

    @classmethod
    def from_dict(cls, data: dict) -> "WatchConfig":
        """Create config from dictionary."""
        mqtt_data = data.get("mqtt") or {}
        raw_targets = data.get("targets")
        targets = (
            [TargetConfig.from_value(t) for t in raw_targets]
            if raw_targets
            else _default_targets()
        )

        return cls(
            targets=targets,
            check_timeout=data.get("check_timeout", DEFAULT_CHECK_TIMEOUT),
            recheck_interval=data.get("recheck_interval", DEFAULT_RECHECK_INTERVAL),
            user_agent=data.get("user_agent", DEFAULT_USER_AGENT),
            network_gate=data.get("network_gate", "sysfs"),
            watch_connectivity=data.get("watch_connectivity", False),
            connectivity_poll_interval=data.get("connectivity_poll_interval", 1.0),
            publish_transitions=data.get("publish_transitions", True),
            mqtt=MQTTConfig.from_dict(mqtt_data),
            mqtt_topic=data.get("mqtt_topic", "hostwatch/reachability"),
            log_level=get_log_level(data),
        )


def load_config(config_path: Optional[str] = None) -> WatchConfig:
    """Load configuration from YAML file or environment.

    Args:
        config_path: Path to YAML config file. If not provided, the file
                    is looked up as described in find_config_file();
                    without one, defaults plus environment overrides
                    are used.

    Returns:
        WatchConfig instance.

    Raises:
        FileNotFoundError: If config_path or HOSTWATCH_CONFIG names a
                    missing file.
    """
    data = load_yaml_config(config_path)
    if data:
        return WatchConfig.from_dict(data)

    # Environment variable overrides
    overrides = {}

    if targets := os.environ.get("HOSTWATCH_TARGETS"):
        overrides["targets"] = [
            TargetConfig.from_value(url.strip()) for url in targets.split(",") if url.strip()
        ]
    if log_level := os.environ.get("LOG_LEVEL"):
        overrides["log_level"] = log_level.upper()

    config = WatchConfig(**overrides)
    if mqtt_broker := os.environ.get("MQTT_BROKER"):
        config.mqtt.broker = mqtt_broker

    return config
