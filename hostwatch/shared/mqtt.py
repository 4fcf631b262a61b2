"""MQTT configuration and utilities."""

import json
import re
import time
from dataclasses import dataclass
from typing import Optional


@dataclass
class MQTTConfig:
    """MQTT broker configuration."""
    broker: str = "localhost"
    port: int = 1883
    client_id: str = "hostwatch"
    keepalive: int = 60
    qos: int = 1

    @classmethod
    def from_dict(cls, data: dict) -> "MQTTConfig":
        """Create config from dictionary."""
        return cls(
            broker=data.get("broker", "localhost"),
            port=data.get("port", 1883),
            client_id=data.get("client_id", "hostwatch"),
            keepalive=data.get("keepalive", 60),
            qos=data.get("qos", 1),
        )


def create_reachability_payload(
    target: str,
    reachable: bool,
    timestamp: Optional[float] = None,
) -> str:
    """Create a standardized MQTT payload for a reachability transition.

    Args:
        target: Host identifier (usually a URL) being monitored.
        reachable: New reachability of the target.
        timestamp: Unix timestamp (defaults to current time).

    Returns:
        JSON string payload.
    """
    return json.dumps({
        "target": target,
        "reachable": reachable,
        "ts": timestamp or time.time(),
    })


def topic_segment(name: str) -> str:
    """Make a name safe to use as a single MQTT topic level.

    Wildcards and separators are replaced by underscores, e.g.
    "https://example.com/health" -> "https___example.com_health".
    """
    segment = re.sub(r"[/#+\s:]", "_", name.strip())
    return segment or "_"
