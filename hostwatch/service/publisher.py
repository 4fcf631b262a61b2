"""MQTT publisher for reachability transitions."""

import logging
import threading
from typing import Optional

import paho.mqtt.client as mqtt
from paho.mqtt.enums import CallbackAPIVersion

from hostwatch.shared.mqtt import MQTTConfig, create_reachability_payload, topic_segment

logger = logging.getLogger(__name__)


class TransitionPublisher:
    """Publishes reachability transitions to an MQTT broker.

    Messages are retained so a late subscriber sees the current state.
    """

    def __init__(self, config: MQTTConfig, base_topic: str):
        """Initialize MQTT publisher.

        Args:
            config: MQTT configuration.
            base_topic: Topic prefix; each target publishes to base_topic/name.
        """
        self.config = config
        self.base_topic = base_topic.rstrip("/")
        self.client: Optional[mqtt.Client] = None
        self._connected = False
        self._connect_event = threading.Event()

    def _on_connect(self, client, userdata, flags, reason_code, properties):
        """Handle connection to broker."""
        if reason_code == 0:
            logger.info(
                f"Connected to MQTT broker at {self.config.broker}:{self.config.port}"
            )
            self._connected = True
        else:
            logger.error(f"Failed to connect to MQTT broker: {reason_code}")
            self._connected = False
        self._connect_event.set()

    def _on_disconnect(self, client, userdata, disconnect_flags, reason_code, properties):
        """Handle disconnection from broker."""
        self._connected = False
        if reason_code != 0:
            logger.warning(f"Unexpected MQTT disconnection (reason={reason_code})")
        else:
            logger.info("Disconnected from MQTT broker")

    def connect(self, timeout: float = 10.0) -> bool:
        """Connect to the MQTT broker.

        Args:
            timeout: Timeout in seconds to wait for connection.

        Returns:
            True if connected successfully, False otherwise.
        """
        self._connect_event.clear()

        self.client = mqtt.Client(
            callback_api_version=CallbackAPIVersion.VERSION2,
            client_id=self.config.client_id,
        )
        self.client.on_connect = self._on_connect
        self.client.on_disconnect = self._on_disconnect

        logger.info(
            f"Connecting to MQTT broker at {self.config.broker}:{self.config.port}"
        )

        try:
            self.client.connect(self.config.broker, self.config.port, keepalive=self.config.keepalive)
            self.client.loop_start()

            if self._connect_event.wait(timeout=timeout):
                return self._connected
            else:
                logger.error("Timeout waiting for MQTT connection")
                return False
        except Exception as e:
            logger.error(f"Failed to connect to MQTT broker: {e}")
            return False

    def disconnect(self):
        """Disconnect from the MQTT broker."""
        if self.client:
            self.client.loop_stop()
            self.client.disconnect()
            self.client = None
            self._connected = False

    def topic_for(self, name: str) -> str:
        return f"{self.base_topic}/{topic_segment(name)}"

    def publish_transition(self, name: str, url: str, reachable: bool) -> bool:
        """Publish a target's new reachability.

        Args:
            name: Target name, used as the last topic level.
            url: Host identifier of the target.
            reachable: New reachability.

        Returns:
            True if the message was handed to the client.
        """
        if not self._connected or not self.client:
            logger.warning("Not connected to MQTT broker, cannot publish")
            return False

        topic = self.topic_for(name)
        payload = create_reachability_payload(url, reachable)

        result = self.client.publish(topic, payload, qos=self.config.qos, retain=True)
        if result.rc == mqtt.MQTT_ERR_SUCCESS:
            logger.debug(f"Published to {topic}: {payload}")
            return True
        logger.warning(f"Failed to publish to {topic}: rc={result.rc}")
        return False

    @property
    def is_connected(self) -> bool:
        """Check if connected to MQTT broker."""
        return self._connected
