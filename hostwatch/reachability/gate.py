"""Device-level network presence checks."""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Iterable, Union

logger = logging.getLogger(__name__)


class NetworkGate(ABC):
    """Answers whether the device is attached to any network at all."""

    @abstractmethod
    def has_any_network(self, context: Any = None) -> bool:
        """True if at least one network interface is up and connected."""
        pass


class SysfsNetworkGate(NetworkGate):
    """Reads interface link state from /sys/class/net on Linux."""

    def __init__(
        self,
        sys_class_net: Union[str, Path] = "/sys/class/net",
        ignore: Iterable[str] = ("lo",),
    ):
        self.sys_class_net = Path(sys_class_net)
        self.ignore = frozenset(ignore)

    def _operstate(self, interface: Path) -> str:
        try:
            return (interface / "operstate").read_text().strip()
        except OSError as e:
            logger.debug(f"Could not read link state of {interface.name}: {e}")
            return "unknown"

    def has_any_network(self, context: Any = None) -> bool:
        try:
            interfaces = sorted(self.sys_class_net.iterdir())
        except OSError as e:
            logger.warning(f"Could not list network interfaces in {self.sys_class_net}: {e}")
            return False

        for interface in interfaces:
            if interface.name in self.ignore:
                continue
            if self._operstate(interface) == "up":
                return True
        return False


class StaticNetworkGate(NetworkGate):
    """Gate with a fixed answer, for hosts without sysfs and for tests."""

    def __init__(self, connected: bool = True):
        self.connected = connected

    def has_any_network(self, context: Any = None) -> bool:
        return self.connected
