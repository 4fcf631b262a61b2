"""Configuration for reachability monitoring."""

from dataclasses import dataclass

DEFAULT_CHECK_TIMEOUT = 5  # seconds
DEFAULT_RECHECK_INTERVAL = 2  # seconds
DEFAULT_USER_AGENT = "hostwatch reachability probe"


@dataclass(frozen=True)
class MonitorConfig:
    """Timing settings for one monitoring session.

    Fixed at construction; a running session never sees them change.
    """

    check_timeout: int = DEFAULT_CHECK_TIMEOUT
    recheck_interval: int = DEFAULT_RECHECK_INTERVAL
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self):
        if self.check_timeout <= 0:
            raise ValueError(f"check_timeout must be positive, got {self.check_timeout}")
        if self.recheck_interval <= 0:
            raise ValueError(f"recheck_interval must be positive, got {self.recheck_interval}")

    @classmethod
    def from_dict(cls, data: dict) -> "MonitorConfig":
        """Create config from dictionary."""
        return cls(
            check_timeout=data.get("check_timeout", DEFAULT_CHECK_TIMEOUT),
            recheck_interval=data.get("recheck_interval", DEFAULT_RECHECK_INTERVAL),
            user_agent=data.get("user_agent", DEFAULT_USER_AGENT),
        )
