"""Host Watch Service - tracks reachability of configured hosts."""

from .config import TargetConfig, WatchConfig, load_config
from .publisher import TransitionPublisher
from .service import HostWatchService


def main():
    """Entry point for the host watch service."""
    import argparse
    from hostwatch.shared.logging import setup_logging

    parser = argparse.ArgumentParser(description="Monitor host reachability")
    parser.add_argument("-c", "--config", help="Path to YAML config file")
    args = parser.parse_args()

    config = load_config(args.config)
    setup_logging(config.log_level)

    service = HostWatchService(config)
    service.run()


__all__ = [
    "HostWatchService",
    "TargetConfig",
    "TransitionPublisher",
    "WatchConfig",
    "load_config",
    "main",
]
