"""Shared utilities for hostwatch services."""

from .config import find_config_file, load_yaml_config
from .mqtt import MQTTConfig
from .logging import setup_logging

__all__ = [
    "find_config_file",
    "load_yaml_config",
    "MQTTConfig",
    "setup_logging",
]
