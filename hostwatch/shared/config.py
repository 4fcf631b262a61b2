"""Locating and loading the hostwatch YAML config."""

import os
from pathlib import Path
from typing import Optional, Union

import yaml
from dotenv import load_dotenv

# repo_root/config/, with the package installed in repo_root/
CONFIG_DIR = Path(__file__).parent.parent.parent / "config"


def find_config_file(config_path: Optional[Union[str, Path]] = None) -> Optional[Path]:
    """Resolve which config file to read.

    Lookup order: the explicit path, then HOSTWATCH_CONFIG, then
    config/config-{HOSTWATCH_ENV}.yaml (HOSTWATCH_ENV defaults to
    'hostwatch'). Only the last one is optional.

    Returns:
        Path of the config file, or None when no file applies.

    Raises:
        FileNotFoundError: If an explicitly requested file is missing.
    """
    requested = config_path or os.getenv("HOSTWATCH_CONFIG")
    if requested:
        path = Path(requested)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        return path

    path = CONFIG_DIR / f"config-{os.getenv('HOSTWATCH_ENV', 'hostwatch')}.yaml"
    return path if path.exists() else None


def load_yaml_config(config_path: Optional[Union[str, Path]] = None) -> dict:
    """Load .env, then the config file chosen by find_config_file().

    Returns:
        Configuration dictionary, empty when there is no config file.

    Raises:
        FileNotFoundError: If an explicitly requested file is missing.
        ValueError: If the file does not hold a mapping.
        yaml.YAMLError: If the file is invalid YAML.
    """
    load_dotenv()

    path = find_config_file(config_path)
    if path is None:
        return {}

    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
    return data


def get_log_level(config: dict) -> str:
    """Log level from config; a missing or empty value means INFO."""
    return (config.get("log_level") or "INFO").upper()
