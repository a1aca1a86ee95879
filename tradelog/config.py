"""Configuration loading for tradelog.

Settings live in ``~/.config/tradelog/config.toml`` (or the file named
by ``TRADELOG_CONFIG``). Every setting has a default, so a missing file
is not an error.
"""

import copy
import logging
import os
from pathlib import Path
from typing import Optional

import toml

from tradelog.errors import ConfigError

CONFIG_DIR = Path.home() / ".config" / "tradelog"
CONFIG_PATH = CONFIG_DIR / "config.toml"

DEFAULT_CONFIG = {
    "store": {
        "backend": "sqlite",
        "path": str(CONFIG_DIR / "tradelog.db"),
        "redis_url": "redis://localhost:6379",
        "key": "trades:v2:data",
    },
    "import": {
        "match_fills": True,
        "fee_per_trade": 0.0,
        "fee_per_share": 0.0,
        "mapper": "fixed",
    },
    "logging": {
        "level": "WARNING",
    },
}

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_config_path() -> Path:
    """Path of the active config file."""
    override = os.environ.get("TRADELOG_CONFIG")
    return Path(override).expanduser() if override else CONFIG_PATH


def _merge(base: dict, overrides: dict) -> dict:
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base


def load_config(path: Optional[Path] = None) -> dict:
    """Load configuration merged over the defaults.

    ``REDIS_URL`` and ``TRADELOG_LOG_LEVEL`` environment variables take
    precedence over the file.

    Args:
        path: Config file path (defaults to get_config_path()).

    Returns:
        Configuration dictionary.

    Raises:
        ConfigError: If the file exists but cannot be read or parsed.
    """
    config_path = path or get_config_path()
    config = copy.deepcopy(DEFAULT_CONFIG)

    if config_path.exists():
        try:
            _merge(config, toml.load(config_path))
        except (toml.TomlDecodeError, OSError) as e:
            raise ConfigError(f"Cannot read config {config_path}: {e}") from e

    if os.environ.get("REDIS_URL"):
        config["store"]["redis_url"] = os.environ["REDIS_URL"]
    if os.environ.get("TRADELOG_LOG_LEVEL"):
        config["logging"]["level"] = os.environ["TRADELOG_LOG_LEVEL"]

    return config


def create_template_config(path: Optional[Path] = None) -> Path:
    """Write the default configuration to disk.

    Args:
        path: Destination (defaults to get_config_path()).

    Returns:
        Path of the written file.
    """
    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w") as f:
        toml.dump(DEFAULT_CONFIG, f)
    return config_path


def configure_logging(config: dict, verbose: bool = False) -> None:
    """Set up root logging from config.

    Args:
        config: Configuration dictionary.
        verbose: Force DEBUG level.
    """
    level_name = "DEBUG" if verbose else str(config.get("logging", {}).get("level", "WARNING")).upper()
    level = getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)
