"""Configuration management."""

import logging
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from jukebox.constants import CONFIG_FILE, MAX_POLL_INTERVAL
from jukebox.models import PlayerConfig

LOGGER = logging.getLogger(__name__)


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    raise ValueError(f"expected true or false, got {value!r}")


def _as_poll_interval(value: Any) -> float:
    interval = float(value)
    if not 0 < interval <= MAX_POLL_INTERVAL:
        raise ValueError(f"must be in (0, {MAX_POLL_INTERVAL}]")
    return interval


def _as_block_size(value: Any) -> int:
    size = int(value)
    if size <= 0:
        raise ValueError("must be positive")
    return size


def _as_device(value: Any) -> Union[int, str, None]:
    if value is None or isinstance(value, (int, str)):
        return value
    raise ValueError(f"expected a device name or index, got {value!r}")


def _as_log_level(value: Any) -> str:
    level = str(value).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"unknown log level {value!r}")
    return level


# YAML key -> (PlayerConfig attribute, converter)
FIELDS = {
    'LogLevel': ('log_level', _as_log_level),
    'PollInterval': ('poll_interval', _as_poll_interval),
    'BlockSize': ('block_size', _as_block_size),
    'OutputDevice': ('output_device', _as_device),
    'Autoplay': ('autoplay', _as_bool),
    'Loop': ('loop', _as_bool),
    'StartPlaying': ('start_playing', _as_bool),
    'ShowState': ('show_state', _as_bool),
}


class ConfigManager:
    """Manages application configuration."""

    CONFIG_FILE = CONFIG_FILE

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path is not None else Path(self.CONFIG_FILE)
        self.config = PlayerConfig()

    def load(self) -> bool:
        """Load configuration from the YAML file.

        Keys that are missing or invalid keep their defaults.

        Returns:
            True if the file was read, False if defaults are used.
        """
        try:
            with open(self.path) as f:
                data = yaml.safe_load(f)
        except FileNotFoundError:
            LOGGER.info("No configuration file at %s, using defaults", self.path)
            return False
        except (OSError, yaml.YAMLError) as e:
            LOGGER.error("Failed to load configuration: %s", e)
            return False

        if not data:
            LOGGER.warning("Configuration file is empty: %s", self.path)
            return False
        if not isinstance(data, dict):
            LOGGER.error("Configuration must be a mapping, got %s", type(data).__name__)
            return False

        for key, value in data.items():
            self._set(key, value)

        self.apply_log_level(self.config.log_level)
        LOGGER.info("Configuration loaded from %s", self.path)
        return True

    def _set(self, key: str, value: Any) -> None:
        entry = FIELDS.get(key)
        if entry is None:
            LOGGER.warning("Unknown configuration key '%s', ignoring", key)
            return
        attribute, convert = entry
        try:
            setattr(self.config, attribute, convert(value))
        except (TypeError, ValueError) as e:
            LOGGER.warning("Invalid value for '%s' (%s), keeping %r",
                           key, e, getattr(self.config, attribute))

    @staticmethod
    def apply_log_level(level_name: str) -> None:
        log_level = getattr(logging, level_name.upper(), logging.INFO)
        logging.getLogger().setLevel(log_level)
        LOGGER.info("Log level set to %s", level_name.upper())
