"""Configuration management for binrun."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path

import yaml

from .utils import log

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(os.path.expanduser("~/.binrun/config.yaml"))

# Accepted YAML types per key, None marks an optional value
_FIELD_TYPES: dict[str, tuple[type | None, ...]] = {
    "cache_dir": (str, Path),
    "api_url": (str,),
    "user_agent": (str,),
    "redirect_limit": (int,),
    "timeout": (int, float, None),
}


def _has_valid_type(key: str, value: object) -> bool:
    allowed = _FIELD_TYPES[key]
    if value is None:
        return None in allowed
    # YAML booleans are ints to isinstance
    if isinstance(value, bool):
        return False
    return isinstance(value, tuple(t for t in allowed if t is not None))


@dataclass
class BinrunConfig:
    """Configuration for binrun."""

    cache_dir: Path = field(
        default_factory=lambda: Path(os.path.expanduser("~/.binrun/cache")),
    )
    api_url: str = "https://api.github.com"
    user_agent: str = "binrun"
    redirect_limit: int = 5
    timeout: float | None = None

    def validate(self) -> None:
        """Validate the configuration."""
        if self.redirect_limit < 0:
            log(
                f"redirect_limit must not be negative, got {self.redirect_limit}; using 0",
                "warning",
            )
            self.redirect_limit = 0
        if self.timeout is not None and self.timeout <= 0:
            log(f"Ignoring non-positive timeout {self.timeout}", "warning")
            self.timeout = None

    @classmethod
    def load_from_file(cls, config_path: str | Path | None = None) -> BinrunConfig:
        """Load configuration from YAML file.

        Without an explicit path, ``~/.binrun/config.yaml`` is read when it
        exists. Problems with the file are reported and defaults are used.
        """
        explicit = config_path is not None
        path = Path(config_path) if explicit else DEFAULT_CONFIG_PATH

        if not path.exists():
            if explicit:
                log(f"Configuration file not found: {path}", "warning")
            return cls()

        try:
            with open(path) as file:
                config_data = yaml.safe_load(file) or {}
        except yaml.YAMLError:
            log(f"Invalid YAML in configuration file: {path}", "error")
            return cls()

        if not isinstance(config_data, dict):
            log(f"Configuration file {path} must contain a mapping", "warning")
            return cls()

        known = {f.name for f in fields(cls)}
        for key in sorted(set(config_data) - known):
            log(f"Ignoring unknown configuration key '{key}' in {path}", "warning")
        config_data = {k: v for k, v in config_data.items() if k in known}

        for key, value in list(config_data.items()):
            if not _has_valid_type(key, value):
                log(
                    f"Ignoring invalid value {value!r} for '{key}' in {path}; using the default",
                    "warning",
                )
                del config_data[key]

        # Expand paths
        if "cache_dir" in config_data:
            config_data["cache_dir"] = Path(
                os.path.expanduser(str(config_data["cache_dir"])),
            )

        logger.debug("Loaded configuration from %s", path)
        config = cls(**config_data)
        config.validate()
        return config
