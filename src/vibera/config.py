"""
Configuration management for VIBE-RA.

Loads a TOML config and validates it against fixed bounds.
Missing sections or parameters fall back to defaults; out-of-bounds values
are rejected at startup.
"""

import copy
import os
from pathlib import Path
from typing import Dict, Any, Optional
import toml
import logging

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when config validation fails."""
    pass


class Config:
    """Configuration loader and validator."""

    # Numeric bounds; None means "no range check"
    PARAM_BOUNDS = {
        "playback": {
            "tick_interval_seconds": (0.1, 5.0),
            "default_volume": (0.0, 1.0),
        },
        "setup": {
            "duration_minutes": (15, 240),
            "scene": None,
            "music_profile": None,
            "intensity": None,
        },
        "llm": {
            "model": None,
            "api_key_env": None,
            "timeout_seconds": (1, 120),
            "temperature": (0.0, 2.0),
        },
        "server": {
            "host": None,
            "port": (1, 65535),
            "debug": None,
        },
    }

    DEFAULT_CONFIG = {
        "config_version": "1.0",
        "playback": {
            "tick_interval_seconds": 1.0,
            "default_volume": 0.8,
        },
        "setup": {
            "scene": "House Party",
            "music_profile": "Global Top 40",
            "duration_minutes": 60,
            "intensity": "mid",
        },
        "llm": {
            "model": "gpt-4o-mini",
            "api_key_env": "OPENAI_API_KEY",
            "timeout_seconds": 30,
            "temperature": 0.9,
        },
        "server": {
            "host": "127.0.0.1",
            "port": 5000,
            "debug": False,
        },
    }

    def __init__(self, config_dict: Dict[str, Any]):
        """Initialize config from dictionary."""
        self.data = config_dict
        self._validate()

    @classmethod
    def defaults(cls) -> "Config":
        """Config built purely from DEFAULT_CONFIG."""
        return cls(copy.deepcopy(cls.DEFAULT_CONFIG))

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "Config":
        """
        Load config from TOML file.

        Args:
            config_path: Path to vibera.toml. If None, uses VIBERA_CONFIG_PATH env var
                        or defaults to configs/vibera.toml.

        Returns:
            Config instance.

        Raises:
            ConfigError: If config is invalid or unreadable.
        """
        if config_path is None:
            config_path = os.getenv("VIBERA_CONFIG_PATH", "configs/vibera.toml")

        config_path = Path(config_path)

        if not config_path.exists():
            logger.warning(f"Config file not found: {config_path}. Using defaults.")
            return cls.defaults()

        try:
            config_dict = toml.load(config_path)
        except (toml.TomlDecodeError, OSError) as e:
            raise ConfigError(f"Failed to load config from {config_path}: {e}")

        logger.info(f"Loaded config from {config_path}")
        return cls(config_dict)

    def _validate(self) -> None:
        """
        Fill in defaults and check every parameter against PARAM_BOUNDS.

        Raises:
            ConfigError: If any parameter is out of bounds.
        """
        for section, params in self.PARAM_BOUNDS.items():
            if section not in self.data:
                logger.warning(f"Missing config section: {section}. Using defaults.")
                self.data[section] = copy.deepcopy(self.DEFAULT_CONFIG.get(section, {}))
                continue

            section_data = self.data[section]
            if not isinstance(section_data, dict):
                raise ConfigError(f"Config section {section} must be a table")

            for param, bounds in params.items():
                if param not in section_data:
                    default_val = self.DEFAULT_CONFIG.get(section, {}).get(param)
                    if default_val is not None:
                        logger.warning(f"Missing param {section}.{param}. Using default: {default_val}")
                        section_data[param] = default_val
                    continue

                value = section_data[param]

                # Free-form values (strings, flags)
                if bounds is None:
                    continue

                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    raise ConfigError(f"Parameter {section}.{param}={value!r} must be numeric")

                min_val, max_val = bounds
                if not (min_val <= value <= max_val):
                    raise ConfigError(
                        f"Parameter {section}.{param}={value} out of bounds "
                        f"[{min_val}, {max_val}]"
                    )

        logger.info("✅ Config validation passed")

    def get(self, section: str, param: str, default: Any = None) -> Any:
        """Get a config parameter safely."""
        return self.data.get(section, {}).get(param, default)

    def __getitem__(self, section: str) -> Dict[str, Any]:
        """Allow dict-like access: config["playback"]"""
        return self.data.get(section, {})

    def __repr__(self) -> str:
        version = self.data.get('config_version', 'unknown')
        return f"Config(version={version})"
