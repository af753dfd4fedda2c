#!/usr/bin/env python3
"""Configuration loader that reads from config.jsonc / config.json"""
from __future__ import annotations

import copy
import json
import logging
import os
import re
from pathlib import Path
from typing import Any

CONFIG_ENV_VAR = "SPOKEN_NUMBERS_CONFIG"
CONFIG_FILENAMES = ("config.jsonc", "config.json")

DEFAULT_CONFIG: dict[str, Any] = {
    "language": "en",
    "parser": {
        "short_scale": True,
        "prefer_ordinal": False,
        "max_noise_tokens": 3,
        "days_per_year": 365,
    },
    "formatter": {
        "decimal_places": 2,
    },
    "logging": {
        "level": "INFO",
        "output": "console",
    },
}

_COMMENT_PATTERN = re.compile(r"^\s*//.*$", flags=re.MULTILINE)


class ConfigurationError(Exception):
    """Raised when a configuration value is invalid."""
    pass


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class ConfigLoader:
    """Load configuration from a JSON (with // comments) file, over built-in defaults"""

    def __init__(self, config_path: str | Path | None = None) -> None:
        if config_path is None:
            config_path = self._find_config_file()

        # None means built-in defaults only
        self.config_file = str(config_path) if config_path is not None else None

        user_config: dict[str, Any] = {}
        if config_path is not None:
            user_config = self._read(Path(config_path))

        self._config = _deep_merge(DEFAULT_CONFIG, user_config)
        self.project_dir = str(Path(config_path).parent) if config_path is not None else str(Path.cwd())
        self._validate()

    @staticmethod
    def _read(path: Path) -> dict[str, Any]:
        if not path.exists():
            raise ConfigurationError(f"Config file '{path}' does not exist")

        with open(path, encoding="utf-8") as f:
            content = f.read()

        # Remove whole-line comments (// ...) for JSONC support
        content = _COMMENT_PATTERN.sub("", content)

        try:
            loaded = json.loads(content) if content.strip() else {}
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Error decoding JSON from {path}: {e}") from e

        if not isinstance(loaded, dict):
            raise ConfigurationError(f"Config file '{path}' must contain a JSON object")
        return loaded

    @staticmethod
    def _find_config_file() -> Path | None:
        """Find config file: environment variable first, then the working directory"""
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            return Path(env_path).expanduser()

        for filename in CONFIG_FILENAMES:
            config_path = Path.cwd() / filename
            if config_path.exists():
                return config_path

        return None

    def _validate(self) -> None:
        if not isinstance(self.language, str) or not self.language:
            raise ConfigurationError("'language' must be a non-empty string")
        if not isinstance(self.short_scale, bool):
            raise ConfigurationError("'parser.short_scale' must be a boolean")
        if not isinstance(self.prefer_ordinal, bool):
            raise ConfigurationError("'parser.prefer_ordinal' must be a boolean")
        noise = self.max_noise_tokens
        if isinstance(noise, bool) or not isinstance(noise, int) or noise < 0:
            raise ConfigurationError("'parser.max_noise_tokens' must be a non-negative integer")
        days = self.days_per_year
        if isinstance(days, bool) or not isinstance(days, (int, float)) or days <= 0:
            raise ConfigurationError("'parser.days_per_year' must be a positive number")
        places = self.decimal_places
        if isinstance(places, bool) or not isinstance(places, int) or places < 0:
            raise ConfigurationError("'formatter.decimal_places' must be a non-negative integer")

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get a value using dot notation (e.g., 'parser.short_scale')"""
        keys = key_path.split(".")
        value = self._config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def set(self, key_path: str, value: Any) -> None:
        """Set a value using dot notation (e.g., 'parser.max_noise_tokens')"""
        keys = key_path.split(".")
        target = self._config

        for key in keys[:-1]:
            if not isinstance(target.get(key), dict):
                target[key] = {}
            target = target[key]

        target[keys[-1]] = value
        self._validate()

    @property
    def language(self) -> str:
        return self.get("language", "en")

    @property
    def short_scale(self) -> bool:
        return self.get("parser.short_scale", True)

    @property
    def prefer_ordinal(self) -> bool:
        return self.get("parser.prefer_ordinal", False)

    @property
    def max_noise_tokens(self) -> int:
        return self.get("parser.max_noise_tokens", 3)

    @property
    def days_per_year(self) -> int | float:
        return self.get("parser.days_per_year", 365)

    @property
    def decimal_places(self) -> int:
        return self.get("formatter.decimal_places", 2)

    @property
    def log_level(self) -> str:
        return str(self.get("logging.level", "INFO")).upper()

    @property
    def log_output(self) -> str:
        return str(self.get("logging.output", "console")).lower()

    def as_dict(self) -> dict[str, Any]:
        return copy.deepcopy(self._config)

    def save(self, path: str | Path | None = None) -> Path:
        """Save the current configuration back to the config file"""
        target = path or self.config_file
        if target is None:
            raise ConfigurationError("No config file to save to; pass an explicit path")

        target = Path(target)
        with open(target, "w", encoding="utf-8") as f:
            json.dump(self._config, f, indent=2)
        self.config_file = str(target)
        return target


_config_loader: ConfigLoader | None = None


def get_config() -> ConfigLoader:
    """Get the global config loader instance"""
    global _config_loader
    if _config_loader is None:
        _config_loader = ConfigLoader()
    return _config_loader


def load_config(config_path: str | Path | None = None) -> ConfigLoader:
    """Load configuration from a file and make it the global instance."""
    global _config_loader
    _config_loader = ConfigLoader(config_path)
    return _config_loader


def reset_config() -> None:
    """Forget the global instance; the next get_config() reloads it."""
    global _config_loader
    _config_loader = None


# ========================= CENTRALIZED LOGGING SETUP =========================


def setup_logging(
    module_name: str,
    log_level: str | None = None,
    log_output: str | None = None,
) -> logging.LoggerAdapter:
    """
    Setup standardized logging for spoken_numbers modules.

    The environment (LOG_LEVEL, LOG_OUTPUT) wins over the config file, explicit
    arguments win over both.

    Args:
        module_name: Name of the module (usually __name__)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_output: console, file, both or none

    Returns:
        Configured ContextLogger instance

    """
    from .logging import setup_structured_logging

    # Module loggers are created at import time: a config file that does not
    # load (e.g. another tool's config.json) leaves them on the built-in defaults
    # and the error surfaces when the config is actually used.
    try:
        config: ConfigLoader | None = get_config()
    except ConfigurationError:
        config = None

    defaults = DEFAULT_CONFIG["logging"]
    if log_level is None and "LOG_LEVEL" not in os.environ:
        log_level = config.log_level if config is not None else defaults["level"]
    if log_output is None and "LOG_OUTPUT" not in os.environ:
        log_output = config.log_output if config is not None else defaults["output"]
    project_dir = Path(config.project_dir) if config is not None else Path.cwd()

    return setup_structured_logging(
        module_name,
        log_level=log_level,
        log_output=log_output,
        logs_dir=project_dir / "logs",
    )
