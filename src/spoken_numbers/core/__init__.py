"""Configuration and logging shared by all spoken_numbers modules."""

from .config import ConfigLoader, ConfigurationError, get_config, load_config, setup_logging

__all__ = ["ConfigLoader", "ConfigurationError", "get_config", "load_config", "setup_logging"]
