#!/usr/bin/env python3
"""Language resource loading shared by the parser and the formatter."""
from __future__ import annotations

# Standard library imports
import json
import os
import threading
from typing import Any

from spoken_numbers.core.config import setup_logging

logger = setup_logging(__name__)

# ==============================================================================
# I18N RESOURCE LOADER
# ==============================================================================

DEFAULT_LANGUAGE = "en"

_RESOURCES: dict[str, dict[str, Any]] = {}  # Cache for loaded languages
_RESOURCE_PATH = os.path.join(os.path.dirname(__file__), "resources")
_LOCK = threading.Lock()  # For thread-safe lazy loading

# Cache to suppress repeated warnings for missing language files
_WARNED_LANGUAGES: set[str] = set()


def available_languages() -> list[str]:
    """Language codes that have a resource file."""
    return sorted(name[:-5] for name in os.listdir(_RESOURCE_PATH) if name.endswith(".json"))


def get_resources(language: str = DEFAULT_LANGUAGE) -> dict[str, Any]:
    """
    Loads and caches language-specific resources from a JSON file.
    This is the single point of entry for all language-dependent word tables.

    Args:
        language: Language code (e.g., 'en')

    Returns:
        dict: Loaded language resources

    Raises:
        ValueError: If the default language resource is missing or a file is not valid JSON

    """
    if language in _RESOURCES:
        return _RESOURCES[language]

    with _LOCK:
        # Double-check if another thread loaded it while we were waiting
        if language in _RESOURCES:
            return _RESOURCES[language]

        try:
            filepath = os.path.join(_RESOURCE_PATH, f"{language}.json")
            with open(filepath, encoding="utf-8") as f:
                resources: dict[str, Any] = json.load(f)
                _RESOURCES[language] = resources
            return resources
        except FileNotFoundError:
            if language == DEFAULT_LANGUAGE:
                raise ValueError(f"Default language resource '{DEFAULT_LANGUAGE}.json' not found.") from None
        except json.JSONDecodeError as e:
            raise ValueError(f"Error decoding JSON from {language}.json") from e

    # Fall back outside the lock, the default language load takes it again
    if language not in _WARNED_LANGUAGES:
        _WARNED_LANGUAGES.add(language)
        logger.warning(f"Language resource '{language}.json' not found. Falling back to '{DEFAULT_LANGUAGE}'.")
    return get_resources(DEFAULT_LANGUAGE)


def get_nested_resource(language: str, *keys: str) -> Any:
    """
    Nested resource access.

    Example:
        get_nested_resource("en", "number_words", "digits")
    """
    result: Any = get_resources(language)
    try:
        for key in keys:
            result = result[key]
    except (KeyError, TypeError) as e:
        raise KeyError(f"Nested resource path not found: {language}::{':'.join(keys)}") from e
    return result


def clear_resource_caches() -> None:
    """Clear the resource cache. Useful for testing."""
    with _LOCK:
        _RESOURCES.clear()
        _WARNED_LANGUAGES.clear()
