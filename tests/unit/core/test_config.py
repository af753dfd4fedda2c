#!/usr/bin/env python3
"""Tests for the JSONC configuration loader."""
import json
import logging
import os
import subprocess
import sys
from pathlib import Path

import pytest

from spoken_numbers.core.config import (
    CONFIG_ENV_VAR,
    ConfigLoader,
    ConfigurationError,
    get_config,
    load_config,
    reset_config,
    setup_logging,
)


class TestConfigLoader:
    """Loading, merging and validating configuration."""

    def test_defaults_without_file(self):
        config = ConfigLoader()
        assert config.config_file is None
        assert config.language == "en"
        assert config.short_scale is True
        assert config.prefer_ordinal is False
        assert config.max_noise_tokens == 3
        assert config.days_per_year == 365
        assert config.decimal_places == 2
        assert config.log_level == "INFO"

    def test_jsonc_file_in_working_directory(self, tmp_path):
        (tmp_path / "config.jsonc").write_text(
            "{\n"
            "  // long scale for British English\n"
            '  "parser": {"short_scale": false}\n'
            "}\n",
            encoding="utf-8",
        )
        config = ConfigLoader()
        assert config.config_file == str(tmp_path / "config.jsonc")
        assert config.short_scale is False
        # untouched keys keep their defaults
        assert config.max_noise_tokens == 3

    def test_environment_variable_wins(self, tmp_path, monkeypatch):
        (tmp_path / "config.json").write_text('{"parser": {"max_noise_tokens": 1}}', encoding="utf-8")
        other = tmp_path / "other.json"
        other.write_text('{"parser": {"max_noise_tokens": 5}}', encoding="utf-8")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(other))
        assert ConfigLoader().max_noise_tokens == 5

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            ConfigLoader(tmp_path / "missing.jsonc")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text('{"parser": ', encoding="utf-8")
        with pytest.raises(ConfigurationError):
            ConfigLoader(path)

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            ConfigLoader(path)

    def test_empty_file_means_defaults(self, tmp_path):
        path = tmp_path / "empty.jsonc"
        path.write_text("// nothing here\n", encoding="utf-8")
        assert ConfigLoader(path).as_dict() == ConfigLoader().as_dict()

    def test_invalid_values(self, tmp_path):
        test_cases = [
            {"language": ""},
            {"parser": {"short_scale": "yes"}},
            {"parser": {"max_noise_tokens": -1}},
            {"parser": {"max_noise_tokens": True}},
            {"parser": {"days_per_year": 0}},
            {"formatter": {"decimal_places": 1.5}},
        ]
        for index, values in enumerate(test_cases):
            path = tmp_path / f"invalid_{index}.json"
            path.write_text(json.dumps(values), encoding="utf-8")
            with pytest.raises(ConfigurationError):
                ConfigLoader(path)

    def test_get_and_set(self):
        config = ConfigLoader()
        assert config.get("parser.short_scale") is True
        assert config.get("parser.unknown", "fallback") == "fallback"
        assert config.get("language") == "en"

        config.set("parser.days_per_year", 360)
        assert config.days_per_year == 360

        with pytest.raises(ConfigurationError):
            config.set("parser.prefer_ordinal", "sometimes")

    def test_values_only_through_get_and_set(self):
        config = ConfigLoader()
        with pytest.raises(TypeError):
            config["language"]
        with pytest.raises(TypeError):
            config["language"] = "fr"

    def test_save(self, tmp_path):
        config = ConfigLoader()
        with pytest.raises(ConfigurationError):
            config.save()

        config.set("formatter.decimal_places", 4)
        path = config.save(tmp_path / "saved.json")
        assert config.config_file == str(path)
        assert ConfigLoader(path).decimal_places == 4


class TestGlobalConfig:
    """The module level instance."""

    def test_get_config_is_cached(self):
        assert get_config() is get_config()

    def test_load_and_reset(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text('{"language": "en", "parser": {"prefer_ordinal": true}}', encoding="utf-8")
        loaded = load_config(path)
        assert get_config() is loaded
        assert get_config().prefer_ordinal is True

        reset_config()
        assert get_config() is not loaded


class TestSetupLogging:
    """Module loggers and config files that do not belong to us."""

    FOREIGN_CONFIG = '["some other tool"]'

    def test_unloadable_config_uses_logging_defaults(self, tmp_path, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        (tmp_path / "config.json").write_text(self.FOREIGN_CONFIG, encoding="utf-8")
        logger = setup_logging("spoken_numbers.tests.foreign_config", log_output="none")
        assert logger.logger.level == logging.INFO

        # the error is still reported once the config itself is needed
        with pytest.raises(ConfigurationError):
            get_config()

    def test_import_next_to_foreign_config(self, tmp_path):
        (tmp_path / "config.json").write_text(self.FOREIGN_CONFIG, encoding="utf-8")
        src_dir = Path(__file__).resolve().parents[3] / "src"
        env = {**os.environ, "PYTHONPATH": os.pathsep.join(filter(None, [str(src_dir), os.environ.get("PYTHONPATH")]))}
        env.pop(CONFIG_ENV_VAR, None)

        result = subprocess.run(
            [sys.executable, "-c", "import spoken_numbers.parser; import spoken_numbers.formatter"],
            cwd=tmp_path,
            env=env,
            capture_output=True,
            text=True,
        )
        assert result.returncode == 0, result.stderr
