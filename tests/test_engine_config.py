"""
Tests for logic/config.py YAML loading.
"""

import logging
from pathlib import Path

import pytest

from logic.config import (
    CONFIG_ENV_VAR,
    ConfigError,
    EngineConfig,
    configure_logging,
    get_config,
    load_config_from_env,
    set_config,
)

REPO_CONFIG = Path(__file__).resolve().parent.parent / "config" / "engine.yaml"


def write(tmp_path, text):
    path = tmp_path / "engine.yaml"
    path.write_text(text, encoding="utf-8")
    return path


class TestFromFile:

    def test_repository_default_file(self):
        config = EngineConfig.from_file(REPO_CONFIG)
        assert config == EngineConfig()

    def test_overrides(self, tmp_path):
        path = write(
            tmp_path,
            "truth_table:\n  max_variables: 4\n"
            "analysis:\n  counterexample_limit: 2\n"
            "logging:\n  level: debug\n",
        )
        config = EngineConfig.from_file(path)
        assert config.max_variables == 4
        assert config.counterexample_limit == 2
        assert config.log_level == "DEBUG"

    def test_partial_file_keeps_defaults(self, tmp_path):
        config = EngineConfig.from_file(write(tmp_path, "truth_table:\n  max_variables: 8\n"))
        assert config.max_variables == 8
        assert config.counterexample_limit == 5

    def test_empty_file_is_defaults(self, tmp_path):
        assert EngineConfig.from_file(write(tmp_path, "")) == EngineConfig()

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ConfigError):
            EngineConfig.from_file(write(tmp_path, "truth_table: [unclosed\n"))

    def test_top_level_must_be_mapping(self, tmp_path):
        with pytest.raises(ConfigError):
            EngineConfig.from_file(write(tmp_path, "- a\n- b\n"))

    def test_non_numeric_limit(self, tmp_path):
        with pytest.raises(ConfigError):
            EngineConfig.from_file(write(tmp_path, "truth_table:\n  max_variables: many\n"))

    def test_negative_limit(self, tmp_path):
        with pytest.raises(ConfigError):
            EngineConfig.from_file(write(tmp_path, "truth_table:\n  max_variables: -1\n"))


class TestEnvironment:

    def test_missing_file_means_defaults(self):
        assert load_config_from_env() == EngineConfig()

    def test_env_path_is_used(self, tmp_path, monkeypatch):
        path = write(tmp_path, "analysis:\n  counterexample_limit: 1\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        assert get_config().counterexample_limit == 1

    def test_get_config_is_cached(self):
        assert get_config() is get_config()

    def test_set_config_overrides_cache(self):
        custom = EngineConfig(max_variables=3)
        set_config(custom)
        assert get_config() is custom


class TestLogging:

    def test_configure_logging_uses_config_level(self, monkeypatch):
        calls = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.update(kwargs))
        set_config(EngineConfig(log_level="WARNING"))
        configure_logging()
        assert calls["level"] == "WARNING"
        assert "%(levelname)s" in calls["format"]

    def test_explicit_level_wins(self, monkeypatch):
        calls = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.update(kwargs))
        configure_logging("DEBUG")
        assert calls["level"] == "DEBUG"
