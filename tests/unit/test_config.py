"""
Unit tests for configuration system.

These tests verify that the configuration system works correctly
and can load settings from environment variables.
"""

import pytest
from pydantic import ValidationError

from tinyvcs.config import Config, LogConfig, MergeConfig, RepositoryConfig


def test_config_has_defaults() -> None:
    """Test that Config initializes with sensible defaults."""
    config = Config()

    assert config.repository.metadata_dir == ".tinyvcs"
    assert config.repository.default_branch == "master"
    assert config.repository.initial_message == "initial commit"
    assert config.repository.abbreviated_id_length == 7

    assert config.merge.split_point_strategy == "first_parent"

    assert config.logging.level == "WARNING"
    assert config.logging.enable_file_logging is False


def test_log_config_defaults() -> None:
    """Test LogConfig default values."""
    log_config = LogConfig()

    assert log_config.rotation == "10 MB"
    assert log_config.retention == "1 month"
    assert log_config.log_dir == "logs"
    assert log_config.enable_console_logging is True


def test_config_from_env(monkeypatch) -> None:
    """Test loading configuration from environment variables."""
    monkeypatch.setenv("TINYVCS_DIR", ".vcs")
    monkeypatch.setenv("TINYVCS_DEFAULT_BRANCH", "main")
    monkeypatch.setenv("TINYVCS_SPLIT_POINT", "generation")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("TINYVCS_LOG_TO_FILE", "true")

    config = Config.from_env()

    assert config.repository.metadata_dir == ".vcs"
    assert config.repository.default_branch == "main"
    assert config.merge.split_point_strategy == "generation"
    assert config.logging.level == "DEBUG"
    assert config.logging.enable_file_logging is True


def test_config_from_env_defaults(monkeypatch) -> None:
    for name in ("TINYVCS_DIR", "TINYVCS_SPLIT_POINT", "LOG_LEVEL", "TINYVCS_LOG_TO_FILE"):
        monkeypatch.delenv(name, raising=False)

    config = Config.from_env()

    assert config.repository.metadata_dir == ".tinyvcs"
    assert config.merge.split_point_strategy == "first_parent"
    assert config.logging.enable_file_logging is False


def test_invalid_split_point_strategy() -> None:
    with pytest.raises(ValidationError):
        MergeConfig(split_point_strategy="octopus")


def test_invalid_abbreviation_length() -> None:
    with pytest.raises(ValidationError):
        RepositoryConfig(abbreviated_id_length=0)


def test_invalid_log_level() -> None:
    with pytest.raises(ValidationError):
        LogConfig(level="LOUD")
