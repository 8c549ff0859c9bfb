"""Tests for config module."""

import pytest
from pathlib import Path

from src.reducer.config import ReducerConfig


class TestReducerConfig:
    """Tests for ReducerConfig class."""

    def test_default_values(self):
        config = ReducerConfig()
        assert config.separator == "/"
        assert config.null_hash == "-"
        assert config.strict_index is False
        assert config.detect_copies is True
        assert config.detect_folder_moves is True
        assert config.collapse_folder_deletes is True
        assert config.hash_algorithm == "sha256"
        assert config.recursive is True

    def test_custom_values(self):
        config = ReducerConfig(strict_index=True, detect_copies=False)
        assert config.strict_index is True
        assert config.detect_copies is False

    def test_invalid_separator(self):
        with pytest.raises(ValueError):
            ReducerConfig(separator="//")

    def test_null_hash_cannot_contain_separator(self):
        with pytest.raises(ValueError):
            ReducerConfig(null_hash="/")

    def test_ignore_patterns_default(self):
        config = ReducerConfig()
        assert "*.tmp" in config.ignore_patterns
        assert ".git/*" in config.ignore_patterns

    def test_should_ignore_tmp_files(self):
        config = ReducerConfig()
        assert config.should_ignore(Path("/path/to/file.tmp")) is True
        assert config.should_ignore(Path("/path/to/file.swp")) is True

    def test_should_ignore_git_directory(self):
        config = ReducerConfig()
        assert config.should_ignore(Path("/repo/.git/config")) is True

    def test_should_not_ignore_regular_files(self):
        config = ReducerConfig()
        assert config.should_ignore(Path("/path/to/notes.txt")) is False


class TestFromEnv:
    """Tests for ReducerConfig.from_env."""

    def test_defaults_without_env(self, monkeypatch):
        for name in ("SEPARATOR", "NULL_HASH", "STRICT_INDEX", "DETECT_COPIES", "DETECT_FOLDER_MOVES",
                     "COLLAPSE_FOLDER_DELETES", "HASH_ALGORITHM", "IGNORE_PATTERNS"):
            monkeypatch.delenv(f"REDUCER_{name}", raising=False)
        assert ReducerConfig.from_env() == ReducerConfig()

    def test_flags_from_env(self, monkeypatch):
        monkeypatch.setenv("REDUCER_STRICT_INDEX", "true")
        monkeypatch.setenv("REDUCER_DETECT_COPIES", "0")
        config = ReducerConfig.from_env()
        assert config.strict_index is True
        assert config.detect_copies is False

    def test_patterns_from_env(self, monkeypatch):
        monkeypatch.setenv("REDUCER_IGNORE_PATTERNS", "*.log, build/*")
        assert ReducerConfig.from_env().ignore_patterns == ["*.log", "build/*"]

    def test_custom_prefix(self, monkeypatch):
        monkeypatch.setenv("HIST_SEPARATOR", ":")
        assert ReducerConfig.from_env(prefix="HIST_").separator == ":"
