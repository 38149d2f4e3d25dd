"""Tests for the YAML user config source."""

import pathlib as _pathlib

import pydantic_settings as _pydantic_settings
import pytest as _pytest

import skillhub.config as config
import skillhub.config.sources as sources


class TestConfigPaths:
    """Tests for locating the user config file."""

    def test_default_location(self, home: _pathlib.Path, monkeypatch: _pytest.MonkeyPatch) -> None:
        """Without an override the file lives under ~/.config/skillhub."""
        monkeypatch.delenv(sources.ENV_CONFIG_DIR)
        assert sources.get_user_config_path() == home / ".config" / "skillhub" / "config.yaml"

    def test_env_override(self, monkeypatch: _pytest.MonkeyPatch) -> None:
        """SKILLHUB_CONFIG_DIR replaces the directory."""
        monkeypatch.setenv(sources.ENV_CONFIG_DIR, "/custom/config/dir")
        assert sources.get_user_config_dir() == _pathlib.Path("/custom/config/dir")

    def test_no_home(self, monkeypatch: _pytest.MonkeyPatch) -> None:
        """Without home or override there is no config path."""
        monkeypatch.delenv(sources.ENV_CONFIG_DIR, raising=False)
        monkeypatch.delenv("HOME", raising=False)
        monkeypatch.delenv("USERPROFILE", raising=False)
        assert sources.get_user_config_path() is None


class TestLoadYamlFile:
    """Tests for load_yaml_file."""

    def test_mapping(self, tmp_path: _pathlib.Path) -> None:
        """A mapping is returned as a dict."""
        path = tmp_path / "config.yaml"
        path.write_text("tools:\n  timeout: 10\n")
        assert sources.load_yaml_file(path) == {"tools": {"timeout": 10}}

    def test_empty_file(self, tmp_path: _pathlib.Path) -> None:
        """An empty file is an empty mapping."""
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert sources.load_yaml_file(path) == {}

    def test_not_a_mapping(self, tmp_path: _pathlib.Path) -> None:
        """Top-level lists are rejected."""
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n")
        with _pytest.raises(config.ConfigFileError, match="mapping"):
            sources.load_yaml_file(path)

    def test_unreadable(self, tmp_path: _pathlib.Path) -> None:
        """Read failures are reported with the path."""
        with _pytest.raises(config.ConfigFileError) as exc_info:
            sources.load_yaml_file(tmp_path)
        assert exc_info.value.path == tmp_path


class TestYamlConfigSource:
    """Tests for YamlConfigSource."""

    def test_is_pydantic_settings_source(self) -> None:
        """YamlConfigSource should be a pydantic-settings source."""
        assert issubclass(
            sources.YamlConfigSource,
            _pydantic_settings.PydanticBaseSettingsSource,
        )

    def test_explicit_path(self, tmp_path: _pathlib.Path) -> None:
        """An explicit path is loaded as-is."""
        path = tmp_path / "custom.yaml"
        path.write_text("verbose: true\n")
        source = sources.YamlConfigSource(config.Settings, config_path=path)
        assert source.config_path == path
        assert source() == {"verbose": True}

    def test_missing_file(self, tmp_path: _pathlib.Path) -> None:
        """A missing file contributes nothing."""
        source = sources.YamlConfigSource(config.Settings, config_path=tmp_path / "none.yaml")
        assert source() == {}
