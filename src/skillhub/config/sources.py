"""Custom pydantic-settings source for SkillHub's YAML config file.

The user config file lives at ~/.config/skillhub/config.yaml, or at
$SKILLHUB_CONFIG_DIR/config.yaml when that variable is set. It sits below
environment variables in precedence and above field defaults.

Example:

    tools:
      timeout: 120
      primary_enabled: false
    install:
      default_host: https://git.example.com
"""

import collections.abc as _abc
import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic.fields as _pydantic_fields
import pydantic_settings as _pydantic_settings
import yaml as _yaml

import skillhub.errors as errors
import skillhub.paths as paths

# Environment variable for overriding user config directory
ENV_CONFIG_DIR = "SKILLHUB_CONFIG_DIR"


class ConfigFileError(errors.ConfigurationError):
    """Error loading or parsing a configuration file."""

    code = "config_file"

    def __init__(self, path: _pathlib.Path, message: str) -> None:
        self.path = path
        super().__init__(f"Error in config file {path}: {message}", path=path)


def get_user_config_dir() -> _pathlib.Path | None:
    """
    Get the user config directory.

    Respects SKILLHUB_CONFIG_DIR if set, otherwise ~/.config/skillhub.
    Returns None when no home directory can be located.
    """
    config_dir_env = _os.environ.get(ENV_CONFIG_DIR)
    if config_dir_env:
        return _pathlib.Path(config_dir_env)
    try:
        return paths.home_dir() / ".config" / "skillhub"
    except errors.NoHomeDirectoryError:
        return None


def get_user_config_path() -> _pathlib.Path | None:
    """Get the path to the user config file (which may not exist)."""
    config_dir = get_user_config_dir()
    return config_dir / "config.yaml" if config_dir is not None else None


def load_yaml_file(path: _pathlib.Path) -> dict[str, _typing.Any]:
    """
    Load a YAML config file as a dict.

    Returns:
        Parsed contents ({} for an empty file).

    Raises:
        ConfigFileError: If the file cannot be read, is malformed YAML,
            or is not a mapping at the top level.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigFileError(path, f"cannot read file: {e}") from e

    try:
        parsed = _yaml.safe_load(content)
    except _yaml.YAMLError as e:
        raise ConfigFileError(path, f"invalid YAML: {e}") from e

    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ConfigFileError(
            path,
            f"config must be a YAML mapping (dict), got {type(parsed).__name__}",
        )
    return parsed


class YamlConfigSource(_pydantic_settings.PydanticBaseSettingsSource):
    """Settings source backed by the user's config.yaml."""

    def __init__(
        self,
        settings_cls: type[_pydantic_settings.BaseSettings],
        config_path: _pathlib.Path | None = None,
    ) -> None:
        """
        Initialize the settings source.

        Args:
            settings_cls: The Settings class being populated.
            config_path: Override path for the config file (for testing).
        """
        super().__init__(settings_cls)
        self._config_path = config_path if config_path is not None else get_user_config_path()
        self._data: dict[str, _typing.Any] = {}
        if self._config_path is not None and self._config_path.exists():
            self._data = load_yaml_file(self._config_path)

    @property
    def config_path(self) -> _pathlib.Path | None:
        return self._config_path

    def get_field_value(
        self,
        field: _pydantic_fields.FieldInfo,  # noqa: ARG002 - required by pydantic-settings interface
        field_name: str,
    ) -> tuple[_typing.Any, str, bool]:
        value = self._data.get(field_name)
        return value, field_name, isinstance(value, (_abc.Mapping, list))

    def __call__(self) -> dict[str, _typing.Any]:
        return dict(self._data)
