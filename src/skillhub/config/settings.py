"""
Settings configuration using pydantic-settings.

Loads configuration from:
1. Constructor arguments (highest precedence)
2. Environment variables with SKILLHUB_ prefix
3. .env file (only if SKILLHUB_ENV_FILE points to one)
4. User config: ~/.config/skillhub/config.yaml (or SKILLHUB_CONFIG_DIR)
5. Field defaults (lowest)

Nested config uses double underscore delimiter:
  SKILLHUB_TOOLS__TIMEOUT=60
  SKILLHUB_TOOLS__PRIMARY_ENABLED=false
"""

import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import skillhub.config.sources as sources
import skillhub.constants as constants
import skillhub.errors as errors


def _get_env_file() -> str | None:
    """Return SKILLHUB_ENV_FILE if it names an existing file."""
    if env_file := _os.environ.get("SKILLHUB_ENV_FILE"):
        if _pathlib.Path(env_file).exists():
            return env_file
    return None


class ConfigBase(_pydantic.BaseModel):
    """Base class for config sections; unknown keys are kept for auditing."""

    model_config = _pydantic.ConfigDict(extra="allow")

    def get_extra_fields(self) -> dict[str, _typing.Any]:
        """Return fields that were provided but not in the schema."""
        return dict(self.model_extra) if self.model_extra else {}


class ToolsConfig(ConfigBase):
    """External tool settings."""

    npx_command: str = _pydantic.Field(
        default="npx",
        description="Executable used to run the companion skills CLI",
    )
    git_command: str = _pydantic.Field(
        default="git",
        description="Git executable",
    )
    timeout: float = _pydantic.Field(
        default=constants.DEFAULT_TOOL_TIMEOUT,
        gt=0,
        description="Seconds before a git/npx child process is killed",
    )
    primary_enabled: bool = _pydantic.Field(
        default=True,
        description="Try the companion skills CLI before falling back to git",
    )


class InstallConfig(ConfigBase):
    """Installer settings."""

    default_host: str = _pydantic.Field(
        default=constants.DEFAULT_GIT_HOST,
        description="Host used to expand owner/repo shorthand",
    )
    temp_prefix: str = _pydantic.Field(
        default=constants.DEFAULT_TEMP_PREFIX,
        min_length=1,
        pattern=r"^[A-Za-z0-9_.-]+$",
        description="Prefix for staging directories under the system temp root",
    )
    hint_limit: int = _pydantic.Field(
        default=constants.DEFAULT_HINT_LIMIT,
        ge=0,
        description="Maximum directory names listed when a sub-path is missing",
    )


class DiscoveryConfig(ConfigBase):
    """Discovery settings."""

    manifest_search_depth: int = _pydantic.Field(
        default=constants.DEFAULT_MANIFEST_SEARCH_DEPTH,
        ge=0,
        le=10,
        description="Levels below a skill directory searched for SKILL.md",
    )


class Settings(_pydantic_settings.BaseSettings):
    """
    SkillHub configuration settings.

    All settings can be overridden via environment variables with SKILLHUB_ prefix.
    For nested config, use double underscore: SKILLHUB_TOOLS__TIMEOUT=60
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix="SKILLHUB_",
        env_file=_get_env_file(),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="allow",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[_pydantic_settings.BaseSettings],
        init_settings: _pydantic_settings.PydanticBaseSettingsSource,
        env_settings: _pydantic_settings.PydanticBaseSettingsSource,
        dotenv_settings: _pydantic_settings.PydanticBaseSettingsSource,
        file_secret_settings: _pydantic_settings.PydanticBaseSettingsSource,
    ) -> tuple[_pydantic_settings.PydanticBaseSettingsSource, ...]:
        """
        Configure settings sources with precedence:
        1. init_settings (constructor args), highest
        2. env_settings (SKILLHUB_* env vars)
        3. dotenv_settings (.env file)
        4. YAML user config
        5. (defaults via Field definitions), lowest
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            sources.YamlConfigSource(settings_cls),
            file_secret_settings,
        )

    @classmethod
    def construct_without_dotenv(cls, **kwargs: _typing.Any) -> "Settings":
        """Create Settings without loading a .env file (for tests and CI)."""
        return cls(_env_file=None, **kwargs)  # type: ignore[call-arg]

    tools: ToolsConfig = _pydantic.Field(default_factory=ToolsConfig)
    """External tool configuration."""

    install: InstallConfig = _pydantic.Field(default_factory=InstallConfig)
    """Installer configuration."""

    discovery: DiscoveryConfig = _pydantic.Field(default_factory=DiscoveryConfig)
    """Discovery configuration."""

    verbose: bool = _pydantic.Field(default=False, description="Enable debug logging")

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to dictionary for display (known fields only)."""
        return {
            "tools": self.tools.model_dump(),
            "install": self.install.model_dump(),
            "discovery": self.discovery.model_dump(),
            "verbose": self.verbose,
        }


def load_settings(**kwargs: _typing.Any) -> Settings:
    """
    Build Settings, turning validation failures into a ConfigurationError.

    Raises:
        ConfigurationError: If a value from any source is invalid.
        ConfigFileError: If the YAML config file cannot be loaded.
    """
    try:
        return Settings(**kwargs)
    except _pydantic.ValidationError as e:
        raise errors.ConfigurationError(f"Invalid configuration: {e}") from e
