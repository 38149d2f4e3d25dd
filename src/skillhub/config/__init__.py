"""
Configuration module for SkillHub.

Uses pydantic-settings for environment variable loading.
"""

from skillhub.config.settings import (
    DiscoveryConfig,
    InstallConfig,
    Settings,
    ToolsConfig,
    load_settings,
)
from skillhub.config.sources import ConfigFileError, get_user_config_path

__all__ = [
    "ConfigFileError",
    "DiscoveryConfig",
    "InstallConfig",
    "Settings",
    "ToolsConfig",
    "get_user_config_path",
    "load_settings",
]
