"""
SkillHub - install, discover and remove agent skills

Manages SKILL.md skill packages for local AI agent tools
(Claude Code, Antigravity, Gemini CLI).
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("skillhub")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)
__author__ = "SkillHub Contributors"

from skillhub.config import Settings  # noqa: E402
from skillhub.errors import SkillHubError  # noqa: E402
from skillhub.install import Installer, uninstall  # noqa: E402
from skillhub.platforms import PLATFORMS, Platform, get_platform  # noqa: E402

__all__ = [
    "__version__",
    "__version_info__",
    "Installer",
    "PLATFORMS",
    "Platform",
    "Settings",
    "SkillHubError",
    "get_platform",
    "uninstall",
]
