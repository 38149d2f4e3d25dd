"""
Registry of supported agent platforms.

Each platform keeps skills in its own directory layout:
- a global (per-user) skills directory below the home directory
- a project skills directory below a project root
- a detection directory whose existence means the agent is installed

Detection deliberately checks the agent's top-level config directory,
which exists before any skill has been installed.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import pathlib as _pathlib

import skillhub.errors as errors


@_dataclasses.dataclass(frozen=True)
class Platform:
    """An agent platform and its directory conventions."""

    key: str
    """Canonical key (e.g., 'claude')."""

    label: str
    """Human-readable name."""

    agent_name: str
    """Agent name understood by the companion skills CLI."""

    global_segments: tuple[str, ...]
    """Path segments below the home directory for global skills."""

    project_segments: tuple[str, ...]
    """Path segments below a project root for project skills."""

    detection_segments: tuple[str, ...]
    """Path segments below the home directory used to detect the agent."""

    def global_dir(self, home: _pathlib.Path) -> _pathlib.Path:
        return home.joinpath(*self.global_segments)

    def project_dir(self, project_root: _pathlib.Path) -> _pathlib.Path:
        return project_root.joinpath(*self.project_segments)

    def detection_dir(self, home: _pathlib.Path) -> _pathlib.Path:
        return home.joinpath(*self.detection_segments)

    @property
    def project_subpath(self) -> str:
        """Project-relative skills directory, '/'-joined."""
        return "/".join(self.project_segments)

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        return {
            "key": self.key,
            "label": self.label,
            "agent_name": self.agent_name,
            "global_subpath": "/".join(self.global_segments),
            "project_subpath": self.project_subpath,
        }


CLAUDE = Platform(
    key="claude",
    label="Claude Code",
    agent_name="claude-code",
    global_segments=(".claude", "skills"),
    project_segments=(".claude", "skills"),
    detection_segments=(".claude",),
)

ANTIGRAVITY = Platform(
    key="antigravity",
    label="Antigravity",
    agent_name="antigravity",
    global_segments=(".gemini", "antigravity", "skills"),
    project_segments=(".agent", "skills"),
    detection_segments=(".gemini", "antigravity"),
)

GEMINI = Platform(
    key="gemini",
    label="Gemini CLI",
    agent_name="gemini-cli",
    global_segments=(".gemini", "skills"),
    project_segments=(".gemini", "skills"),
    detection_segments=(".gemini",),
)

PLATFORMS: tuple[Platform, ...] = (CLAUDE, ANTIGRAVITY, GEMINI)
"""All supported platforms, in display order."""

PLATFORM_KEYS: tuple[str, ...] = tuple(p.key for p in PLATFORMS)

_BY_KEY = {p.key: p for p in PLATFORMS}


def get_platform(key: str | Platform) -> Platform:
    """
    Look up a platform by key.

    Args:
        key: Platform key (case-insensitive, surrounding whitespace ignored),
             or a Platform which is returned unchanged.

    Returns:
        The matching Platform.

    Raises:
        UnsupportedPlatformError: If the key is not registered.
    """
    if isinstance(key, Platform):
        return key
    platform = _BY_KEY.get(key.strip().lower())
    if platform is None:
        raise errors.UnsupportedPlatformError(key, PLATFORM_KEYS)
    return platform
