"""
Operation surface for front ends (CLI, GUI bridges).

Each function runs one core operation and returns a CommandResult. Errors
from the core are caught here and reported as data, so callers always get
either a value or a single descriptive error, never an exception.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import logging as _logging
import pathlib as _pathlib
import typing as _typing

import skillhub.config as config
import skillhub.constants as constants
import skillhub.errors as errors
import skillhub.install as install
import skillhub.skills as skills

_logger = _logging.getLogger(__name__)

_T = _typing.TypeVar("_T")


@_dataclasses.dataclass
class CommandResult:
    """Either a value (ok) or an error description."""

    ok: bool
    value: _typing.Any = None
    error: dict[str, _typing.Any] | None = None

    @classmethod
    def success(cls, value: _typing.Any) -> CommandResult:
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: errors.SkillHubError) -> CommandResult:
        return cls(ok=False, error=error.to_dict())

    @property
    def message(self) -> str:
        """Error message, or the value rendered as text."""
        if self.error is not None:
            return str(self.error["message"])
        return "" if self.value is None else str(self.value)

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to dictionary for JSON serialization."""
        if self.ok:
            return {"ok": True, "value": self.value}
        return {"ok": False, "error": self.error}


def _call(fn: _typing.Callable[[], _T]) -> CommandResult:
    try:
        return CommandResult.success(fn())
    except errors.SkillHubError as e:
        _logger.debug("Command failed: %s", e, exc_info=True)
        return CommandResult.failure(e)


def detect_platforms() -> CommandResult:
    """Keys of platforms found on this machine."""
    return _call(lambda: [p.key for p in skills.detected_platforms()])


def list_installed_ids(platform: str) -> CommandResult:
    """Skill ids installed globally for a platform."""
    return _call(lambda: skills.list_installed_ids(platform))


def list_installed_skills(
    platform: str,
    project_root: _pathlib.Path | str | None = None,
    *,
    settings: config.Settings | None = None,
) -> CommandResult:
    """Installed skills (as dicts) for a platform, globally or in a project."""

    def run() -> list[dict[str, _typing.Any]]:
        depth = (settings or config.load_settings()).discovery.manifest_search_depth
        if project_root is not None and str(project_root).strip():
            found = skills.list_project_skills(platform, project_root, max_depth=depth)
        else:
            found = skills.list_installed_skills(platform, max_depth=depth)
        return [s.to_dict() for s in found]

    return _call(run)


def installed_anywhere() -> CommandResult:
    """Sorted ids installed on any detected platform."""
    return _call(skills.installed_anywhere)


def installed_platforms_for(ids: _typing.Iterable[str]) -> CommandResult:
    """Map of id to the platforms it is installed on."""
    ids = list(ids)
    return _call(lambda: skills.installed_platforms_for_ids(ids))


def install_skill(
    skill_id: str,
    repo: str,
    sub_path: str | None = None,
    target_platform: str | None = None,
    project_root: _pathlib.Path | str | None = None,
    *,
    installer: install.Installer | None = None,
) -> CommandResult:
    """Install a skill; the value is the success message."""

    def run() -> str:
        active = installer if installer is not None else install.Installer(config.load_settings())
        result = active.install(
            skill_id,
            repo,
            sub_path=sub_path,
            platform=target_platform or constants.DEFAULT_TARGET_PLATFORM,
            project_root=project_root,
        )
        return result.message

    return _call(run)


def install_to_all(
    skill_id: str,
    repo: str,
    sub_path: str | None = None,
    *,
    installer: install.Installer | None = None,
) -> CommandResult:
    """Install on every detected platform; the value is {installed, skipped}."""

    def run() -> dict[str, list[str]]:
        active = installer if installer is not None else install.Installer(config.load_settings())
        return active.install_to_all(skill_id, repo, sub_path=sub_path).to_dict()

    return _call(run)


def uninstall_skill(
    skill_id: str,
    install_path: _pathlib.Path | str,
    project_root: _pathlib.Path | str | None = None,
) -> CommandResult:
    """Remove an installed skill; the value is the success message."""

    def run() -> str:
        removed = install.uninstall(skill_id, install_path, project_root=project_root)
        return f"Uninstalled {skill_id} from {removed}"

    return _call(run)
