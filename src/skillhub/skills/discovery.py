"""
Discovery of installed skills.

Skills are directories directly below a platform's skills directory:
- global: ~/.claude/skills/<id>/, ~/.gemini/antigravity/skills/<id>/, ...
- project: <project>/.claude/skills/<id>/, <project>/.agent/skills/<id>/, ...

Each entry may hold a SKILL.md at its root or a few levels down (repos
cloned whole often nest the actual skill). The filesystem is the only
source of truth; nothing is cached between calls.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import logging as _logging
import pathlib as _pathlib
import typing as _typing

import skillhub.constants as constants
import skillhub.errors as errors
import skillhub.paths as paths
import skillhub.platforms as platforms
import skillhub.skills.manifest as manifest

_logger = _logging.getLogger(__name__)


@_dataclasses.dataclass
class InstalledSkill:
    """A skill directory found on disk."""

    id: str
    """Directory name, which is also the skill identifier."""

    platform: str
    """Key of the platform whose skills directory holds this entry."""

    install_path: _pathlib.Path
    """Path to the skill directory."""

    manifest_path: _pathlib.Path | None = None
    """Path to the located SKILL.md, if any."""

    metadata: manifest.ManifestMetadata = _dataclasses.field(
        default_factory=manifest.ManifestMetadata
    )
    """Parsed manifest metadata (empty if no manifest was found)."""

    @property
    def name(self) -> str | None:
        return self.metadata.name

    @property
    def description(self) -> str | None:
        return self.metadata.description

    @property
    def tags(self) -> list[str]:
        return self.metadata.tags

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "tags": list(self.tags),
            "install_path": str(self.install_path),
            "skill_md_path": str(self.manifest_path) if self.manifest_path else None,
            "platform": self.platform,
        }


def _skill_dirs(skills_dir: _pathlib.Path) -> list[_pathlib.Path]:
    """
    List entries of a skills directory that are directories, sorted by name.

    Symlinks to directories count. A missing directory yields [].

    Raises:
        DirectoryReadError: If the directory exists but cannot be listed.
    """
    try:
        if not skills_dir.is_dir():
            return []
        return sorted(
            (entry for entry in skills_dir.iterdir() if entry.is_dir()),
            key=lambda p: p.name,
        )
    except OSError as e:
        raise errors.DirectoryReadError(skills_dir, str(e)) from e


def find_manifest(
    skill_dir: _pathlib.Path,
    max_depth: int = constants.DEFAULT_MANIFEST_SEARCH_DEPTH,
) -> _pathlib.Path | None:
    """
    Locate SKILL.md inside a skill directory.

    Checks the directory itself first, then searches subdirectories
    depth-first in name order, at most max_depth levels down. Symlinked
    subdirectories are not entered.

    Args:
        skill_dir: Skill directory to search.
        max_depth: Maximum number of levels below skill_dir to descend.

    Returns:
        Path to the first SKILL.md found, or None.
    """
    # Worklist of (directory, remaining depth); reversed pushes keep name order
    stack: list[tuple[_pathlib.Path, int]] = [(skill_dir, max_depth)]
    while stack:
        directory, remaining = stack.pop()
        candidate = directory / constants.MANIFEST_FILENAME
        if candidate.is_file():
            return candidate
        if remaining <= 0:
            continue
        try:
            children = sorted(
                (
                    child
                    for child in directory.iterdir()
                    if child.name != ".git" and child.is_dir() and not child.is_symlink()
                ),
                key=lambda p: p.name,
            )
        except OSError as e:
            _logger.debug("Skipping unreadable directory %s: %s", directory, e)
            continue
        for child in reversed(children):
            stack.append((child, remaining - 1))
    return None


def _load_skills(
    skills_dir: _pathlib.Path,
    platform_key: str,
    max_depth: int,
) -> list[InstalledSkill]:
    skills: list[InstalledSkill] = []
    for skill_dir in _skill_dirs(skills_dir):
        manifest_path = find_manifest(skill_dir, max_depth)
        metadata = (
            manifest.read_manifest(manifest_path)
            if manifest_path is not None
            else manifest.ManifestMetadata()
        )
        skills.append(
            InstalledSkill(
                id=skill_dir.name,
                platform=platform_key,
                install_path=skill_dir,
                manifest_path=manifest_path,
                metadata=metadata,
            )
        )
    skills.sort(key=lambda s: s.id)
    return skills


def list_installed_ids(platform: str | platforms.Platform) -> list[str]:
    """
    List installed skill ids in a platform's global skills directory.

    Returns:
        Sorted directory names; [] if the directory does not exist.

    Raises:
        UnsupportedPlatformError: If the platform is unknown.
        NoHomeDirectoryError: If the home directory cannot be located.
        DirectoryReadError: If the skills directory cannot be listed.
    """
    return [d.name for d in _skill_dirs(paths.global_skills_dir(platform))]


def list_installed_skills(
    platform: str | platforms.Platform,
    *,
    max_depth: int = constants.DEFAULT_MANIFEST_SEARCH_DEPTH,
) -> list[InstalledSkill]:
    """
    List installed skills with their parsed metadata.

    Args:
        platform: Platform key or Platform.
        max_depth: How deep to search each entry for SKILL.md.

    Returns:
        InstalledSkill records sorted by id.
    """
    resolved = platforms.get_platform(platform)
    return _load_skills(paths.global_skills_dir(resolved), resolved.key, max_depth)


def list_project_skills(
    platform: str | platforms.Platform,
    project_root: _pathlib.Path | str,
    *,
    max_depth: int = constants.DEFAULT_MANIFEST_SEARCH_DEPTH,
) -> list[InstalledSkill]:
    """List skills installed in a project's skills directory for a platform."""
    resolved = platforms.get_platform(platform)
    return _load_skills(
        paths.project_skills_dir(resolved, project_root), resolved.key, max_depth
    )


def detected_platforms() -> list[platforms.Platform]:
    """Platforms whose detection directory exists on this machine."""
    home = paths.home_dir()
    return [p for p in platforms.PLATFORMS if p.detection_dir(home).exists()]


def installed_anywhere() -> list[str]:
    """
    Sorted, deduplicated ids installed on any detected platform.

    A platform whose skills directory cannot be read is skipped.
    """
    ids: set[str] = set()
    for platform in detected_platforms():
        try:
            ids.update(list_installed_ids(platform))
        except errors.DirectoryReadError as e:
            _logger.warning("Skipping %s: %s", platform.key, e)
    return sorted(ids)


def installed_platforms_for_ids(ids: _typing.Iterable[str]) -> dict[str, list[str]]:
    """
    Map each id to the platform keys that have it installed.

    Checks every known platform's global directory, detected or not.
    Blank ids are skipped and ids installed nowhere are omitted.
    """
    home = paths.home_dir()
    result: dict[str, list[str]] = {}
    for skill_id in ids:
        if not skill_id.strip():
            continue
        found = [
            p.key for p in platforms.PLATFORMS if (p.global_dir(home) / skill_id).exists()
        ]
        if found:
            result[skill_id] = found
    return result
