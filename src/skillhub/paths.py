"""
Path resolution and safety validation.

Resolves the user home directory and per-platform skills directories,
and validates that a path is inside a known skills location before it is
deleted. Validation fails closed: any path that cannot be canonicalized
is treated as unsafe.
"""

from __future__ import annotations

import os as _os
import pathlib as _pathlib

import skillhub.errors as errors
import skillhub.platforms as platforms


def _home_variables() -> tuple[str, str]:
    """Environment variables consulted for the home directory, in order."""
    if _os.name == "nt":
        return ("USERPROFILE", "HOME")
    return ("HOME", "USERPROFILE")


def home_dir() -> _pathlib.Path:
    """
    Get the user home directory.

    Raises:
        NoHomeDirectoryError: If no candidate variable holds a non-blank value.
    """
    variables = _home_variables()
    for name in variables:
        value = _os.environ.get(name, "")
        if value.strip():
            return _pathlib.Path(value)
    raise errors.NoHomeDirectoryError(variables)


def global_skills_dir(platform: str | platforms.Platform) -> _pathlib.Path:
    """Get the global (per-user) skills directory for a platform."""
    return platforms.get_platform(platform).global_dir(home_dir())


def project_skills_dir(
    platform: str | platforms.Platform,
    project_root: _pathlib.Path | str,
) -> _pathlib.Path:
    """Get the project skills directory for a platform."""
    return platforms.get_platform(platform).project_dir(_pathlib.Path(project_root))


def detection_dir(platform: str | platforms.Platform) -> _pathlib.Path:
    """Get the directory whose existence means the platform is installed."""
    return platforms.get_platform(platform).detection_dir(home_dir())


def _canonical(path: _pathlib.Path) -> _pathlib.Path | None:
    """Resolve a path strictly, or None if it cannot be resolved."""
    try:
        return path.resolve(strict=True)
    except (OSError, RuntimeError):
        return None


def _is_under_home(path: _pathlib.Path) -> bool:
    try:
        home = home_dir()
    except errors.NoHomeDirectoryError:
        return False
    normalized = _pathlib.Path(_os.path.abspath(path))
    home_normalized = _pathlib.Path(_os.path.abspath(home))
    return normalized != home_normalized and normalized.is_relative_to(home_normalized)


def _allowed_roots(project_root: _pathlib.Path | None) -> list[_pathlib.Path]:
    """Canonical directories a skill install may live under."""
    roots: list[_pathlib.Path] = []
    try:
        home = home_dir()
    except errors.NoHomeDirectoryError:
        home = None

    for platform in platforms.PLATFORMS:
        if home is not None:
            canonical = _canonical(platform.global_dir(home))
            if canonical is not None:
                # The parent tolerates installs reached through a symlinked
                # skills directory.
                roots.extend([canonical, canonical.parent])
        if project_root is not None:
            canonical = _canonical(platform.project_dir(project_root))
            if canonical is not None:
                roots.append(canonical)
    return roots


def is_valid_skills_path(
    path: _pathlib.Path | str,
    *,
    project_root: _pathlib.Path | str | None = None,
) -> bool:
    """
    Check whether a path is safely inside a known skills location.

    A path is valid if any of these hold:
    - it is (lexically) inside the home directory
    - its canonical form is inside a platform's canonical global skills
      directory, or that directory's parent
    - project_root is given and its canonical form is inside a platform's
      canonical project skills directory

    Args:
        path: Candidate path.
        project_root: Optional project root whose skills directories are
                      also accepted.

    Returns:
        True if the path may be operated on, False otherwise.
    """
    path = _pathlib.Path(path)
    if _is_under_home(path):
        return True

    canonical = _canonical(path)
    if canonical is None:
        return False

    root = _pathlib.Path(project_root) if project_root is not None else None
    return any(canonical.is_relative_to(allowed) for allowed in _allowed_roots(root))


def ensure_valid_skills_path(
    path: _pathlib.Path | str,
    *,
    project_root: _pathlib.Path | str | None = None,
) -> _pathlib.Path:
    """
    Validate a path with is_valid_skills_path.

    Returns:
        The path as a Path.

    Raises:
        UnsafePathError: If the path is not inside a known skills location.
    """
    path = _pathlib.Path(path)
    if not is_valid_skills_path(path, project_root=project_root):
        raise errors.UnsafePathError(path)
    return path
