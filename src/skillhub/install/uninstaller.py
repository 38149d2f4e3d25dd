"""
Skill removal.

Deleting is irreversible, so every check runs before anything is touched:
the path must exist, must lie inside a known skills location, and its last
segment must equal the skill id.
"""

from __future__ import annotations

import logging as _logging
import pathlib as _pathlib
import shutil as _shutil

import skillhub.errors as errors
import skillhub.install.repository as repository
import skillhub.paths as paths

_logger = _logging.getLogger(__name__)


def uninstall(
    skill_id: str,
    install_path: _pathlib.Path | str,
    *,
    project_root: _pathlib.Path | str | None = None,
) -> _pathlib.Path:
    """
    Remove an installed skill directory.

    Args:
        skill_id: Identifier the directory must be named after.
        install_path: Directory to remove.
        project_root: Also accept paths inside this project's skills
                      directories.

    Returns:
        The removed path.

    Raises:
        BlankFieldError: If skill_id or install_path is blank.
        InvalidIdentifierError: If skill_id has illegal characters.
        InstallPathNotFoundError: If the path does not exist.
        UnsafePathError: If the path is outside every known skills location.
        IdentifierMismatchError: If the path's last segment is not skill_id.
        RemovalError: If removal fails.
    """
    skill_id = repository.validate_skill_id(skill_id)
    if not str(install_path).strip():
        raise errors.BlankFieldError("install path")

    path = _pathlib.Path(install_path)
    if not path.exists() and not path.is_symlink():
        raise errors.InstallPathNotFoundError(path)

    paths.ensure_valid_skills_path(path, project_root=project_root)

    if path.name != skill_id:
        raise errors.IdentifierMismatchError(skill_id, path)

    try:
        if path.is_symlink():
            # Linked installs: drop the link, keep whatever it points at
            path.unlink()
        else:
            _shutil.rmtree(path)
    except OSError as e:
        raise errors.RemovalError(path, str(e)) from e

    _logger.info("Removed %s", path)
    return path
