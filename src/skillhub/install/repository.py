"""
Validation of install inputs and repository URL normalization.

Repository sources are either ``owner/repo`` shorthand or a full URL.
Shorthand expands to ``<host>/owner/repo.git``; full URLs pass through.
"""

from __future__ import annotations

import pathlib as _pathlib

import skillhub.constants as constants
import skillhub.errors as errors

_URL_SCHEMES = ("http://", "https://", "file://")

_ID_FORBIDDEN = frozenset("/\\\"'")
_REPO_FORBIDDEN = frozenset("\"'")


def _illegal(c: str, forbidden: frozenset[str]) -> bool:
    return c.isspace() or not c.isprintable() or c in forbidden


def validate_skill_id(skill_id: str) -> str:
    """
    Validate a skill identifier.

    Identifiers name a directory, so they must be non-blank and must not
    contain whitespace, control characters, path separators, or quotes.

    Returns:
        The trimmed identifier.

    Raises:
        BlankFieldError: If the identifier is blank.
        InvalidIdentifierError: If it contains an illegal character.
    """
    trimmed = skill_id.strip()
    if not trimmed:
        raise errors.BlankFieldError("skill id")
    if trimmed in (".", "..") or any(_illegal(c, _ID_FORBIDDEN) for c in trimmed):
        raise errors.InvalidIdentifierError(skill_id)
    return trimmed


def _check_repository(repo: str) -> str:
    trimmed = repo.strip()
    if not trimmed:
        raise errors.BlankFieldError("repo")
    if any(_illegal(c, _REPO_FORBIDDEN) for c in trimmed):
        raise errors.InvalidRepositoryError(
            repo, "contains whitespace, quotes or control characters"
        )
    return trimmed


def is_url(repo: str) -> bool:
    """Whether the repository source is a full URL rather than shorthand."""
    return repo.startswith(_URL_SCHEMES)


def normalize_repo_url(repo: str, *, host: str = constants.DEFAULT_GIT_HOST) -> str:
    """
    Turn a repository source into a git fetch URL.

    Supports:
    - ``owner/repo`` → ``https://github.com/owner/repo.git``
    - ``https://github.com/owner/repo`` (unchanged)
    - ``https://github.com/owner/repo.git`` (unchanged)

    Args:
        repo: Repository source.
        host: Host used to expand shorthand.

    Raises:
        BlankFieldError: If repo is blank.
        InvalidRepositoryError: If repo has illegal characters or is neither
            a URL nor ``owner/repo``.
    """
    repo = _check_repository(repo)
    if is_url(repo):
        return repo

    parts = repo.split("/")
    if len(parts) != 2 or not all(parts):
        raise errors.InvalidRepositoryError(
            repo, "expected owner/repo or https://host/owner/repo(.git)"
        )
    return f"{host.rstrip('/')}/{repo.removesuffix('.git')}.git"


def browse_url(repo: str, *, host: str = constants.DEFAULT_GIT_HOST) -> str:
    """
    Repository URL without the ``.git`` suffix.

    This is the form the companion skills CLI expects.
    """
    return normalize_repo_url(repo, host=host).removesuffix(".git")


def validate_sub_path(sub_path: str | None) -> str | None:
    """
    Validate an optional repository sub-path.

    Returns:
        The trimmed sub-path without trailing slashes, or None if blank.

    Raises:
        InvalidSubPathError: If the sub-path is absolute, contains a '..'
            segment, or has whitespace, quotes or control characters.
    """
    if sub_path is None or not sub_path.strip():
        return None
    trimmed = sub_path.strip().rstrip("/")
    if any(_illegal(c, _REPO_FORBIDDEN) for c in trimmed):
        raise errors.InvalidSubPathError(
            sub_path, "contains whitespace, quotes or control characters"
        )
    if trimmed.startswith(("/", "\\")) or _pathlib.PurePosixPath(trimmed).is_absolute():
        raise errors.InvalidSubPathError(sub_path, "must be relative to the repository")
    if ".." in trimmed.replace("\\", "/").split("/"):
        raise errors.InvalidSubPathError(sub_path, "must not leave the repository")
    if not trimmed or trimmed == ".":
        return None
    return trimmed


def skills_prefixed(sub_path: str) -> str:
    """
    Re-root a sub-path below the conventional ``skills/`` directory.

    A leading ``./`` and an existing ``skills/`` prefix are stripped first,
    so ``./skills/pdf`` and ``pdf`` both become ``skills/pdf``.
    """
    trimmed = sub_path.strip().removeprefix("./")
    trimmed = trimmed.removeprefix(constants.SKILLS_PREFIX + "/")
    return f"{constants.SKILLS_PREFIX}/{trimmed}"


def skill_name_for(skill_id: str, sub_path: str | None) -> str:
    """Name passed to the companion CLI: the sub-path's last segment, or the id."""
    if sub_path:
        name = sub_path.replace("\\", "/").rstrip("/").rsplit("/", 1)[-1]
        if name and name != ".":
            return name
    return skill_id
