"""
Error taxonomy for SkillHub.

Every failure raised by the core is a SkillHubError subclass. Each class
carries a ``kind`` (the broad category callers branch on) and a ``code``
(the specific case), plus structured context fields so that callers and
tests can match on the error instead of parsing its message.

Kinds:
- configuration: environment cannot support the request (no home, bad platform)
- validation: the request itself is malformed or unsafe
- already_exists: the target is already installed (a no-op signal)
- not_found: a source or install path is missing
- external_tool: git or the companion skills CLI failed or is unavailable
- filesystem: moving/creating directories failed
"""

from __future__ import annotations

import pathlib as _pathlib
import typing as _typing


class SkillHubError(Exception):
    """Base class for all SkillHub errors."""

    kind: _typing.ClassVar[str] = "error"
    code: _typing.ClassVar[str] = "error"

    def __init__(self, message: str, **context: _typing.Any) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, _typing.Any] = context

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "kind": self.kind,
            "code": self.code,
            "message": self.message,
            "context": {
                k: str(v) if isinstance(v, _pathlib.Path) else v
                for k, v in self.context.items()
            },
        }


# =============================================================================
# Configuration
# =============================================================================


class ConfigurationError(SkillHubError):
    """The environment cannot support the request."""

    kind = "configuration"
    code = "configuration"


class NoHomeDirectoryError(ConfigurationError):
    """Neither USERPROFILE nor HOME yields a usable home directory."""

    code = "no_home_directory"

    def __init__(self, variables: _typing.Sequence[str]) -> None:
        super().__init__(
            f"Cannot locate the user home directory ({'/'.join(variables)} not set)",
            variables=list(variables),
        )


class UnsupportedPlatformError(ConfigurationError):
    """Platform key is not in the registry."""

    code = "unsupported_platform"

    def __init__(self, key: str, allowed: _typing.Sequence[str]) -> None:
        self.key = key
        self.allowed = list(allowed)
        super().__init__(
            f"Unsupported platform '{key}': expected one of {', '.join(self.allowed)}",
            key=key,
            allowed=self.allowed,
        )


# =============================================================================
# Validation
# =============================================================================


class ValidationError(SkillHubError):
    """The request is malformed or unsafe. Never retried."""

    kind = "validation"
    code = "validation"


class BlankFieldError(ValidationError):
    """A required field is empty or whitespace."""

    code = "blank_field"

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"{field} must not be empty", field=field)


class InvalidIdentifierError(ValidationError):
    """Skill identifier contains whitespace, a path separator, or a quote."""

    code = "invalid_identifier"

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(
            f"Skill id contains illegal characters: {value!r}",
            value=value,
        )


class InvalidRepositoryError(ValidationError):
    """Repository source cannot be turned into a fetch URL."""

    code = "invalid_repository"

    def __init__(self, value: str, reason: str) -> None:
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid repository {value!r}: {reason}", value=value, reason=reason)


class InvalidSubPathError(ValidationError):
    """Sub-path is absolute, escapes the repository, or has illegal characters."""

    code = "invalid_sub_path"

    def __init__(self, value: str, reason: str) -> None:
        self.value = value
        super().__init__(f"Invalid sub-path {value!r}: {reason}", value=value, reason=reason)


class InvalidProjectRootError(ValidationError):
    """Project root is not an existing directory."""

    code = "invalid_project_root"

    def __init__(self, path: _pathlib.Path) -> None:
        self.path = path
        super().__init__(f"Project root is not a directory: {path}", path=path)


class UnsafePathError(ValidationError):
    """Path is not inside a known skills directory."""

    code = "unsafe_path"

    def __init__(self, path: _pathlib.Path) -> None:
        self.path = path
        super().__init__(f"Path is not inside a known skills directory: {path}", path=path)


class IdentifierMismatchError(ValidationError):
    """Install path does not end with the skill identifier."""

    code = "identifier_mismatch"

    def __init__(self, skill_id: str, path: _pathlib.Path) -> None:
        self.skill_id = skill_id
        self.path = path
        super().__init__(
            f"Path {path} does not match skill id '{skill_id}'",
            skill_id=skill_id,
            path=path,
        )


# =============================================================================
# Already exists / not found
# =============================================================================


class AlreadyInstalledError(SkillHubError):
    """Target directory exists. Callers usually treat this as a no-op."""

    kind = "already_exists"
    code = "already_installed"

    def __init__(self, path: _pathlib.Path) -> None:
        self.path = path
        super().__init__(f"A directory with this name already exists: {path}", path=path)


class NotFoundError(SkillHubError):
    """Something that must exist does not."""

    kind = "not_found"
    code = "not_found"


class SourcePathNotFoundError(NotFoundError):
    """Requested sub-path is missing from the cloned repository."""

    code = "source_path_not_found"

    def __init__(
        self,
        sub_path: str,
        candidate: str,
        available: _typing.Sequence[str] = (),
    ) -> None:
        self.sub_path = sub_path
        self.candidate = candidate
        self.available = list(available)
        message = f"Sub-path not found in repository: {candidate} (requested '{sub_path}')"
        if self.available:
            message += f". Directories under skills/: {', '.join(self.available)}"
        super().__init__(
            message,
            sub_path=sub_path,
            candidate=candidate,
            available=self.available,
        )


class InstallPathNotFoundError(NotFoundError):
    """Install path is gone (probably already removed)."""

    code = "install_path_not_found"

    def __init__(self, path: _pathlib.Path) -> None:
        self.path = path
        super().__init__(f"Install path does not exist, it may already be removed: {path}", path=path)


# =============================================================================
# External tools
# =============================================================================


class ExternalToolError(SkillHubError):
    """git or the companion skills CLI failed."""

    kind = "external_tool"
    code = "external_tool"


class ToolUnavailableError(ExternalToolError):
    """The executable is missing or cannot be run."""

    code = "tool_unavailable"

    def __init__(self, tool: str, reason: str) -> None:
        self.tool = tool
        super().__init__(f"Cannot run {tool}: {reason}", tool=tool, reason=reason)


class ToolFailedError(ExternalToolError):
    """The tool ran and exited non-zero."""

    code = "tool_failed"

    def __init__(
        self,
        tool: str,
        args: _typing.Sequence[str],
        returncode: int,
        stdout: str,
        stderr: str,
    ) -> None:
        self.tool = tool
        self.args_list = list(args)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        command = " ".join([tool, *self.args_list])
        message = f"Command failed (exit {returncode}): {command}"
        message += f"\nstdout:\n{stdout}" if stdout.strip() else ""
        message += f"\nstderr:\n{stderr}" if stderr.strip() else ""
        super().__init__(
            message,
            tool=tool,
            args=self.args_list,
            returncode=returncode,
            stdout=stdout,
            stderr=stderr,
        )


class ToolTimeoutError(ExternalToolError):
    """The tool did not finish in time and was killed."""

    code = "tool_timeout"

    def __init__(self, tool: str, args: _typing.Sequence[str], timeout: float) -> None:
        self.tool = tool
        self.timeout = timeout
        command = " ".join([tool, *args])
        super().__init__(
            f"Command timed out after {timeout:g}s: {command}",
            tool=tool,
            args=list(args),
            timeout=timeout,
        )


# =============================================================================
# Filesystem
# =============================================================================


class PlacementError(SkillHubError):
    """Creating or moving an install directory failed."""

    kind = "filesystem"
    code = "placement_failed"

    def __init__(self, source: _pathlib.Path | None, target: _pathlib.Path, reason: str) -> None:
        self.source = source
        self.target = target
        if source is None:
            message = f"Cannot prepare {target}: {reason}"
        else:
            message = f"Cannot move {source} -> {target}: {reason}"
        super().__init__(message, source=source, target=target, reason=reason)


class RemovalError(SkillHubError):
    """Deleting an installed skill failed part-way."""

    kind = "filesystem"
    code = "removal_failed"

    def __init__(self, path: _pathlib.Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Cannot remove {path}: {reason}", path=path, reason=reason)


class DirectoryReadError(SkillHubError):
    """Listing a skills directory failed."""

    kind = "filesystem"
    code = "directory_read_failed"

    def __init__(self, path: _pathlib.Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Cannot read directory {path}: {reason}", path=path, reason=reason)
