"""
Skill installation.

Installing a skill runs through these steps:

1. Validate the skill id, repository and optional sub-path.
2. Resolve the fetch URL and the target directory; refuse to overwrite.
3. Primary: if the companion ``skills`` CLI (run through npx) is
   available, let it add the skill. An explicit failure from the CLI is
   final. If it succeeds but the target directory did not appear (the
   CLI mapped the agent to another path), fall back.
4. Fallback with a sub-path: sparse-clone into a staging directory under
   the system temp root, locate the sub-path (retrying below ``skills/``),
   and rename it into place.
5. Fallback without a sub-path: clone the whole repository into place.

The staging directory is removed on every exit path, and the target
directory only ever appears complete.
"""

from __future__ import annotations

import contextlib as _contextlib
import dataclasses as _dataclasses
import errno as _errno
import itertools as _itertools
import logging as _logging
import os as _os
import pathlib as _pathlib
import shutil as _shutil
import tempfile as _tempfile
import time as _time
import typing as _typing

import skillhub.config as config
import skillhub.constants as constants
import skillhub.errors as errors
import skillhub.install.repository as repository
import skillhub.install.runner as runner_module
import skillhub.paths as paths
import skillhub.platforms as platforms
import skillhub.skills.discovery as discovery

_logger = _logging.getLogger(__name__)

STRATEGY_SKILLS_CLI = "skills-cli"
STRATEGY_GIT_SPARSE = "git-sparse"
STRATEGY_GIT_CLONE = "git-clone"

_GIT_ENV = {"GIT_TERMINAL_PROMPT": "0"}
_NPX_ENV = {"DISABLE_TELEMETRY": "1"}

_staging_counter = _itertools.count()


@_dataclasses.dataclass
class InstallResult:
    """A completed installation."""

    skill_id: str
    platform: str
    target_dir: _pathlib.Path
    strategy: str

    @property
    def message(self) -> str:
        return f"Installed {self.skill_id} to {self.target_dir}"

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "skill_id": self.skill_id,
            "platform": self.platform,
            "target_dir": str(self.target_dir),
            "strategy": self.strategy,
            "message": self.message,
        }


@_dataclasses.dataclass
class InstallAllResult:
    """Outcome of installing one skill on every detected platform."""

    installed: list[str] = _dataclasses.field(default_factory=list)
    """Platform keys the skill was installed on."""

    skipped: list[str] = _dataclasses.field(default_factory=list)
    """Platform keys that already had the skill."""

    def to_dict(self) -> dict[str, list[str]]:
        return {"installed": list(self.installed), "skipped": list(self.skipped)}


class Installer:
    """
    Installs skills from git repositories into platform skills directories.

    Each call is independent and confines its writes to its own target
    directory and staging directory, so installs of different skills may
    run concurrently.
    """

    def __init__(
        self,
        settings: config.Settings | None = None,
        runner: runner_module.ToolRunner | None = None,
        *,
        temp_root: _pathlib.Path | None = None,
    ) -> None:
        """
        Initialize the installer.

        Args:
            settings: Configuration. Defaults to Settings().
            runner: Tool runner. Defaults to a ToolRunner using the
                    configured timeout.
            temp_root: Where staging directories are created. Defaults to
                       the system temp directory.
        """
        self._settings = settings if settings is not None else config.Settings()
        self._runner = (
            runner
            if runner is not None
            else runner_module.ToolRunner(timeout=self._settings.tools.timeout)
        )
        self._temp_root = temp_root

    @property
    def settings(self) -> config.Settings:
        return self._settings

    @property
    def runner(self) -> runner_module.ToolRunner:
        return self._runner

    # =========================================================================
    # Public API
    # =========================================================================

    def install(
        self,
        skill_id: str,
        repo: str,
        *,
        sub_path: str | None = None,
        platform: str | platforms.Platform = constants.DEFAULT_TARGET_PLATFORM,
        project_root: _pathlib.Path | str | None = None,
    ) -> InstallResult:
        """
        Install a skill.

        Args:
            skill_id: Directory name for the installed skill.
            repo: ``owner/repo`` or a repository URL.
            sub_path: Directory inside the repository holding the skill.
                      If omitted, the whole repository is the skill.
            platform: Target platform key.
            project_root: Install into this project instead of globally.

        Returns:
            InstallResult describing where and how the skill was installed.

        Raises:
            ValidationError: If an input is malformed.
            ConfigurationError: If the platform is unknown or home is missing.
            AlreadyInstalledError: If the target directory exists.
            SourcePathNotFoundError: If the sub-path is not in the repository.
            ExternalToolError: If git or the skills CLI fails.
            PlacementError: If the skill cannot be moved into place.
        """
        # Validating
        skill_id = repository.validate_skill_id(skill_id)
        sub_path = repository.validate_sub_path(sub_path)
        host = self._settings.install.default_host
        url = repository.normalize_repo_url(repo, host=host)
        resolved = platforms.get_platform(platform)
        root = self._check_project_root(project_root)

        # ResolvingTarget
        target = self._resolve_target(resolved, skill_id, root)
        _logger.info("Installing %s from %s into %s", skill_id, url, target)

        # PrimaryAttempt
        if self._try_skills_cli(resolved, skill_id, repo, sub_path, target, root):
            return InstallResult(skill_id, resolved.key, target, STRATEGY_SKILLS_CLI)

        # Fallback
        if sub_path is not None:
            self._install_sparse(url, sub_path, target)
            strategy = STRATEGY_GIT_SPARSE
        else:
            self._install_clone(url, target)
            strategy = STRATEGY_GIT_CLONE
        _logger.info("Installed %s via %s", skill_id, strategy)
        return InstallResult(skill_id, resolved.key, target, strategy)

    def install_to_all(
        self,
        skill_id: str,
        repo: str,
        *,
        sub_path: str | None = None,
    ) -> InstallAllResult:
        """
        Install a skill globally on every detected platform.

        Platforms that already have a directory with this id are skipped.
        The first failure aborts the batch; installs already completed in
        this batch are kept.

        Returns:
            InstallAllResult listing installed and skipped platform keys.
        """
        skill_id = repository.validate_skill_id(skill_id)
        home = paths.home_dir()
        result = InstallAllResult()
        for platform in discovery.detected_platforms():
            if (platform.global_dir(home) / skill_id).exists():
                _logger.info("Skipping %s: already installed", platform.key)
                result.skipped.append(platform.key)
                continue
            self.install(skill_id, repo, sub_path=sub_path, platform=platform)
            result.installed.append(platform.key)
        return result

    # =========================================================================
    # Target resolution
    # =========================================================================

    @staticmethod
    def _check_project_root(
        project_root: _pathlib.Path | str | None,
    ) -> _pathlib.Path | None:
        if project_root is None or not str(project_root).strip():
            return None
        root = _pathlib.Path(project_root).expanduser()
        if not root.is_dir():
            raise errors.InvalidProjectRootError(root)
        return root

    @staticmethod
    def _resolve_target(
        platform: platforms.Platform,
        skill_id: str,
        project_root: _pathlib.Path | None,
    ) -> _pathlib.Path:
        if project_root is not None:
            base_dir = platform.project_dir(project_root)
        else:
            base_dir = platform.global_dir(paths.home_dir())

        try:
            base_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise errors.PlacementError(None, base_dir, str(e)) from e

        target = base_dir / skill_id
        if target.exists() or target.is_symlink():
            raise errors.AlreadyInstalledError(target)
        return target

    # =========================================================================
    # Primary strategy: companion skills CLI
    # =========================================================================

    def _try_skills_cli(
        self,
        platform: platforms.Platform,
        skill_id: str,
        repo: str,
        sub_path: str | None,
        target: _pathlib.Path,
        project_root: _pathlib.Path | None,
    ) -> bool:
        """
        Install with ``npx skills add``.

        Returns:
            True if the CLI installed the skill at the target, False if the
            caller should fall back to git.

        Raises:
            ExternalToolError: If the CLI ran and failed.
        """
        tools = self._settings.tools
        if not tools.primary_enabled:
            return False
        if not self._runner.probe(tools.npx_command):
            _logger.info("%s not available, using git", tools.npx_command)
            return False

        args = [
            "--yes",
            "skills",
            "add",
            repository.browse_url(repo, host=self._settings.install.default_host),
            "--skill",
            repository.skill_name_for(skill_id, sub_path),
            "--agent",
            platform.agent_name,
        ]
        if project_root is None:
            args.append("-g")
        args.append("-y")

        self._runner.run(tools.npx_command, args, cwd=project_root, env=_NPX_ENV)

        if target.is_dir():
            return True
        _logger.warning(
            "skills CLI reported success but %s does not exist, falling back to git",
            target,
        )
        return False

    # =========================================================================
    # Fallback strategy: git
    # =========================================================================

    def _git(self, args: list[str], cwd: _pathlib.Path | None = None) -> runner_module.ToolResult:
        return self._runner.run(self._settings.tools.git_command, args, cwd=cwd, env=_GIT_ENV)

    @_contextlib.contextmanager
    def staging_dir(self) -> _typing.Iterator[_pathlib.Path]:
        """
        Create a uniquely named staging directory and always remove it.

        The name is ``<prefix>_<pid>_<millis>``; a counter suffix is added
        if another install already holds that name.
        """
        temp_root = (
            self._temp_root
            if self._temp_root is not None
            else _pathlib.Path(_tempfile.gettempdir())
        )
        base = (
            f"{self._settings.install.temp_prefix}_{_os.getpid()}_{int(_time.time() * 1000)}"
        )
        path = temp_root / base
        while True:
            try:
                path.mkdir(parents=True)
                break
            except FileExistsError:
                path = temp_root / f"{base}_{next(_staging_counter)}"
            except OSError as e:
                raise errors.PlacementError(None, path, str(e)) from e

        _logger.debug("Created staging directory %s", path)
        try:
            yield path
        finally:
            _remove_tree(path)

    def _install_clone(self, url: str, target: _pathlib.Path) -> None:
        """Clone the whole repository into the target directory."""
        try:
            self._git(["clone", url, str(target)])
        except errors.ToolFailedError as e:
            # Another install won the race for this target
            if target.exists() and "already exists" in e.stderr:
                raise errors.AlreadyInstalledError(target) from e
            raise

    def _install_sparse(self, url: str, sub_path: str, target: _pathlib.Path) -> None:
        """Sparse-clone the sub-path into staging and move it into place."""
        with self.staging_dir() as tmp:
            self._git(["clone", "--filter=blob:none", "--no-checkout", url, str(tmp)])
            self._git(["sparse-checkout", "init", "--cone"], cwd=tmp)
            source = self._checkout_sub_path(tmp, sub_path)
            self._place(source, target)

    def _checkout_sub_path(self, tmp: _pathlib.Path, sub_path: str) -> _pathlib.Path:
        """
        Materialize the sub-path, retrying below ``skills/`` once.

        git sparse-checkout accepts paths that do not exist, so presence is
        checked on disk after each checkout.

        Raises:
            SourcePathNotFoundError: If neither form of the path exists.
        """
        self._git(["sparse-checkout", "set", sub_path], cwd=tmp)
        self._git(["checkout"], cwd=tmp)
        candidate = sub_path
        if (tmp / candidate).is_dir():
            return tmp / candidate

        alternate = repository.skills_prefixed(sub_path)
        if alternate != candidate:
            _logger.info("Sub-path %s not found, trying %s", sub_path, alternate)
            self._git(["sparse-checkout", "set", alternate], cwd=tmp)
            self._git(["checkout"], cwd=tmp)
            candidate = alternate
            if (tmp / candidate).is_dir():
                return tmp / candidate

        raise errors.SourcePathNotFoundError(
            sub_path,
            str(tmp / candidate),
            self._available_skills(tmp),
        )

    def _available_skills(self, tmp: _pathlib.Path) -> list[str]:
        """
        Names of directories under ``skills/`` in the clone, for hints.

        Uses the checked-out tree if it has any, otherwise asks git for the
        directory listing of ``skills/`` at HEAD.
        """
        limit = self._settings.install.hint_limit
        skills_dir = tmp / constants.SKILLS_PREFIX
        names: list[str] = []
        if skills_dir.is_dir():
            names = sorted(p.name for p in skills_dir.iterdir() if p.is_dir())
        if not names:
            try:
                result = self._runner.run(
                    self._settings.tools.git_command,
                    ["ls-tree", "-d", "--name-only", f"HEAD:{constants.SKILLS_PREFIX}"],
                    cwd=tmp,
                    env=_GIT_ENV,
                    check=False,
                )
            except errors.ExternalToolError as e:
                _logger.debug("Cannot list skills/ for hints: %s", e)
                return []
            if result.ok:
                names = sorted(line.strip() for line in result.stdout.splitlines() if line.strip())
        return names[:limit]

    def _place(self, source: _pathlib.Path, target: _pathlib.Path) -> None:
        """
        Move the fetched skill into the target directory.

        A rename is atomic; across filesystems the tree is first copied to
        a hidden sibling of the target and that sibling is renamed, so the
        target never holds a partial copy.

        Raises:
            AlreadyInstalledError: If the target appeared meanwhile.
            PlacementError: If the move fails.
        """
        if target.exists():
            raise errors.AlreadyInstalledError(target)
        try:
            _os.rename(source, target)
            return
        except OSError as e:
            if target.exists() and not source.exists():
                # Rename went through despite the error report
                return
            if target.exists():
                raise errors.AlreadyInstalledError(target) from e
            if e.errno != _errno.EXDEV:
                raise errors.PlacementError(source, target, str(e)) from e

        _logger.debug("Cross-device move, copying %s next to %s", source, target)
        sibling = target.with_name(
            f".{target.name}.partial-{_os.getpid()}-{int(_time.time() * 1000)}"
        )
        try:
            _shutil.copytree(source, sibling, symlinks=True)
            if target.exists():
                raise errors.AlreadyInstalledError(target)
            _os.rename(sibling, target)
        except OSError as e:
            if target.exists():
                raise errors.AlreadyInstalledError(target) from e
            raise errors.PlacementError(source, target, str(e)) from e
        finally:
            _remove_tree(sibling)


def _remove_tree(path: _pathlib.Path) -> None:
    """Remove a directory tree if present; failures are logged, not raised."""
    if not path.exists():
        return
    try:
        _shutil.rmtree(path)
    except OSError as e:
        _logger.warning("Could not remove %s: %s", path, e)
