"""
Shared pytest fixtures for SkillHub tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import os as _os
import pathlib as _pathlib
import typing as _typing

import pytest as _pytest

import skillhub.config as config
import skillhub.install.runner as runner_module

# =============================================================================
# Environment isolation
# =============================================================================


@_pytest.fixture
def home(tmp_path: _pathlib.Path, monkeypatch: _pytest.MonkeyPatch) -> _pathlib.Path:
    """
    Point the home directory at an empty temporary directory.

    Also clears SKILLHUB_* variables and points the user config directory
    at a directory with no config file, so tests see default settings.
    """
    home_path = tmp_path / "home"
    home_path.mkdir()
    for key in list(_os.environ):
        if key.startswith("SKILLHUB_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("HOME", str(home_path))
    monkeypatch.setenv("USERPROFILE", str(home_path))
    monkeypatch.setenv("SKILLHUB_CONFIG_DIR", str(tmp_path / "config"))
    return home_path


@_pytest.fixture
def clean_settings(home: _pathlib.Path) -> config.Settings:  # noqa: ARG001 - isolation only
    """Default settings, isolated from the environment and config files."""
    return config.Settings.construct_without_dotenv()


@_pytest.fixture
def git_only_settings(home: _pathlib.Path) -> config.Settings:  # noqa: ARG001 - isolation only
    """Settings with the companion skills CLI disabled."""
    return config.Settings.construct_without_dotenv(tools={"primary_enabled": False})


def write_skill(
    directory: _pathlib.Path,
    content: str = "---\nname: Test\ndescription: A test skill\n---\n",
) -> _pathlib.Path:
    """Create a skill directory holding a SKILL.md."""
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "SKILL.md").write_text(content, encoding="utf-8")
    return directory


@_pytest.fixture
def make_skill() -> _typing.Callable[..., _pathlib.Path]:
    """Factory creating a skill directory with a SKILL.md."""
    return write_skill


# =============================================================================
# Scripted tools
# =============================================================================

Handler = _typing.Callable[
    [str, list[str], _pathlib.Path | None],
    runner_module.ToolResult | None,
]


class FakeRunner(runner_module.ToolRunner):
    """
    ToolRunner that never starts a process.

    Each call is recorded and passed to the handler, which may touch the
    filesystem and return a ToolResult (or raise). A handler returning
    None means success with no output.
    """

    def __init__(
        self,
        available: _typing.Iterable[str] = ("git",),
        handler: Handler | None = None,
    ) -> None:
        super().__init__(timeout=5)
        self.available = set(available)
        self.handler = handler
        self.calls: list[dict[str, _typing.Any]] = []

    def which(self, tool: str) -> str | None:
        return f"/usr/bin/{tool}" if tool in self.available else None

    def run(
        self,
        tool: str,
        args: _typing.Sequence[str],
        *,
        cwd: _pathlib.Path | None = None,
        env: _typing.Mapping[str, str] | None = None,
        check: bool = True,
        timeout: float | None = None,  # noqa: ARG002
    ) -> runner_module.ToolResult:
        args = list(args)
        self.calls.append({"tool": tool, "args": args, "cwd": cwd, "env": dict(env or {})})
        result = self.handler(tool, args, cwd) if self.handler is not None else None
        if result is None:
            result = runner_module.ToolResult(tool, args, 0)
        if check:
            result.raise_for_status()
        return result

    def calls_for(self, tool: str) -> list[list[str]]:
        """Argument lists of every call to a tool, probes excluded."""
        return [c["args"] for c in self.calls if c["tool"] == tool and c["args"] != ["--version"]]


class FakeGit:
    """
    Simulates git against an in-memory repository.

    The repository is a mapping of directory paths (relative to the
    repository root) to SKILL.md content. Clones create the destination,
    sparse checkouts materialize only the directories under the current
    sparse path.
    """

    def __init__(self, dirs: dict[str, str]) -> None:
        self.dirs = dirs
        self.sparse: str | None = None
        self.on_checkout: _typing.Callable[[_pathlib.Path], None] | None = None

    def _materialize(self, root: _pathlib.Path, prefix: str | None) -> None:
        for rel, content in self.dirs.items():
            if prefix is None or rel == prefix or rel.startswith(prefix + "/"):
                write_skill(root / rel, content)

    def __call__(
        self,
        tool: str,
        args: list[str],
        cwd: _pathlib.Path | None,
    ) -> runner_module.ToolResult | None:
        if tool != "git" or args == ["--version"]:
            return None
        if args[0] == "clone":
            dest = _pathlib.Path(args[-1])
            dest.mkdir(parents=True, exist_ok=True)
            (dest / ".git").mkdir(exist_ok=True)
            if "--no-checkout" not in args:
                self._materialize(dest, None)
            return None
        if args[:2] == ["sparse-checkout", "set"]:
            self.sparse = args[2]
            return None
        if args == ["checkout"]:
            assert cwd is not None
            self._materialize(cwd, self.sparse)
            if self.on_checkout is not None:
                self.on_checkout(cwd)
            return None
        if args[0] == "ls-tree":
            names = sorted(
                {rel.split("/")[1] for rel in self.dirs if rel.startswith("skills/")}
            )
            return runner_module.ToolResult(tool, args, 0, stdout="\n".join(names) + "\n")
        return None


@_pytest.fixture
def make_runner() -> _typing.Callable[..., FakeRunner]:
    """Factory for FakeRunner instances."""
    return FakeRunner


@_pytest.fixture
def make_git() -> _typing.Callable[[dict[str, str]], FakeGit]:
    """Factory for FakeGit repositories."""
    return FakeGit
