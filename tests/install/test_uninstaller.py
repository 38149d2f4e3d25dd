"""Tests for skill removal."""

import pathlib as _pathlib
import typing as _typing

import pytest as _pytest

import skillhub.errors as errors
import skillhub.install.uninstaller as uninstaller

MakeSkill = _typing.Callable[..., _pathlib.Path]


class TestUninstall:
    """Tests for uninstall."""

    def test_removes_directory(self, home: _pathlib.Path, make_skill: MakeSkill) -> None:
        """A valid install is removed recursively."""
        skill = make_skill(home / ".claude" / "skills" / "pdf")
        (skill / "scripts").mkdir()
        (skill / "scripts" / "run.py").write_text("pass\n")

        removed = uninstaller.uninstall("pdf", skill)

        assert removed == skill
        assert not skill.exists()
        assert (home / ".claude" / "skills").is_dir()

    def test_accepts_string_path(self, home: _pathlib.Path, make_skill: MakeSkill) -> None:
        """String paths are accepted."""
        skill = make_skill(home / ".gemini" / "skills" / "docx")
        uninstaller.uninstall("docx", str(skill))
        assert not skill.exists()

    def test_blank_inputs(self, home: _pathlib.Path) -> None:
        """Blank id or path raise BlankFieldError."""
        with _pytest.raises(errors.BlankFieldError):
            uninstaller.uninstall("", home / ".claude" / "skills" / "pdf")
        with _pytest.raises(errors.BlankFieldError) as exc_info:
            uninstaller.uninstall("pdf", "  ")
        assert exc_info.value.field == "install path"

    def test_missing_path(self, home: _pathlib.Path) -> None:
        """A path that is already gone raises InstallPathNotFoundError."""
        with _pytest.raises(errors.InstallPathNotFoundError) as exc_info:
            uninstaller.uninstall("pdf", home / ".claude" / "skills" / "pdf")
        assert exc_info.value.kind == "not_found"

    def test_unsafe_path(
        self,
        home: _pathlib.Path,  # noqa: ARG002
        tmp_path: _pathlib.Path,
        make_skill: MakeSkill,
    ) -> None:
        """Paths outside every skills location are refused and kept."""
        outside = make_skill(tmp_path / "elsewhere" / "pdf")
        with _pytest.raises(errors.UnsafePathError):
            uninstaller.uninstall("pdf", outside)
        assert outside.exists()

    def test_home_itself_is_refused(self, home: _pathlib.Path) -> None:
        """The home directory can never be removed."""
        with _pytest.raises(errors.ValidationError):
            uninstaller.uninstall(home.name, home)
        assert home.exists()

    def test_identifier_mismatch(self, home: _pathlib.Path, make_skill: MakeSkill) -> None:
        """The last path segment must equal the id."""
        skill = make_skill(home / ".claude" / "skills" / "pdf")
        with _pytest.raises(errors.IdentifierMismatchError) as exc_info:
            uninstaller.uninstall("docx", skill)
        assert exc_info.value.skill_id == "docx"
        assert skill.exists()

    def test_illegal_identifier(self, home: _pathlib.Path, make_skill: MakeSkill) -> None:
        """Ids with separators are rejected before the path is examined."""
        skill = make_skill(home / ".claude" / "skills" / "pdf")
        with _pytest.raises(errors.InvalidIdentifierError):
            uninstaller.uninstall("skills/pdf", skill)
        assert skill.exists()

    def test_project_skill_requires_project_root(
        self,
        home: _pathlib.Path,  # noqa: ARG002
        tmp_path: _pathlib.Path,
        make_skill: MakeSkill,
    ) -> None:
        """Project installs outside home are removable only with their project root."""
        project = tmp_path / "proj"
        skill = make_skill(project / ".claude" / "skills" / "pdf")

        with _pytest.raises(errors.UnsafePathError):
            uninstaller.uninstall("pdf", skill)

        uninstaller.uninstall("pdf", skill, project_root=project)
        assert not skill.exists()

    def test_symlinked_install_keeps_target(
        self,
        home: _pathlib.Path,
        tmp_path: _pathlib.Path,
        make_skill: MakeSkill,
    ) -> None:
        """Removing a linked install drops the link only."""
        shared = make_skill(tmp_path / "shared" / "pdf")
        skills_dir = home / ".claude" / "skills"
        skills_dir.mkdir(parents=True)
        link = skills_dir / "pdf"
        link.symlink_to(shared, target_is_directory=True)

        uninstaller.uninstall("pdf", link)

        assert not link.exists() and not link.is_symlink()
        assert (shared / "SKILL.md").is_file()
