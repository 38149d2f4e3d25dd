"""Tests for SKILL.md metadata parsing."""

import pathlib as _pathlib

import pytest as _pytest

import skillhub.skills.manifest as manifest


class TestParseFrontmatter:
    """Tests for the front-matter block parser."""

    def test_all_fields(self) -> None:
        """name, description and tags are extracted."""
        text = (
            "---\n"
            "name: PDF Tools\n"
            "description: Work with PDF files\n"
            "tags: [pdf, documents]\n"
            "---\n"
            "# Ignored heading\n"
        )
        meta = manifest.parse_frontmatter(text)
        assert meta.name == "PDF Tools"
        assert meta.description == "Work with PDF files"
        assert meta.tags == ["pdf", "documents"]

    def test_quoted_values(self) -> None:
        """One layer of surrounding quotes is removed."""
        text = "---\nname: \"Quoted\"\ndescription: 'single'\n---\n"
        meta = manifest.parse_frontmatter(text)
        assert meta.name == "Quoted"
        assert meta.description == "single"

    def test_value_with_colon(self) -> None:
        """Only the first colon separates key from value."""
        meta = manifest.parse_frontmatter("---\ndescription: Use it: often\n---\n")
        assert meta.description == "Use it: often"

    def test_crlf_line_endings(self) -> None:
        """Windows line endings parse the same as Unix ones."""
        text = "---\r\nname: Win\r\ndescription: CRLF file\r\n---\r\nbody\r\n"
        meta = manifest.parse_frontmatter(text)
        assert meta.name == "Win"
        assert meta.description == "CRLF file"

    def test_comments_blank_lines_and_unknown_keys(self) -> None:
        """Comments, blank lines, unknown keys and keyless lines are ignored."""
        text = "---\n# comment\n\nlicense: MIT\njust text\nname: Real\n---\n"
        meta = manifest.parse_frontmatter(text)
        assert meta.name == "Real"
        assert meta.description is None
        assert meta.tags == []

    def test_key_must_touch_colon(self) -> None:
        """A space between key and colon makes the line unknown."""
        text = "---\nname : Spaced\ntags : a, b\ndescription: Kept\n---\n"
        meta = manifest.parse_frontmatter(text)
        assert meta.name is None
        assert meta.tags == []
        assert meta.description == "Kept"

    def test_empty_values_are_unset(self) -> None:
        """Blank values leave fields unset."""
        meta = manifest.parse_frontmatter("---\nname:   \ndescription: \"\"\ntags: []\n---\n")
        assert meta.name is None
        assert meta.description is None
        assert meta.tags == []

    def test_no_opening_delimiter(self) -> None:
        """Text not starting with '---' has no front matter."""
        meta = manifest.parse_frontmatter("name: X\n---\n")
        assert meta == manifest.ManifestMetadata()

    def test_unterminated_block(self) -> None:
        """An unclosed block is ignored."""
        meta = manifest.parse_frontmatter("---\nname: X\ndescription: Y\n")
        assert meta.name is None

    def test_empty_block(self) -> None:
        """'---' immediately followed by '---' yields nothing."""
        meta = manifest.parse_frontmatter("---\n---\n# Title\n")
        assert meta.name is None


class TestParseTags:
    """Tests for tag list parsing."""

    @_pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("[a, b, c]", ["a", "b", "c"]),
            ("a, b", ["a", "b"]),
            ("single", ["single"]),
            ("['x', \"y\"]", ["x", "y"]),
            ("[a, , b,]", ["a", "b"]),
            ("[a, b, a]", ["a", "b"]),
            ("[]", []),
        ],
    )
    def test_forms(self, raw: str, expected: list[str]) -> None:
        """Bracketed, comma-separated and single forms are accepted."""
        assert manifest.parse_tags(raw) == expected


class TestParseFallback:
    """Tests for the Markdown body heuristic."""

    def test_heading_and_first_paragraph(self) -> None:
        """First '# ' heading is the name, next plain line the description."""
        text = "Intro line\n# My Skill\n\n## Usage\nDoes useful things.\nMore.\n"
        meta = manifest.parse_fallback(text)
        assert meta.name == "My Skill"
        assert meta.description == "Does useful things."

    def test_subheadings_are_not_names(self) -> None:
        """'## ' headings do not count as the title."""
        meta = manifest.parse_fallback("## Not a title\ntext\n")
        assert meta.name is None
        assert meta.description is None

    def test_skips_front_matter(self) -> None:
        """The body heuristic starts after the front-matter block."""
        text = "---\ntags: a\n---\n# Title\nDescription here\n"
        meta = manifest.parse_fallback(text)
        assert meta.name == "Title"
        assert meta.description == "Description here"


class TestParseManifest:
    """Tests for the combined parser."""

    def test_front_matter_wins(self) -> None:
        """Front-matter values are not overridden by the body."""
        text = "---\nname: FM Name\ndescription: FM Desc\n---\n# Body Name\nBody desc\n"
        meta = manifest.parse_manifest(text)
        assert meta.name == "FM Name"
        assert meta.description == "FM Desc"

    def test_fallback_fills_missing_fields(self) -> None:
        """Missing fields come from the body; tags stay from front matter."""
        text = "---\nname: FM Name\ntags: [x]\n---\n# Body Name\nBody desc\n"
        meta = manifest.parse_manifest(text)
        assert meta.name == "FM Name"
        assert meta.description == "Body desc"
        assert meta.tags == ["x"]

    def test_plain_markdown(self) -> None:
        """A file with no front matter uses the body only."""
        meta = manifest.parse_manifest("# Plain\nJust markdown.\n")
        assert meta.to_dict() == {"name": "Plain", "description": "Just markdown.", "tags": []}

    def test_empty_text(self) -> None:
        """Empty input yields empty metadata."""
        meta = manifest.parse_manifest("")
        assert not meta.is_complete
        assert meta.tags == []


class TestReadManifest:
    """Tests for reading SKILL.md from disk."""

    def test_reads_file(self, tmp_path: _pathlib.Path) -> None:
        """Content is read as UTF-8."""
        path = tmp_path / "SKILL.md"
        path.write_text("---\nname: Café\ndescription: Ünïcode\n---\n", encoding="utf-8")
        meta = manifest.read_manifest(path)
        assert meta.name == "Café"
        assert meta.description == "Ünïcode"

    def test_invalid_utf8_is_replaced(self, tmp_path: _pathlib.Path) -> None:
        """Undecodable bytes do not prevent parsing."""
        path = tmp_path / "SKILL.md"
        path.write_bytes(b"---\nname: Bad\xff\ndescription: ok\n---\n")
        meta = manifest.read_manifest(path)
        assert meta.name is not None and meta.name.startswith("Bad")
        assert meta.description == "ok"

    def test_unreadable_file(self, tmp_path: _pathlib.Path) -> None:
        """A missing file yields empty metadata instead of raising."""
        meta = manifest.read_manifest(tmp_path / "missing.md")
        assert meta == manifest.ManifestMetadata()
