"""
SKILL.md metadata extraction.

Only a minimal front-matter dialect is understood: one ``key: value`` pair
per line, for the keys ``name``, ``description`` and ``tags``. Anything the
front matter leaves unset is filled from the document body: the first
level-one heading becomes the name and the first plain line after it the
description.

Parsing never fails. Malformed input yields fewer fields.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import logging as _logging
import pathlib as _pathlib
import typing as _typing

_logger = _logging.getLogger(__name__)

FRONTMATTER_DELIMITER = "---"

_QUOTES = ('"', "'")


@_dataclasses.dataclass
class ManifestMetadata:
    """Metadata derived from a SKILL.md file. Every field is optional."""

    name: str | None = None
    description: str | None = None
    tags: list[str] = _dataclasses.field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        """Whether both name and description are known."""
        return self.name is not None and self.description is not None

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "description": self.description,
            "tags": list(self.tags),
        }


def _unquote(value: str) -> str:
    """Trim and remove one layer of matching surrounding quotes."""
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in _QUOTES:
        value = value[1:-1].strip()
    return value


def _split_frontmatter(text: str) -> tuple[str | None, str]:
    """
    Split normalized text into (front matter block, body).

    The block is None when the text does not open with a delimiter line or
    the delimiter is never closed; the body is then the whole text.
    """
    opening = FRONTMATTER_DELIMITER + "\n"
    if not text.startswith(opening):
        return None, text

    rest = text[len(opening):]
    # Closing delimiter: any later line that starts with '---'
    if rest.startswith(FRONTMATTER_DELIMITER):
        block, after = "", rest
    else:
        end = rest.find("\n" + FRONTMATTER_DELIMITER)
        if end == -1:
            return None, text
        block, after = rest[:end], rest[end + 1:]

    newline = after.find("\n")
    body = "" if newline == -1 else after[newline + 1:]
    return block, body


def parse_tags(raw: str) -> list[str]:
    """
    Parse a tags value.

    Accepts ``[a, b]``, ``a, b`` and ``a``. Tokens are trimmed and
    unquoted; empty tokens and duplicates are dropped.
    """
    raw = raw.strip()
    if raw.startswith("["):
        raw = raw[1:]
    if raw.endswith("]"):
        raw = raw[:-1]

    tags: list[str] = []
    for token in raw.split(","):
        token = _unquote(token)
        if token and token not in tags:
            tags.append(token)
    return tags


def parse_frontmatter(text: str) -> ManifestMetadata:
    """
    Extract name, description and tags from the front-matter block.

    Args:
        text: Raw manifest content.

    Returns:
        ManifestMetadata with whatever the block sets (possibly nothing).
    """
    text = text.replace("\r\n", "\n")
    block, _ = _split_frontmatter(text)
    meta = ManifestMetadata()
    if block is None:
        return meta

    for line in block.split("\n"):
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        key, sep, value = line.partition(":")
        if not sep:
            continue

        if key == "name":
            value = _unquote(value)
            if value:
                meta.name = value
        elif key == "description":
            value = _unquote(value)
            if value:
                meta.description = value
        elif key == "tags":
            tags = parse_tags(value)
            if tags:
                meta.tags = tags

    return meta


def parse_fallback(text: str) -> ManifestMetadata:
    """
    Guess name and description from the Markdown body.

    The first ``# `` heading is the name; the first non-empty, non-heading
    line after it is the description.
    """
    text = text.replace("\r\n", "\n")
    _, body = _split_frontmatter(text)
    meta = ManifestMetadata()

    for line in body.split("\n"):
        stripped = line.strip()
        if meta.name is None:
            if stripped.startswith("# "):
                name = stripped[2:].strip()
                if name:
                    meta.name = name
            continue
        if stripped and not stripped.startswith("#"):
            meta.description = stripped
            break

    return meta


def parse_manifest(text: str) -> ManifestMetadata:
    """
    Parse SKILL.md content into metadata.

    Front matter wins; the body heuristic only fills fields the front
    matter left unset.

    Args:
        text: Raw manifest content.

    Returns:
        Parsed ManifestMetadata. Never raises.
    """
    meta = parse_frontmatter(text)
    if not meta.is_complete:
        fallback = parse_fallback(text)
        if meta.name is None:
            meta.name = fallback.name
        if meta.description is None:
            meta.description = fallback.description
    return meta


def read_manifest(path: _pathlib.Path) -> ManifestMetadata:
    """
    Read and parse a SKILL.md file.

    Unreadable files produce empty metadata and a warning.
    """
    try:
        content = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        _logger.warning("Cannot read manifest %s: %s", path, e)
        return ManifestMetadata()
    return parse_manifest(content)
