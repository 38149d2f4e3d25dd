"""
Installed skill discovery and SKILL.md metadata.

A skill is a directory holding a SKILL.md manifest plus supporting files,
installed below an agent platform's skills directory.
"""

from skillhub.skills.discovery import (
    InstalledSkill,
    detected_platforms,
    find_manifest,
    installed_anywhere,
    installed_platforms_for_ids,
    list_installed_ids,
    list_installed_skills,
    list_project_skills,
)
from skillhub.skills.manifest import (
    ManifestMetadata,
    parse_fallback,
    parse_frontmatter,
    parse_manifest,
    read_manifest,
)

__all__ = [
    # Manifest
    "ManifestMetadata",
    "parse_fallback",
    "parse_frontmatter",
    "parse_manifest",
    "read_manifest",
    # Discovery
    "InstalledSkill",
    "detected_platforms",
    "find_manifest",
    "installed_anywhere",
    "installed_platforms_for_ids",
    "list_installed_ids",
    "list_installed_skills",
    "list_project_skills",
]
