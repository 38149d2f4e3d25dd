"""
Shared constants for SkillHub.

This module provides a single source of truth for default values
that are used across multiple modules.
"""

MANIFEST_FILENAME = "SKILL.md"
"""Name of the manifest file inside a skill directory."""

DEFAULT_MANIFEST_SEARCH_DEPTH = 3
"""How many directory levels below a skill root are searched for SKILL.md."""

DEFAULT_GIT_HOST = "https://github.com"
"""Host used to expand ``owner/repo`` shorthand."""

DEFAULT_TEMP_PREFIX = "skillhub_clone"
"""Prefix of staging directories created under the system temp root."""

DEFAULT_HINT_LIMIT = 12
"""Maximum number of sibling directory names listed when a sub-path is missing."""

DEFAULT_TOOL_TIMEOUT = 300.0
"""Timeout in seconds for a single git/npx invocation."""

DEFAULT_TARGET_PLATFORM = "claude"
"""Platform used by install when no target platform is given."""

SKILLS_PREFIX = "skills"
"""Conventional directory holding skills inside a repository."""
