"""
Installing and removing skills.

Installation prefers the companion ``skills`` CLI (via npx) and falls back
to git: a sparse checkout when only a sub-directory of the repository is
wanted, a plain clone otherwise.
"""

from skillhub.install.installer import (
    STRATEGY_GIT_CLONE,
    STRATEGY_GIT_SPARSE,
    STRATEGY_SKILLS_CLI,
    InstallAllResult,
    Installer,
    InstallResult,
)
from skillhub.install.repository import (
    normalize_repo_url,
    validate_skill_id,
    validate_sub_path,
)
from skillhub.install.runner import ToolResult, ToolRunner
from skillhub.install.uninstaller import uninstall

__all__ = [
    # Installer
    "Installer",
    "InstallResult",
    "InstallAllResult",
    "STRATEGY_SKILLS_CLI",
    "STRATEGY_GIT_SPARSE",
    "STRATEGY_GIT_CLONE",
    # Inputs
    "normalize_repo_url",
    "validate_skill_id",
    "validate_sub_path",
    # Tools
    "ToolResult",
    "ToolRunner",
    # Removal
    "uninstall",
]
