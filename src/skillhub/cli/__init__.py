"""
CLI module for SkillHub.

Provides the command-line interface using Click.
"""

from skillhub.cli.main import cli, main

__all__ = ["main", "cli"]
