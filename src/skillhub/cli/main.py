"""
Main CLI entry point for SkillHub.

Provides the command-line interface using Click. Every command goes
through skillhub.commands, so failures arrive as data and are printed
as ``Error: ...`` (or a JSON error object with --json) with exit code 1.
"""

import json as _json
import logging as _logging
import sys as _sys
import typing as _typing

import click as _click
import rich.console as _rich_console
import rich.logging as _rich_logging
import rich.table as _rich_table
import yaml as _yaml

import skillhub
import skillhub.commands as commands
import skillhub.config as config
import skillhub.errors as errors
import skillhub.install as install
import skillhub.platforms as platforms

# Custom Click context settings for better help formatting
CONTEXT_SETTINGS: dict[str, _typing.Any] = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 100,
}

_PLATFORM_CHOICE = _click.Choice(list(platforms.PLATFORM_KEYS), case_sensitive=False)


def _configure_logging(verbose: bool) -> None:
    """Send skillhub logs to stderr through rich."""
    handler = _rich_logging.RichHandler(
        console=_rich_console.Console(stderr=True),
        show_path=False,
        rich_tracebacks=verbose,
    )
    logger = _logging.getLogger("skillhub")
    logger.handlers[:] = [handler]
    logger.setLevel(_logging.DEBUG if verbose else _logging.WARNING)
    logger.propagate = False


def _emit(
    result: commands.CommandResult,
    json_output: bool,
    render: _typing.Callable[[_typing.Any], None],
) -> None:
    """Print a command result and exit 1 on failure."""
    if json_output:
        if result.ok:
            _click.echo(_json.dumps(result.value, indent=2))
        else:
            _click.echo(_json.dumps({"error": result.error}, indent=2))
            raise SystemExit(1)
        return

    if not result.ok:
        _click.echo(f"Error: {result.message}", err=True)
        raise SystemExit(1)
    render(result.value)


def _echo_lines(values: list[str], empty: str) -> None:
    if not values:
        _click.echo(empty)
        return
    for value in values:
        _click.echo(value)


@_click.group(context_settings=CONTEXT_SETTINGS)
@_click.version_option(skillhub.__version__, "-v", "--version", prog_name="skillhub")
@_click.option("--verbose", is_flag=True, help="Enable debug logging")
@_click.pass_context
def cli(ctx: _click.Context, verbose: bool) -> None:
    """
    SkillHub - install and manage agent skills.

    \b
    Examples:
        skillhub platforms                              # Detected agents
        skillhub list --platform claude                 # Installed skills
        skillhub install pdf anthropics/skills --sub-path skills/pdf
        skillhub install pdf anthropics/skills --sub-path pdf --all
        skillhub uninstall pdf ~/.claude/skills/pdf
    """
    try:
        settings = config.load_settings()
    except errors.SkillHubError as e:
        _click.echo(f"Error: {e}", err=True)
        raise SystemExit(1) from None

    if verbose:
        settings.verbose = True
    _configure_logging(settings.verbose)

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


# =============================================================================
# Discovery
# =============================================================================


@cli.command(name="platforms")
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
def platforms_cmd(json_output: bool) -> None:
    """Show which agent platforms are present on this machine."""
    result = commands.detect_platforms()

    def render(detected: list[str]) -> None:
        for platform in platforms.PLATFORMS:
            mark = "✓" if platform.key in detected else "✗"
            _click.echo(f"{mark} {platform.key:<12} {platform.label}")

    _emit(result, json_output, render)


@cli.command(name="list")
@_click.option(
    "--platform",
    "platform_key",
    type=_PLATFORM_CHOICE,
    default="claude",
    show_default=True,
    help="Platform to list",
)
@_click.option(
    "--project-root",
    type=_click.Path(file_okay=False),
    default=None,
    help="List the project's skills instead of global ones",
)
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def list_cmd(
    ctx: _click.Context,
    platform_key: str,
    project_root: str | None,
    json_output: bool,
) -> None:
    """List installed skills with their SKILL.md metadata."""
    settings: config.Settings = ctx.obj["settings"]
    result = commands.list_installed_skills(platform_key, project_root, settings=settings)

    def render(found: list[dict[str, _typing.Any]]) -> None:
        if not found:
            _click.echo("No skills installed.")
            return
        table = _rich_table.Table(title=f"Installed skills ({platform_key})")
        table.add_column("ID", style="bold")
        table.add_column("Name")
        table.add_column("Description", overflow="fold")
        table.add_column("Tags")
        for item in found:
            table.add_row(
                item["id"],
                item["name"] or "",
                item["description"] or "",
                ", ".join(item["tags"]),
            )
        _rich_console.Console().print(table)

    _emit(result, json_output, render)


@cli.command(name="ids")
@_click.argument("platform_key", metavar="PLATFORM", type=_PLATFORM_CHOICE)
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
def ids_cmd(platform_key: str, json_output: bool) -> None:
    """List installed skill ids for a platform."""
    result = commands.list_installed_ids(platform_key)
    _emit(result, json_output, lambda ids: _echo_lines(ids, "No skills installed."))


@cli.command(name="anywhere")
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
def anywhere_cmd(json_output: bool) -> None:
    """List skill ids installed on any detected platform."""
    result = commands.installed_anywhere()
    _emit(result, json_output, lambda ids: _echo_lines(ids, "No skills installed."))


@cli.command(name="where")
@_click.argument("skill_ids", nargs=-1, required=True)
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
def where_cmd(skill_ids: tuple[str, ...], json_output: bool) -> None:
    """Show which platforms have each skill installed."""
    result = commands.installed_platforms_for(skill_ids)

    def render(mapping: dict[str, list[str]]) -> None:
        for skill_id in skill_ids:
            found = mapping.get(skill_id)
            _click.echo(f"{skill_id}: {', '.join(found) if found else '(not installed)'}")

    _emit(result, json_output, render)


# =============================================================================
# Install / uninstall
# =============================================================================


@cli.command(name="install")
@_click.argument("skill_id")
@_click.argument("repo")
@_click.option("--sub-path", default=None, help="Directory inside the repository holding the skill")
@_click.option(
    "--platform",
    "platform_key",
    type=_PLATFORM_CHOICE,
    default=None,
    help="Target platform (default: claude)",
)
@_click.option(
    "--project-root",
    type=_click.Path(file_okay=False),
    default=None,
    help="Install into this project instead of globally",
)
@_click.option("--all", "all_platforms", is_flag=True, help="Install on every detected platform")
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def install_cmd(
    ctx: _click.Context,
    skill_id: str,
    repo: str,
    sub_path: str | None,
    platform_key: str | None,
    project_root: str | None,
    all_platforms: bool,
    json_output: bool,
) -> None:
    """Install SKILL_ID from REPO (owner/repo or a git URL)."""
    settings: config.Settings = ctx.obj["settings"]
    installer = install.Installer(settings)

    if all_platforms:
        if platform_key or project_root:
            raise _click.UsageError("--all cannot be combined with --platform or --project-root")
        result = commands.install_to_all(skill_id, repo, sub_path, installer=installer)

        def render_all(value: dict[str, list[str]]) -> None:
            if value["installed"]:
                _click.echo(f"Installed {skill_id} on: {', '.join(value['installed'])}")
            if value["skipped"]:
                _click.echo(f"Already installed on: {', '.join(value['skipped'])}")
            if not value["installed"] and not value["skipped"]:
                _click.echo("No agent platforms detected.")

        _emit(result, json_output, render_all)
        return

    result = commands.install_skill(
        skill_id,
        repo,
        sub_path,
        platform_key,
        project_root,
        installer=installer,
    )
    _emit(result, json_output, _click.echo)


@cli.command(name="uninstall")
@_click.argument("skill_id")
@_click.argument("install_path")
@_click.option(
    "--project-root",
    type=_click.Path(file_okay=False),
    default=None,
    help="Also accept paths inside this project's skills directories",
)
@_click.option("--yes", is_flag=True, help="Skip confirmation")
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
def uninstall_cmd(
    skill_id: str,
    install_path: str,
    project_root: str | None,
    yes: bool,
    json_output: bool,
) -> None:
    """Delete the skill directory INSTALL_PATH (must be named SKILL_ID)."""
    if not yes and not json_output and not _click.confirm(f"Delete {install_path}?"):
        _click.echo("Cancelled.")
        return

    result = commands.uninstall_skill(skill_id, install_path, project_root)
    _emit(result, json_output, _click.echo)


# =============================================================================
# Config
# =============================================================================


@cli.group(name="config")
def config_cmd() -> None:
    """Configuration commands."""
    pass


@config_cmd.command(name="show")
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def config_show(ctx: _click.Context, json_output: bool) -> None:
    """Show the effective configuration."""
    settings: config.Settings = ctx.obj["settings"]
    data = settings.to_dict()
    if json_output:
        _click.echo(_json.dumps(data, indent=2))
        return

    yaml_text = _yaml.safe_dump(data, sort_keys=False)
    if _sys.stdout.isatty():
        import rich.syntax as _rich_syntax

        _rich_console.Console().print(_rich_syntax.Syntax(yaml_text, "yaml"))
    else:
        _click.echo(yaml_text.rstrip())


@config_cmd.command(name="path")
def config_path() -> None:
    """Show the user config file location."""
    path = config.get_user_config_path()
    if path is None:
        _click.echo("(no home directory)")
        return
    exists = "✓" if path.exists() else "(not found)"
    _click.echo(f"{path} {exists}")


def main() -> None:
    """Main entry point with correct program name."""
    cli(prog_name="skillhub")


if __name__ == "__main__":
    main()
