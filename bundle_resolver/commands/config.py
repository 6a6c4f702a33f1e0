"""Configuration commands for the bundle-resolver CLI."""

from __future__ import annotations

import sys
from pathlib import Path

import click
import yaml

from ..console import console
from ..console import err_console
from ..errors import ConfigError
from ..settings import BundlerSettings
from ..utils.error_format import error_line
from ..utils.error_format import escape_markup


@click.group(invoke_without_command=True)
@click.pass_context
def config(ctx: click.Context):
    """Inspect and change bundler settings.

    Settings are merged from ~/.bundle-resolver/settings.yaml,
    .bundle-resolver/settings.yaml and .bundle-resolver/settings.local.yaml.
    """
    if ctx.invoked_subcommand is None:
        click.echo("\n" + ctx.get_help())
        ctx.exit()


@config.command(name="show")
@click.option("--config", "-c", "config_file", type=click.Path(exists=True, dir_okay=False), help="Extra settings file")
def config_show(config_file: str | None):
    """Show the effective bundler options."""
    try:
        options = BundlerSettings().load_options(Path(config_file) if config_file else None)
    except ConfigError as e:
        err_console.print(error_line(e))
        sys.exit(1)

    console.print("[bold]Effective bundler options:[/bold]")
    click.echo(yaml.dump({"bundler": options.model_dump()}, default_flow_style=False, sort_keys=False))


@config.command(name="set")
@click.argument("key")
@click.argument("value")
@click.option("--local", "scope_flag", flag_value="local", help="Set in local settings (gitignored)")
@click.option("--project", "scope_flag", flag_value="project", help="Set in project settings (default)")
@click.option("--global", "scope_flag", flag_value="global", help="Set in user settings")
def config_set(key: str, value: str, scope_flag: str | None):
    """Set a bundler option.

    VALUE is parsed as YAML, so lists and booleans can be given inline:

        bundle-resolver config set exclude "[fs, net]"
        bundle-resolver config set addNodeGlobals false --local
    """
    scope = scope_flag or "project"
    try:
        parsed = yaml.safe_load(value)
    except yaml.YAMLError as e:
        err_console.print(f"[red]Error:[/red] Invalid value for {escape_markup(key)}: {escape_markup(e)}")
        sys.exit(1)

    try:
        BundlerSettings().set_option(key, parsed, scope=scope)
    except ConfigError as e:
        err_console.print(error_line(e))
        sys.exit(1)

    console.print(f"[green]✓ Set bundler.{escape_markup(key)} in {scope} settings[/green]")
