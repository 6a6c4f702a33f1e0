"""bundle-resolver CLI - inspect the module graph a bundle would contain."""

import asyncio
import json
import logging
import sys
from pathlib import Path

import click
from rich.logging import RichHandler
from rich.table import Table

from .commands.config import config as config_group
from .console import console
from .console import err_console
from .errors import BundleResolverError
from .logging_setup import init_json_logging
from .required_module import RequiredModule
from .resolver import Resolver
from .settings import BundlerSettings
from .utils.error_format import error_line
from .utils.error_format import escape_markup

logger = logging.getLogger(__name__)


@click.group(invoke_without_command=True)
@click.version_option(package_name="bundle-resolver")
@click.option("--log-file", type=click.Path(dir_okay=False), default=None, help="JSONL log file path")
@click.pass_context
def cli(ctx, log_file):
    """bundle-resolver - resolve the module graph reachable from entry files."""
    ctx.ensure_object(dict)
    ctx.obj["log_file"] = log_file
    init_json_logging(log_file)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit()


@cli.command()
@click.argument("entries", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--config", "-c", "config_file", type=click.Path(exists=True, dir_okay=False), help="Extra settings file")
@click.option("--json", "as_json", is_flag=True, help="Print the graph as JSON")
@click.option("--verbose", "-v", is_flag=True, help="Log every resolution step")
@click.pass_context
def graph(ctx, entries: tuple[str, ...], config_file: str | None, as_json: bool, verbose: bool):
    """Resolve ENTRIES and print modules in bundle order."""
    console_handler = None
    if verbose:
        init_json_logging(ctx.obj.get("log_file"), "DEBUG")
        console_handler = RichHandler(console=err_console, show_path=False)
        logging.getLogger("bundle_resolver").addHandler(console_handler)

    try:
        options = BundlerSettings().load_options(Path(config_file) if config_file else None)
        resolver = Resolver(options)
        resolver.initialize()
        modules = asyncio.run(resolver.resolve_entries(entries))
    except BundleResolverError as e:
        logger.error(f"[cli] graph failed: {e}")
        err_console.print(error_line(e))
        sys.exit(1)
    finally:
        if console_handler is not None:
            logging.getLogger("bundle_resolver").removeHandler(console_handler)

    if as_json:
        click.echo(json.dumps([_module_to_dict(m) for m in modules], indent=2))
        return

    table = Table(title="Module Graph")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Module", style="cyan")
    table.add_column("Filename", style="green")
    table.add_column("Deps", justify="right")

    for index, module in enumerate(modules, start=1):
        table.add_row(
            str(index),
            escape_markup(module.module_name),
            escape_markup(module.filename),
            str(len(module.required_modules)),
        )

    console.print(table)
    console.print(f"[dim]{len(modules)} module(s)[/dim]")


def _module_to_dict(module: RequiredModule) -> dict:
    return {
        "module_name": module.module_name,
        "filename": module.filename,
        "required_modules": [child.filename for child in module.required_modules],
    }


cli.add_command(config_group)


def main():
    cli()


if __name__ == "__main__":
    main()
