"""Root CLI group for hafrag with global flags and command registration."""

from __future__ import annotations

from pathlib import Path

import click

from hafrag import __version__
from hafrag.commands import register_commands
from hafrag.commands._base import HafragGroup
from hafrag.commands._context import AppContext
from hafrag.config.settings import HafragSettings


@click.group(
    cls=HafragGroup,
    invoke_without_command=True,
    examples="""\
  hafrag assemble site.toml --dry-run
  hafrag -C /srv/lb export members.toml
  hafrag --json members list --section api""",
)
@click.version_option(version=__version__, prog_name="hafrag")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output: paths or member ids only.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug logging.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Use this hafrag.toml.")
@click.option(
    "-C",
    "--project-dir",
    type=click.Path(file_okay=False, exists=True, path_type=Path),
    default=None,
    help="Run as if started in this directory.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    project_dir: Path | None,
) -> None:
    """hafrag — assemble HAProxy configuration from ordered fragments."""
    settings = HafragSettings.from_cli(
        config_path=config_path,
        search_from=project_dir.resolve() if project_dir else None,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
