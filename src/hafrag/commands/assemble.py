"""Command: assemble configuration files from a manifest."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from hafrag.commands._base import HafragCommand

if TYPE_CHECKING:
    from hafrag.commands._context import AppContext


@click.command(
    cls=HafragCommand,
    examples="""\
  hafrag assemble site.toml
  hafrag assemble site.toml --dry-run
  hafrag --json assemble site.toml --require-nonempty""",
)
@click.argument("manifest", type=click.Path(dir_okay=False))
@click.option("--dry-run", is_flag=True, help="Print assembled files instead of writing them.")
@click.option(
    "--require-nonempty",
    is_flag=True,
    help="Fail when a target file would have no fragments.",
)
@click.pass_obj
def assemble(
    app: AppContext,
    manifest: str,
    dry_run: bool,
    require_nonempty: bool,
) -> None:
    """Validate, order, and write every target file declared in MANIFEST."""
    from hafrag.services.assembly import AssemblyService

    loaded = app.load_manifest(manifest, "assemble")
    app.emit(
        app.service(AssemblyService).assemble(
            loaded,
            write=not dry_run,
            require_nonempty=require_nonempty or None,
        )
    )
