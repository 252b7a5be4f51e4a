"""Command: export members to the shared store."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from hafrag.commands._base import HafragCommand

if TYPE_CHECKING:
    from hafrag.commands._context import AppContext


@click.command(
    cls=HafragCommand,
    examples="""\
  hafrag export members.toml
  hafrag export members.toml --host web01.example.com""",
)
@click.argument("manifest", type=click.Path(dir_okay=False))
@click.option("--host", default=None, help="Exporting host name (default: this host's FQDN).")
@click.pass_obj
def export(app: AppContext, manifest: str, host: str | None) -> None:
    """Declare the [[member]] tables of MANIFEST for collection elsewhere."""
    from hafrag.services.members import MemberService

    loaded = app.load_manifest(manifest, "export")
    app.emit(app.service(MemberService).export(loaded, host=host))
