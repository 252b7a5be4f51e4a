"""Command group: inspect and prune exported members."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from hafrag.commands._base import HafragGroup

if TYPE_CHECKING:
    from hafrag.commands._context import AppContext


@click.group(
    cls=HafragGroup,
    examples="""\
  hafrag members list
  hafrag members list --section api
  hafrag members retract api web01""",
)
def members() -> None:
    """Inspect exported members in the store."""


@members.command(
    "list",
    examples="""\
  hafrag members list
  hafrag --json members list --section api""",
)
@click.option("--section", default=None, help="Only members of this listening service.")
@click.pass_obj
def list_cmd(app: AppContext, section: str | None) -> None:
    """List exported members."""
    from hafrag.services.members import MemberService

    app.emit(app.service(MemberService).list_members(section))


@members.command(examples="  hafrag members retract api web01")
@click.argument("section")
@click.argument("name")
@click.pass_obj
def retract(app: AppContext, section: str, name: str) -> None:
    """Remove member NAME exported for listening service SECTION."""
    from hafrag.services.members import MemberService

    app.emit(app.service(MemberService).retract(section, name))
