"""Subcommand modules for hafrag.

Provides register_commands() which uses deferred imports to keep
``hafrag --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register command groups and standalone commands on the root CLI group."""
    # --- Groups ---
    from hafrag.commands.members import members

    cli.add_command(members)

    # --- Standalone commands ---
    from hafrag.commands.assemble import assemble
    from hafrag.commands.export import export

    cli.add_command(assemble)
    cli.add_command(export)
