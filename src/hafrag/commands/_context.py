"""AppContext — shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``. Configures logging, hands out services whose store is
released when the command finishes, and centralizes result emission
(stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from hafrag.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from hafrag.config.settings import HafragSettings
    from hafrag.infrastructure.manifest import Manifest
    from hafrag.services.base import BaseService
    from hafrag.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: HafragSettings) -> None:
        self.settings = settings

        from hafrag.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    def service[S: BaseService](self, service_cls: type[S]) -> S:
        """Build *service_cls* for this run; its store closes with the command."""
        service = service_cls(self.settings)
        click.get_current_context().call_on_close(service.close)
        return service

    def load_manifest(self, path: str, op: str) -> Manifest:
        """Load a manifest, emitting a failed result (exit 1) if it is unusable."""
        from hafrag.domain.errors import InvalidDeclaration
        from hafrag.infrastructure.manifest import load_manifest
        from hafrag.services.result import ServiceResult

        try:
            return load_manifest(Path(path))
        except InvalidDeclaration as exc:
            self.emit(ServiceResult.failure(op, exc))
            raise  # emit() exits; kept for type checkers

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings go to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
