"""Per-invocation state shared by the root group and its commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from bulkctl.config.logging import configure_logging
from bulkctl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from bulkctl.config.settings import BulkSettings
    from bulkctl.services.result import ServiceResult


class AppContext:
    """Holds resolved settings and prints service results.

    Block lines own stdout, so every summary line is written to stderr.
    """

    def __init__(self, settings: BulkSettings) -> None:
        self.settings = settings
        self.output = OutputSettings(
            json_output=settings.json_output,
            quiet=settings.quiet,
            verbose=settings.verbose,
        )
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    def emit(self, result: ServiceResult) -> None:
        """Print *result*; exit with status 1 when it failed."""
        if not (result.ok and self.output.quiet):
            click.echo(format_result(result, settings=self.output), err=True)
        if not result.ok:
            raise SystemExit(1)
