"""``bulkctl`` entry point."""

from __future__ import annotations

import click
from pydantic import ValidationError

from bulkctl import __version__
from bulkctl.commands import register_commands
from bulkctl.commands._context import AppContext
from bulkctl.config.settings import BulkSettings


def _load_settings(config_path: str | None, **flags: bool) -> BulkSettings:
    try:
        return BulkSettings.from_cli(config_path=config_path, **flags)
    except ValidationError as exc:
        raise click.ClickException(f"Invalid configuration: {exc}") from exc


@click.group(name="bulkctl", invoke_without_command=True)
@click.version_option(__version__, prog_name="bulkctl")
@click.option("--json", "json_output", is_flag=True, help="Print the run summary as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print no summary when the run succeeds.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging and the list of log files.")
@click.option("--log-json", is_flag=True, help="Emit log records as JSON lines.")
@click.option(
    "-c",
    "--config",
    "config_path",
    metavar="PATH",
    help="Use this TOML file instead of searching for bulkctl.toml.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, **flags: bool) -> None:
    """Batch a stream of commands into timestamped block logs.

    Block lines go to stdout; summaries and logs go to stderr.
    """
    ctx.obj = AppContext(_load_settings(config_path, **flags))
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
