"""Command: batch commands from stdin (or a file) into bulk logs."""

from __future__ import annotations

from pathlib import Path
from typing import IO, TYPE_CHECKING

import click

from bulkctl.commands._base import BulkCommand

if TYPE_CHECKING:
    from bulkctl.commands._context import AppContext


@click.command(
    cls=BulkCommand,
    examples="""\
  printf 'a\\nb\\nc\\n' | bulkctl run 2
  bulkctl run 3 --input commands.txt --log-dir logs/
  bulkctl --json run 5 < commands.txt
  bulkctl run --tag deploy 10""",
)
@click.argument("block_size", type=click.IntRange(min=1), required=False)
@click.option(
    "-i",
    "--input",
    "source",
    type=click.File("r", encoding="utf-8"),
    default="-",
    show_default="stdin",
    help="Read commands from a file instead of stdin.",
)
@click.option(
    "--log-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory for block log files (default: [block] log_dir).",
)
@click.option("--tag", default=None, help="Prefix for block lines and log file names.")
@click.pass_obj
def run(
    app: AppContext,
    block_size: int | None,
    source: IO[str],
    log_dir: Path | None,
    tag: str | None,
) -> None:
    """Group input lines into blocks of BLOCK_SIZE and log each block.

    A line containing only '{' starts a dynamic block that ends at the
    matching '}' regardless of size.  A line 'EOF' stops reading.
    """
    from bulkctl.services.bulk import BulkService

    app.emit(
        BulkService(app.settings).run(
            source,
            block_size=block_size,
            log_dir=log_dir,
            tag=tag,
        )
    )
