"""Human-readable run summaries.

``render_result`` produces the multi-line summary shown after ``run``;
``render_quiet`` the single status line used with ``--quiet``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from bulkctl.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from bulkctl.services.result import ServiceResult

COUNT_KEYS = ("block_size", "blocks", "commands", "lines")


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Summary of a run: status, counts, warnings, and with *verbose* the
    written files or the error detail."""
    console = create_console()
    if result.ok:
        _render_run(console, result, verbose=verbose)
    else:
        _render_error(console, result, verbose=verbose)
    for warning in result.warnings:
        console.print(Text.assemble(("WARNING", "bulk.warning"), f": {warning}"))
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    if result.ok:
        return f"OK: {result.op}"
    message = result.error.message if result.error else "Unknown error"
    return f"ERROR: {result.op}: {message}"


def _pair(console: Console, key: str, value: Any, style: str = "") -> None:
    console.print(Text.assemble((f"  {key}: ", "bulk.key"), (str(value), style)))


def _render_run(console: Console, result: ServiceResult, *, verbose: bool) -> None:
    data = result.data
    console.print(Text.assemble(("OK", "bulk.ok"), f"  {result.op}"))
    for key in COUNT_KEYS:
        if key in data:
            _pair(console, key, data[key], "bulk.count")
    if data.get("terminated"):
        _pair(console, "terminated", "yes")
    if verbose and data.get("files"):
        _render_files(console, data["files"])


def _render_files(console: Console, files: list[str]) -> None:
    table = Table("#", "Log file", box=None, pad_edge=False)
    for number, path in enumerate(files, start=1):
        table.add_row(str(number), Text(path, style="bulk.path"))
    console.print()
    console.print(table)


def _render_error(console: Console, result: ServiceResult, *, verbose: bool) -> None:
    error = result.error
    message = error.message if error else "Unknown error"
    console.print(Text.assemble(("ERROR", "bulk.error"), f"  {result.op}: ", message))

    # Blocks flushed before the failure are already on disk.
    if result.data.get("blocks"):
        _pair(console, "blocks", result.data["blocks"], "bulk.count")
        _pair(console, "commands", result.data.get("commands", 0), "bulk.count")

    if verbose and error and error.detail:
        _pair(console, "code", error.code)
        for key, value in error.detail.items():
            _pair(console, key, value)
