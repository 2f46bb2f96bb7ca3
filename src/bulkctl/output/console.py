"""In-memory Rich console for building the run summary.

Summaries are rendered to a string first and echoed by the CLI, so the
console never touches a terminal.  Rich drops colour codes on its own
when the final destination is not a TTY.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

SUMMARY_WIDTH = 100

BULK_THEME = Theme(
    {
        "bulk.ok": "bold green",
        "bulk.error": "bold red",
        "bulk.warning": "yellow",
        "bulk.key": "dim",
        "bulk.path": "cyan",
        "bulk.count": "bold",
    }
)


def create_console(*, no_color: bool = False, width: int = SUMMARY_WIDTH) -> Console:
    """Console writing to a private buffer.  Long paths are never wrapped."""
    return Console(
        file=StringIO(),
        theme=BULK_THEME,
        no_color=no_color,
        highlight=False,
        soft_wrap=True,
        width=width,
    )


def get_output(console: Console) -> str:
    """Text accumulated by a console from :func:`create_console`."""
    buffer = console.file
    if not isinstance(buffer, StringIO):
        raise TypeError("console does not write to an in-memory buffer")
    return buffer.getvalue()
