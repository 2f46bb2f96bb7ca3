"""Block log writer — one file per flushed block, echoed to stdout.

Each block is rendered as a single line, ``"<tag>: cmd1, cmd2, ..."``,
and the same line goes to ``<log_dir>/<tag><timestamp>.log`` and to the
output stream.  Blocks flushed within the same second share a file name;
the later block replaces the earlier file.

INVARIANT: write() never raises for I/O failures.  It reports them by
returning False so the caller can keep the block for a retry.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import IO

import click
import structlog

DEFAULT_TAG = "bulk"
LOG_SUFFIX = ".log"

log = structlog.get_logger(__name__)


def render_block(commands: Sequence[str], *, tag: str = DEFAULT_TAG) -> str:
    """Render *commands* as one comma-separated line prefixed by *tag*."""
    return f"{tag}: {', '.join(commands)}"


def block_log_path(log_dir: Path, timestamp: str, *, tag: str = DEFAULT_TAG) -> Path:
    """File that holds the block stamped *timestamp*."""
    return log_dir / f"{tag}{timestamp}{LOG_SUFFIX}"


class FileBlockLogger:
    """Write each block to its own log file and echo it to a stream.

    Args:
        log_dir: Directory for the ``<tag><timestamp>.log`` files.
            Created on first write if missing.
        tag: Prefix for both the rendered line and the file name.
        stream: Echo destination.  None means the current stdout.
    """

    def __init__(
        self,
        log_dir: Path,
        *,
        tag: str = DEFAULT_TAG,
        stream: IO[str] | None = None,
    ) -> None:
        self.log_dir = log_dir
        self.tag = tag
        self._stream = stream
        self.written: list[Path] = []

    def write(self, timestamp: str, commands: Sequence[str]) -> bool:
        """Write one block.  Returns False (and writes nothing) on failure."""
        if not timestamp or not commands:
            return False

        path = block_log_path(self.log_dir, timestamp, tag=self.tag)
        line = render_block(commands, tag=self.tag)
        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8") as fh:
                fh.write(line + "\n")
        except OSError as exc:
            log.warning("block.write_failed", path=str(path), error=str(exc))
            return False

        click.echo(line, file=self._stream)
        self.written.append(path)
        log.debug("block.written", path=str(path), commands=len(commands))
        return True
